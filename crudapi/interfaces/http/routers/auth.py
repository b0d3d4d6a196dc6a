"""Authentication endpoints: login, registration, verification, password reset."""
from dataclasses import asdict

from fastapi import APIRouter, Depends, status

from crudapi.interfaces.http.deps import (
    get_account_service,
    get_auth_service,
    get_bearer_token,
    get_current_account,
    get_request_context,
)
from crudapi.modules.accounts import (
    Account,
    AccountCreateInput,
    AccountInfo,
    AccountService,
    AuthService,
    RequestContext,
)
from crudapi.schemas import (
    AccountInfoResponse,
    AuthResponse,
    ForgotPasswordRequest,
    LoginRequest,
    MessageResponse,
    RegisterRequest,
    ResetPasswordRequest,
    TokenResponse,
    VerifyRequest,
    VerifyResponse,
)

router = APIRouter()


@router.post("/login", response_model=AuthResponse, response_model_exclude_none=True, summary="Log in")
async def login(
    payload: LoginRequest,
    context: RequestContext = Depends(get_request_context),
    auth_service: AuthService = Depends(get_auth_service),
):
    result = await auth_service.login(payload.email, payload.password, context)
    return asdict(result)


@router.post(
    "/register",
    response_model=AuthResponse,
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
    summary="Register a new account",
)
async def register(
    payload: RegisterRequest,
    account_service: AccountService = Depends(get_account_service),
):
    result = await account_service.register(AccountCreateInput(**payload.model_dump()))
    return asdict(result)


@router.post("/verify", response_model=VerifyResponse, summary="Verify an e-mail")
async def verify(
    payload: VerifyRequest,
    account_service: AccountService = Depends(get_account_service),
):
    account = await account_service.verify(payload.id)
    return VerifyResponse(email=account.email, verified=account.verified)


@router.post("/forgot", response_model=MessageResponse, response_model_exclude_none=True, summary="Request a password reset")
async def forgot_password(
    payload: ForgotPasswordRequest,
    context: RequestContext = Depends(get_request_context),
    account_service: AccountService = Depends(get_account_service),
):
    reset = await account_service.forgot_password(payload.email, context)
    return account_service.forgot_password_response(reset)


@router.post("/reset", response_model=MessageResponse, response_model_exclude_none=True, summary="Reset a password")
async def reset_password(
    payload: ResetPasswordRequest,
    context: RequestContext = Depends(get_request_context),
    account_service: AccountService = Depends(get_account_service),
):
    await account_service.reset_password(payload.id, payload.password, context)
    return MessageResponse(msg="PASSWORD_CHANGED")


@router.get("/token", response_model=TokenResponse, summary="Refresh the access token")
async def refresh_token(
    token: str = Depends(get_bearer_token),
    context: RequestContext = Depends(get_request_context),
    auth_service: AuthService = Depends(get_auth_service),
):
    return TokenResponse(token=await auth_service.refresh_token(token, context))


@router.get("/me", response_model=AccountInfoResponse, response_model_exclude_none=True, summary="Current account")
async def me(account: Account = Depends(get_current_account)):
    return AccountInfo.from_account(account)
