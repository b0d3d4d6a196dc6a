"""Caller identity: bearer token resolution, role checks, request origin."""

from typing import Callable, Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from crudapi.modules.accounts import Account, AuthService, RequestContext
from crudapi.modules.common.exceptions import UnauthorizedError

from .services import get_auth_service

security = HTTPBearer(auto_error=False)


def get_request_context(request: Request) -> RequestContext:
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        ip = forwarded.split(",")[0].strip()
    elif request.client is not None:
        ip = request.client.host
    else:
        ip = "unknown"
    return RequestContext(
        ip=ip,
        browser=request.headers.get("user-agent", ""),
        country=request.headers.get("cf-ipcountry", "XX"),
    )


def get_bearer_token(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> str:
    if credentials is None or credentials.scheme.lower() != "bearer":
        raise UnauthorizedError()
    return credentials.credentials


async def get_current_account(
    token: str = Depends(get_bearer_token),
    auth_service: AuthService = Depends(get_auth_service),
) -> Account:
    return await auth_service.resolve_token(token)


def require_roles(*roles: str) -> Callable[..., object]:
    """Dependency factory admitting only accounts whose role is in ``roles``."""

    async def dependency(account: Account = Depends(get_current_account)) -> Account:
        if account.role not in roles:
            raise UnauthorizedError()
        return account

    return dependency


__all__ = [
    "get_bearer_token",
    "get_current_account",
    "get_request_context",
    "require_roles",
    "security",
]
