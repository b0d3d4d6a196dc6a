"""Administrative user management."""
from fastapi import APIRouter, Depends, Request, Response

from crudapi.core.container import ApplicationContainer
from crudapi.interfaces.http.deps import get_container, get_user_admin_service, require_roles
from crudapi.modules.accounts import ADMIN_ROLES
from crudapi.modules.users import UserAdminService
from crudapi.schemas import PaginatedResponse, SuccessResponse, UserCreate, UserResponse, UserUpdate

router = APIRouter(dependencies=[Depends(require_roles(*ADMIN_ROLES))])


@router.get("", response_model=PaginatedResponse[UserResponse])
async def list_users(
    request: Request,
    container: ApplicationContainer = Depends(get_container),
    service: UserAdminService = Depends(get_user_admin_service),
):
    result = await service.list_users(
        request.query_params,
        default_limit=container.settings.pagination.default_limit,
        max_limit=container.settings.pagination.export_limit,
    )
    return PaginatedResponse[UserResponse].from_result(result, UserResponse)


@router.get("/{user_id}", response_model=SuccessResponse[UserResponse])
async def get_user(user_id: int, service: UserAdminService = Depends(get_user_admin_service)):
    account = await service.get_user(user_id)
    return SuccessResponse[UserResponse](payload=UserResponse.model_validate(account))


@router.post("", response_model=SuccessResponse[UserResponse], status_code=201)
async def create_user(payload: UserCreate, service: UserAdminService = Depends(get_user_admin_service)):
    account = await service.create_user(payload.model_dump())
    return SuccessResponse[UserResponse](payload=UserResponse.model_validate(account))


@router.put("/{user_id}", response_model=SuccessResponse[UserResponse])
async def update_user(
    user_id: int,
    payload: UserUpdate,
    service: UserAdminService = Depends(get_user_admin_service),
):
    # Partial update: only the keys present in the body are written.
    account = await service.update_user(user_id, payload.model_dump(exclude_unset=True))
    return SuccessResponse[UserResponse](payload=UserResponse.model_validate(account))


@router.delete("/{user_id}", status_code=204, response_class=Response)
async def delete_user(user_id: int, service: UserAdminService = Depends(get_user_admin_service)):
    await service.delete_user(user_id)
    return Response(status_code=204)
