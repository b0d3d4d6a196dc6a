"""Bot CRUD. Reads need a signed-in account, writes an administrator."""
from fastapi import APIRouter, Depends, Request

from crudapi.core.container import ApplicationContainer
from crudapi.interfaces.http.deps import get_bot_service, get_container, get_current_account, require_roles
from crudapi.modules.accounts import ADMIN_ROLES
from crudapi.modules.bots import BotService
from crudapi.schemas import BotCreate, BotResponse, BotUpdate, PaginatedResponse, SuccessResponse

router = APIRouter(dependencies=[Depends(get_current_account)])
admin_only = [Depends(require_roles(*ADMIN_ROLES))]


def _success(bot) -> SuccessResponse[BotResponse]:
    return SuccessResponse[BotResponse](payload=BotResponse.model_validate(bot))


@router.get("", response_model=PaginatedResponse[BotResponse])
async def list_bots(
    request: Request,
    container: ApplicationContainer = Depends(get_container),
    service: BotService = Depends(get_bot_service),
):
    result = await service.list_items(
        request.query_params,
        default_limit=container.settings.pagination.default_limit,
        max_limit=container.settings.pagination.export_limit,
    )
    return PaginatedResponse[BotResponse].from_result(result, BotResponse)


@router.get("/{bot_id}", response_model=SuccessResponse[BotResponse])
async def get_bot(bot_id: int, service: BotService = Depends(get_bot_service)):
    return _success(await service.get_item(bot_id))


@router.post("", response_model=SuccessResponse[BotResponse], dependencies=admin_only)
async def create_bot(payload: BotCreate, service: BotService = Depends(get_bot_service)):
    return _success(await service.create_item(payload.model_dump()))


@router.put("/{bot_id}", response_model=SuccessResponse[BotResponse], dependencies=admin_only)
async def update_bot(bot_id: int, payload: BotUpdate, service: BotService = Depends(get_bot_service)):
    return _success(await service.update_item(bot_id, payload.model_dump(exclude_unset=True)))


@router.delete("/{bot_id}", response_model=SuccessResponse[BotResponse], dependencies=admin_only)
async def delete_bot(bot_id: int, service: BotService = Depends(get_bot_service)):
    return _success(await service.delete_item(bot_id))
