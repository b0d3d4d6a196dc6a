"""Service providers built per request on top of the database session."""

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from crudapi.core.container import ApplicationContainer
from crudapi.infrastructure.database.models import Bot as BotModel, User as UserModel
from crudapi.infrastructure.database.repositories import (
    SqlAccountRepository,
    SqlPasswordResetRepository,
    SqlTableGateway,
)
from crudapi.modules.accounts import AccountService, AuthService
from crudapi.modules.bots import BOT_SCHEMA, BotService
from crudapi.modules.users import USER_SCHEMA, UserAdminService

from .database import get_container, get_db_session


def get_account_repository(db: AsyncSession = Depends(get_db_session)) -> SqlAccountRepository:
    return SqlAccountRepository(db)


def get_auth_service(
    repository: SqlAccountRepository = Depends(get_account_repository),
    container: ApplicationContainer = Depends(get_container),
) -> AuthService:
    settings = container.settings
    return AuthService(
        repository,
        container.hasher,
        container.tokens,
        max_attempts=settings.auth.login_attempts,
        hours_to_block=settings.auth.hours_to_block,
        include_verification=not settings.is_production,
    )


def get_account_service(
    db: AsyncSession = Depends(get_db_session),
    repository: SqlAccountRepository = Depends(get_account_repository),
    container: ApplicationContainer = Depends(get_container),
) -> AccountService:
    return AccountService(
        repository,
        SqlPasswordResetRepository(db),
        container.hasher,
        container.tokens,
        include_verification=not container.settings.is_production,
    )


def get_user_admin_service(
    db: AsyncSession = Depends(get_db_session),
    container: ApplicationContainer = Depends(get_container),
) -> UserAdminService:
    return UserAdminService(SqlTableGateway(db, UserModel, USER_SCHEMA), container.hasher)


def get_bot_service(db: AsyncSession = Depends(get_db_session)) -> BotService:
    return BotService.with_gateway(SqlTableGateway(db, BotModel, BOT_SCHEMA))


__all__ = [
    "get_account_repository",
    "get_account_service",
    "get_auth_service",
    "get_bot_service",
    "get_user_admin_service",
]
