"""SQLAlchemy implementation of the account repository."""

from __future__ import annotations

from typing import Any

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from crudapi.infrastructure.database.models import User as UserModel, UserAccess as UserAccessModel
from crudapi.modules.accounts.exceptions import AccountNotFoundError
from crudapi.modules.accounts.models import AccessLogEntry, Account
from crudapi.modules.accounts.repository import AccountRepository


class SqlAccountRepository(AccountRepository):
    """Account repository backed by SQLAlchemy models."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_by_id(self, account_id: int) -> Account | None:
        stmt = select(UserModel).where(UserModel.id == account_id)
        return await self._first(stmt)

    async def get_by_email(self, email: str) -> Account | None:
        stmt = select(UserModel).where(UserModel.email == email)
        return await self._first(stmt)

    async def get_unverified(self, verification: str) -> Account | None:
        stmt = select(UserModel).where(
            UserModel.verification == verification,
            UserModel.verified.is_(False),
        )
        return await self._first(stmt)

    async def create_account(self, **values: Any) -> Account:
        model = UserModel(**values)
        self._session.add(model)
        await self._session.flush()
        await self._session.refresh(model)
        return self._to_domain(model)

    async def update_account(self, account_id: int, **values: Any) -> Account:
        model = await self._session.get(UserModel, account_id)
        if model is None:
            raise AccountNotFoundError()
        for key, value in values.items():
            setattr(model, key, value)
        await self._session.flush()
        await self._session.refresh(model)
        return self._to_domain(model)

    async def increment_login_attempts(self, account_id: int) -> int:
        # One UPDATE statement, so concurrent failures cannot overwrite each other.
        stmt = (
            update(UserModel)
            .where(UserModel.id == account_id)
            .values(login_attempts=UserModel.login_attempts + 1)
            .returning(UserModel.login_attempts)
        )
        result = await self._session.execute(stmt)
        attempts = result.scalar_one_or_none()
        if attempts is None:
            raise AccountNotFoundError()
        return int(attempts)

    async def add_access_log(self, entry: AccessLogEntry) -> None:
        self._session.add(
            UserAccessModel(
                email=entry.email,
                ip=entry.ip,
                browser=entry.browser,
                country=entry.country,
            )
        )
        await self._session.flush()

    async def commit(self) -> None:
        await self._session.commit()

    async def _first(self, stmt: Any) -> Account | None:
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_domain(model) if model is not None else None

    @staticmethod
    def _to_domain(model: UserModel) -> Account:
        return Account.from_record({column.key: getattr(model, column.key) for column in UserModel.__table__.columns})
