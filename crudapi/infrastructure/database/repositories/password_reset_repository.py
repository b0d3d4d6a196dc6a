"""SQLAlchemy implementation of the password reset repository."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from crudapi.infrastructure.database.models import ForgotPassword as ForgotPasswordModel
from crudapi.modules.common.exceptions import NotFoundError
from crudapi.modules.accounts.models import PasswordReset
from crudapi.modules.accounts.repository import PasswordResetRepository


class SqlPasswordResetRepository(PasswordResetRepository):
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create_request(
        self,
        *,
        email: str,
        verification: str,
        ip: str,
        browser: str,
        country: str,
    ) -> PasswordReset:
        model = ForgotPasswordModel(
            email=email,
            verification=verification,
            ip_request=ip,
            browser_request=browser,
            country_request=country,
        )
        self._session.add(model)
        await self._session.flush()
        await self._session.refresh(model)
        return self._to_domain(model)

    async def get_unused(self, verification: str) -> PasswordReset | None:
        stmt = select(ForgotPasswordModel).where(
            ForgotPasswordModel.verification == verification,
            ForgotPasswordModel.used.is_(False),
        )
        result = await self._session.execute(stmt)
        model = result.scalars().first()
        return self._to_domain(model) if model is not None else None

    async def mark_used(self, reset_id: int, *, ip: str, browser: str, country: str) -> None:
        model = await self._session.get(ForgotPasswordModel, reset_id)
        if model is None:
            raise NotFoundError("NOT_FOUND_OR_ALREADY_USED")
        model.used = True
        model.ip_changed = ip
        model.browser_changed = browser
        model.country_changed = country
        await self._session.flush()

    @staticmethod
    def _to_domain(model: ForgotPasswordModel) -> PasswordReset:
        return PasswordReset(
            id=model.id,
            email=model.email,
            verification=model.verification,
            used=bool(model.used),
            created_at=model.created_at,
        )
