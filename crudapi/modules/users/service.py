"""Admin-facing user CRUD."""

from __future__ import annotations

from typing import Any, Mapping, Optional

from crudapi.core.crypto import PasswordHasher
from crudapi.modules.accounts.models import Account
from crudapi.modules.common.crud import CrudService
from crudapi.modules.common.gateway import TableGateway
from crudapi.modules.common.listing import PaginatedResult

from .schema import USER_SCHEMA

UNIQUE_FIELDS = ("email",)


class UserAdminService:
    def __init__(self, gateway: TableGateway, hasher: PasswordHasher) -> None:
        self._crud: CrudService[Account] = CrudService(gateway, USER_SCHEMA, UNIQUE_FIELDS)
        self._hasher = hasher

    async def list_users(
        self,
        raw_query: Mapping[str, Any],
        *,
        default_limit: int,
        max_limit: Optional[int] = None,
    ) -> PaginatedResult[Account]:
        return await self._crud.list_items(raw_query, default_limit=default_limit, max_limit=max_limit)

    async def get_user(self, user_id: int) -> Account:
        return await self._crud.get_item(user_id)

    async def create_user(self, values: Mapping[str, Any]) -> Account:
        return await self._crud.create_item(self._prepare(values))

    async def update_user(self, user_id: int, values: Mapping[str, Any]) -> Account:
        return await self._crud.update_item(user_id, self._prepare(values))

    async def delete_user(self, user_id: int) -> Account:
        return await self._crud.delete_item(user_id)

    def _prepare(self, values: Mapping[str, Any]) -> dict[str, Any]:
        prepared = dict(values)
        if prepared.get("email"):
            prepared["email"] = prepared["email"].strip().lower()
        if prepared.get("password"):
            prepared["password"] = self._hasher.hash(prepared["password"])
        else:
            prepared.pop("password", None)
        return prepared
