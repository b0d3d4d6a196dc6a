"""Generic CRUD use cases shared by simple entities."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Generic, Mapping, Optional, TypeVar

from .exceptions import NotFoundError
from .gateway import TableGateway
from .listing import PaginatedResult, list_items_paginated
from .predicates import Eq, Predicate
from .schema import EntitySchema
from .uniqueness import assert_unique

T = TypeVar("T")


@dataclass(slots=True)
class CrudService(Generic[T]):
    gateway: TableGateway
    schema: EntitySchema[T]
    unique_fields: tuple[str, ...] = field(default_factory=tuple)

    async def list_items(
        self,
        raw_query: Mapping[str, Any],
        *,
        default_limit: int,
        max_limit: Optional[int] = None,
        base_predicate: Predicate | None = None,
    ) -> PaginatedResult[T]:
        return await list_items_paginated(
            self.gateway,
            self.schema,
            raw_query,
            default_limit=default_limit,
            max_limit=max_limit,
            base_predicate=base_predicate,
        )

    async def get_item(self, item_id: Any) -> T:
        record = await self.gateway.find_one(Eq(self.schema.id_attribute, item_id))
        if record is None:
            raise NotFoundError()
        return self.schema.build(record)

    async def create_item(self, values: Mapping[str, Any]) -> T:
        await assert_unique(self.gateway, values, self.unique_fields, id_attribute=self.schema.id_attribute)
        record = await self.gateway.insert(values)
        return self.schema.build(record)

    async def update_item(self, item_id: Any, values: Mapping[str, Any]) -> T:
        await assert_unique(
            self.gateway,
            values,
            self.unique_fields,
            exclude_id=item_id,
            id_attribute=self.schema.id_attribute,
        )
        record = await self.gateway.update(item_id, values)
        if record is None:
            raise NotFoundError()
        return self.schema.build(record)

    async def delete_item(self, item_id: Any) -> T:
        record = await self.gateway.delete(item_id)
        if record is None:
            raise NotFoundError()
        return self.schema.build(record)


__all__ = ["CrudService"]
