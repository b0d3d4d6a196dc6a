"""SQLAlchemy implementation of the generic table gateway."""

from __future__ import annotations

from typing import Any, Generic, Mapping, Sequence, TypeVar

from sqlalchemy import and_, func, inspect, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql.elements import ColumnElement

from crudapi.infrastructure.database.base import Base
from crudapi.modules.common.gateway import Record, SortSpec
from crudapi.modules.common.predicates import And, Contains, Eq, Ne, Or, Predicate
from crudapi.modules.common.schema import EntitySchema

ModelT = TypeVar("ModelT", bound=Base)


class SqlTableGateway(Generic[ModelT]):
    """Table gateway backed by one ORM model.

    Predicates and sort keys may only name attributes listed in the entity
    schema; anything else is a programming error and raises ``ValueError``.
    Writes accept any mapped column, since services also persist columns that
    are not exposed for filtering (password hashes, counters).
    """

    def __init__(self, session: AsyncSession, model: type[ModelT], schema: EntitySchema[Any]) -> None:
        self._session = session
        self._model = model
        self._schema = schema
        self._columns = {attr.key for attr in inspect(model).column_attrs}
        self._id_column = getattr(model, schema.id_attribute)

    def _column(self, attribute: str) -> Any:
        if not self._schema.has_attribute(attribute) and attribute != self._schema.id_attribute:
            raise ValueError(f"{attribute!r} is not a queryable column of {self._schema.name}")
        return getattr(self._model, attribute)

    def _compile(self, predicate: Predicate) -> ColumnElement[bool]:
        if isinstance(predicate, Eq):
            return self._column(predicate.field) == predicate.value
        if isinstance(predicate, Ne):
            return self._column(predicate.field) != predicate.value
        if isinstance(predicate, Contains):
            return self._column(predicate.field).icontains(predicate.value, autoescape=True)
        if isinstance(predicate, And):
            return and_(*(self._compile(term) for term in predicate.terms))
        if isinstance(predicate, Or):
            return or_(*(self._compile(term) for term in predicate.terms))
        raise TypeError(f"Unsupported predicate: {predicate!r}")

    def _to_record(self, model: ModelT) -> Record:
        return {key: getattr(model, key) for key in self._columns}

    def _writable(self, values: Mapping[str, Any]) -> dict[str, Any]:
        return {key: value for key, value in values.items() if key in self._columns and key != "id"}

    async def _get(self, record_id: Any) -> ModelT | None:
        stmt = select(self._model).where(self._id_column == record_id)
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    async def find_one(self, predicate: Predicate | None) -> Record | None:
        stmt = select(self._model)
        if predicate is not None:
            stmt = stmt.where(self._compile(predicate))
        result = await self._session.execute(stmt.limit(1))
        model = result.scalars().first()
        return self._to_record(model) if model is not None else None

    async def find_many(
        self,
        predicate: Predicate | None,
        order: Sequence[SortSpec] = (),
        offset: int = 0,
        limit: int | None = None,
    ) -> list[Record]:
        stmt = select(self._model)
        if predicate is not None:
            stmt = stmt.where(self._compile(predicate))
        for spec in order:
            column = self._column(spec.attribute)
            stmt = stmt.order_by(column.desc() if spec.descending else column.asc())
        if offset:
            stmt = stmt.offset(offset)
        if limit is not None:
            stmt = stmt.limit(limit)
        result = await self._session.execute(stmt)
        return [self._to_record(model) for model in result.scalars().all()]

    async def count(self, predicate: Predicate | None) -> int:
        stmt = select(func.count()).select_from(self._model)
        if predicate is not None:
            stmt = stmt.where(self._compile(predicate))
        result = await self._session.execute(stmt)
        return int(result.scalar_one())

    async def insert(self, record: Mapping[str, Any]) -> Record:
        model = self._model(**self._writable(record))
        self._session.add(model)
        await self._session.flush()
        await self._session.refresh(model)
        return self._to_record(model)

    async def update(self, record_id: Any, partial: Mapping[str, Any]) -> Record | None:
        model = await self._get(record_id)
        if model is None:
            return None
        for key, value in self._writable(partial).items():
            setattr(model, key, value)
        await self._session.flush()
        await self._session.refresh(model)
        return self._to_record(model)

    async def delete(self, record_id: Any) -> Record | None:
        model = await self._get(record_id)
        if model is None:
            return None
        record = self._to_record(model)
        await self._session.delete(model)
        await self._session.flush()
        return record


__all__ = ["SqlTableGateway"]
