"""Pre-write guard against duplicate values in designated fields."""

from __future__ import annotations

from typing import Any, Iterable, Mapping

from .exceptions import ConflictError
from .gateway import TableGateway
from .predicates import Eq, Ne, and_, or_


async def assert_unique(
    gateway: TableGateway,
    candidate: Mapping[str, Any],
    unique_fields: Iterable[str],
    exclude_id: Any = None,
    *,
    id_attribute: str = "id",
) -> None:
    """Raise ``ConflictError`` if another row already holds any unique value.

    Only unique fields present in ``candidate`` are checked. Passing
    ``exclude_id`` lets a record keep its own values during an update.
    """
    clash = or_(*(Eq(name, candidate[name]) for name in unique_fields if name in candidate))
    if clash is None:
        return
    predicate = and_(clash, Ne(id_attribute, exclude_id) if exclude_id is not None else None)
    if await gateway.find_one(predicate) is not None:
        raise ConflictError("ITEM_ALREADY_EXISTS")


__all__ = ["assert_unique"]
