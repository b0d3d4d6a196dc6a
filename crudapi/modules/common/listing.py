"""Generic list endpoint support: query string -> predicate, order, page.

Untrusted query-string input is reduced to column names from the entity's
whitelist and bound values; nothing from the request is ever interpolated
into a query. Unknown column names are ignored rather than rejected, so
``?foo=bar`` on an entity without ``foo`` lists the unfiltered set.

The count and the page select run as two independent calls. Under
concurrent writes the total and the page contents may reflect different
instants; callers accept that.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Any, Generic, Mapping, Optional, Sequence, TypeVar

from .gateway import Record, SortSpec, TableGateway
from .predicates import Contains, Eq, Predicate, and_, or_
from .schema import EntitySchema

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_SORT = "createdAt"
DEFAULT_PAGE = 1
RESERVED_KEYS = frozenset({"filter", "fields", "page", "limit", "sort", "order"})
_DESCENDING = {"desc", "descending", "-1"}


@dataclass(frozen=True, slots=True)
class ListOptions:
    sort_field: str
    descending: bool
    page: int
    limit: int

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


@dataclass(slots=True)
class PageSlice:
    items: list[Record]
    total_count: int


@dataclass(slots=True)
class PaginatedResult(Generic[T]):
    items: list[T]
    total_count: int
    limit: int
    page: int
    total_pages: int
    paging_counter: int
    has_prev_page: bool
    has_next_page: bool
    prev_page: Optional[int]
    next_page: Optional[int]


def _positive_int(raw: Any, default: int) -> int:
    try:
        value = int(str(raw).strip())
    except (TypeError, ValueError):
        return default
    return value if value > 0 else default


def parse_list_options(
    raw_query: Mapping[str, Any],
    *,
    default_limit: int,
    max_limit: Optional[int] = None,
    default_sort: str = DEFAULT_SORT,
) -> ListOptions:
    """Read sort/order/page/limit, falling back to defaults instead of failing."""
    if default_limit <= 0:
        raise ValueError("default_limit must be positive")

    sort_field = str(raw_query.get("sort") or "").strip() or default_sort
    order = str(raw_query.get("order") or "asc").strip().lower()
    page = _positive_int(raw_query.get("page"), DEFAULT_PAGE)
    limit = _positive_int(raw_query.get("limit"), default_limit)
    if max_limit is not None and limit > max_limit:
        limit = max_limit
    return ListOptions(sort_field=sort_field, descending=order in _DESCENDING, page=page, limit=limit)


def build_filter_predicate(raw_query: Mapping[str, Any], schema: EntitySchema[Any]) -> Predicate | None:
    """Build the WHERE predicate for a list request.

    Non-reserved keys naming a known column become equality terms. With both
    ``filter`` and ``fields`` present, a case-insensitive substring match per
    known searchable field is OR-ed together and AND-ed with the equality terms.
    """
    equalities: list[Predicate] = []
    for key, value in raw_query.items():
        if key in RESERVED_KEYS:
            continue
        spec = schema.resolve(key)
        if spec is None:
            logger.debug("Ignoring unknown filter key %r on %s", key, schema.name)
            continue
        equalities.append(Eq(spec.attribute, spec.coerce(value)))

    search: Predicate | None = None
    text = raw_query.get("filter")
    fields = raw_query.get("fields")
    if text and fields:
        terms: list[Predicate] = []
        for name in str(fields).split(","):
            spec = schema.resolve(name.strip())
            if spec is None or not spec.searchable:
                continue
            terms.append(Contains(spec.attribute, str(text)))
        search = or_(*terms)

    return and_(search, *equalities)


def resolve_order(options: ListOptions, schema: EntitySchema[Any]) -> list[SortSpec]:
    spec = schema.resolve(options.sort_field)
    attribute = spec.attribute if spec else schema.default_sort_attribute()
    order = [SortSpec(attribute, options.descending)]
    if attribute != schema.id_attribute:
        # Tie-breaker keeps pages stable when the sort column has duplicates.
        order.append(SortSpec(schema.id_attribute, options.descending))
    return order


async def fetch_page(
    gateway: TableGateway,
    predicate: Predicate | None,
    order: Sequence[SortSpec],
    page: int,
    limit: int,
) -> PageSlice:
    if page < 1 or limit < 1:
        raise ValueError("page and limit must be positive")
    total_count = await gateway.count(predicate)
    items = await gateway.find_many(predicate, order, offset=(page - 1) * limit, limit=limit)
    return PageSlice(items=items, total_count=total_count)


def to_paginated_result(items: list[T], total_count: int, page: int, limit: int) -> PaginatedResult[T]:
    total_pages = max(1, math.ceil(total_count / limit))
    has_prev_page = page > 1
    has_next_page = page < total_pages
    return PaginatedResult(
        items=items,
        total_count=total_count,
        limit=limit,
        page=page,
        total_pages=total_pages,
        paging_counter=(page - 1) * limit + 1,
        has_prev_page=has_prev_page,
        has_next_page=has_next_page,
        prev_page=page - 1 if has_prev_page else None,
        next_page=page + 1 if has_next_page else None,
    )


async def list_items_paginated(
    gateway: TableGateway,
    schema: EntitySchema[T],
    raw_query: Mapping[str, Any],
    *,
    default_limit: int,
    max_limit: Optional[int] = None,
    base_predicate: Predicate | None = None,
) -> PaginatedResult[T]:
    options = parse_list_options(
        raw_query,
        default_limit=default_limit,
        max_limit=max_limit,
        default_sort=schema.default_sort,
    )
    predicate = and_(base_predicate, build_filter_predicate(raw_query, schema))
    page = await fetch_page(gateway, predicate, resolve_order(options, schema), options.page, options.limit)
    items = [schema.build(record) for record in page.items]
    return to_paginated_result(items, page.total_count, options.page, options.limit)


__all__ = [
    "ListOptions",
    "PageSlice",
    "PaginatedResult",
    "RESERVED_KEYS",
    "build_filter_predicate",
    "fetch_page",
    "list_items_paginated",
    "parse_list_options",
    "resolve_order",
    "to_paginated_result",
]
