"""Tests for the generic list query builder and pagination."""
import pytest

from crudapi.infrastructure.memory import InMemoryTableGateway
from crudapi.modules.bots import BOT_SCHEMA
from crudapi.modules.common import ValidationFailedError
from crudapi.modules.common.listing import (
    build_filter_predicate,
    fetch_page,
    list_items_paginated,
    parse_list_options,
    resolve_order,
    to_paginated_result,
)
from crudapi.modules.common.predicates import And, Contains, Eq, Or
from crudapi.modules.common.gateway import SortSpec


@pytest.fixture
async def bots(memory_session):
    gateway = InMemoryTableGateway(memory_session, "bots")
    for index in range(1, 26):
        await gateway.insert(
            {
                "name": f"bot-{index:02d}",
                "description": "Weather Reporter" if index % 5 == 0 else "plain",
                "is_active": index % 2 == 0,
            }
        )
    return gateway


async def test_last_page_is_partial(bots):
    result = await list_items_paginated(bots, BOT_SCHEMA, {"page": "3", "limit": "10"}, default_limit=10)

    assert result.total_count == 25
    assert result.total_pages == 3
    assert len(result.items) == 5
    assert result.paging_counter == 21
    assert result.has_prev_page is True
    assert result.has_next_page is False
    assert result.prev_page == 2
    assert result.next_page is None


async def test_page_past_the_end_returns_empty_items(bots):
    result = await list_items_paginated(bots, BOT_SCHEMA, {"page": "7", "limit": "10"}, default_limit=10)

    assert result.items == []
    assert result.page == 7
    assert result.total_pages == 3
    assert result.has_next_page is False


async def test_empty_collection_reports_one_page(memory_session):
    gateway = InMemoryTableGateway(memory_session, "bots")

    result = await list_items_paginated(gateway, BOT_SCHEMA, {}, default_limit=10)

    assert result.items == []
    assert result.total_count == 0
    assert result.total_pages == 1
    assert result.page == 1
    assert result.has_prev_page is False
    assert result.has_next_page is False


async def test_default_order_is_creation_order(bots):
    result = await list_items_paginated(bots, BOT_SCHEMA, {"limit": "3"}, default_limit=10)

    assert [bot.name for bot in result.items] == ["bot-01", "bot-02", "bot-03"]


async def test_sort_descending_by_public_name(bots):
    result = await list_items_paginated(bots, BOT_SCHEMA, {"sort": "name", "order": "desc"}, default_limit=2)

    assert [bot.name for bot in result.items] == ["bot-25", "bot-24"]


async def test_unknown_filter_keys_are_ignored(bots):
    result = await list_items_paginated(bots, BOT_SCHEMA, {"colour": "blue"}, default_limit=50)

    assert result.total_count == 25


async def test_equality_filter_coerces_query_strings(bots):
    result = await list_items_paginated(bots, BOT_SCHEMA, {"isActive": "false"}, default_limit=50)

    assert result.total_count == 13
    assert all(not bot.is_active for bot in result.items)


async def test_text_search_is_case_insensitive_across_fields(bots):
    query = {"filter": "WEATHER", "fields": "name,description"}

    result = await list_items_paginated(bots, BOT_SCHEMA, query, default_limit=50)

    assert [bot.name for bot in result.items] == ["bot-05", "bot-10", "bot-15", "bot-20", "bot-25"]


async def test_text_search_combines_with_equality_filters(bots):
    query = {"filter": "weather", "fields": "description", "isActive": "true"}

    result = await list_items_paginated(bots, BOT_SCHEMA, query, default_limit=50)

    assert [bot.name for bot in result.items] == ["bot-10", "bot-20"]


def test_parse_list_options_falls_back_on_garbage():
    options = parse_list_options({"page": "abc", "limit": "0", "order": "sideways"}, default_limit=10)

    assert options.page == 1
    assert options.limit == 10
    assert options.descending is False
    assert options.sort_field == "createdAt"


def test_parse_list_options_clamps_limit():
    options = parse_list_options({"limit": "500"}, default_limit=10, max_limit=100)

    assert options.limit == 100


def test_filter_predicate_structure():
    predicate = build_filter_predicate(
        {"filter": "x", "fields": "name,description,unknown", "isActive": "1", "page": "2"},
        BOT_SCHEMA,
    )

    assert predicate == And(
        (
            Or((Contains("name", "x"), Contains("description", "x"))),
            Eq("is_active", True),
        )
    )


def test_search_without_fields_is_ignored():
    assert build_filter_predicate({"filter": "x"}, BOT_SCHEMA) is None


def test_search_skips_non_text_columns():
    predicate = build_filter_predicate({"filter": "1", "fields": "id,isActive,name"}, BOT_SCHEMA)

    assert predicate == Contains("name", "1")


def test_malformed_filter_value_is_rejected():
    with pytest.raises(ValidationFailedError) as excinfo:
        build_filter_predicate({"id": "not-a-number"}, BOT_SCHEMA)

    assert excinfo.value.message == "ERROR_WITH_FILTER"


def test_unknown_sort_field_uses_schema_default():
    options = parse_list_options({"sort": "password"}, default_limit=10)

    assert resolve_order(options, BOT_SCHEMA) == [SortSpec("created_at"), SortSpec("id")]


async def test_fetch_page_rejects_non_positive_arguments(bots):
    with pytest.raises(ValueError):
        await fetch_page(bots, None, [], page=0, limit=10)


def test_paginated_result_arithmetic():
    result = to_paginated_result(["a", "b"], total_count=12, page=2, limit=5)

    assert result.total_pages == 3
    assert result.paging_counter == 6
    assert (result.prev_page, result.next_page) == (1, 3)
