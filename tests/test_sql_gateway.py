"""Tests for the SQLAlchemy backend on a throwaway SQLite file."""
import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from crudapi.core.config import DatabaseSettings
from crudapi.infrastructure.database import Database
from crudapi.infrastructure.database.models import Bot as BotModel
from crudapi.infrastructure.database.repositories import (
    SqlAccountRepository,
    SqlPasswordResetRepository,
    SqlTableGateway,
)
from crudapi.modules.accounts import AccessLogEntry, AuthService, IncorrectPasswordError, RequestContext
from crudapi.modules.bots import BOT_SCHEMA
from crudapi.modules.common.gateway import SortSpec
from crudapi.modules.common.listing import list_items_paginated
from crudapi.modules.common.predicates import Contains, Eq, Ne, and_


@pytest.fixture
async def database(tmp_path):
    db = Database(DatabaseSettings(url=f"sqlite+aiosqlite:///{tmp_path / 'test.db'}"))
    await db.connect()
    await db.create_all()
    yield db
    await db.dispose()


@pytest.fixture
async def sql_session(database):
    async with AsyncSession(database.engine, expire_on_commit=False) as session:
        yield session


@pytest.fixture
async def bots(sql_session):
    gateway = SqlTableGateway(sql_session, BotModel, BOT_SCHEMA)
    await gateway.insert({"name": "Alpha", "description": "100% uptime"})
    await gateway.insert({"name": "beta", "description": "weather", "is_active": False})
    await gateway.insert({"name": "Gamma", "description": "WEATHER alerts"})
    return gateway


async def test_insert_fills_defaults(bots):
    record = await bots.find_one(Eq("name", "Alpha"))

    assert record["id"] == 1
    assert record["is_active"] is True
    assert record["created_at"] is not None


async def test_contains_is_case_insensitive(bots):
    assert await bots.count(Contains("description", "weather")) == 2


async def test_contains_escapes_wildcards(bots):
    records = await bots.find_many(Contains("description", "%"))

    assert [record["name"] for record in records] == ["Alpha"]


async def test_find_many_orders_and_slices(bots):
    records = await bots.find_many(None, [SortSpec("id", descending=True)], offset=1, limit=1)

    assert [record["name"] for record in records] == ["beta"]


async def test_combined_predicates(bots):
    predicate = and_(Contains("description", "weather"), Ne("id", 2))

    records = await bots.find_many(predicate)

    assert [record["name"] for record in records] == ["Gamma"]


async def test_update_and_delete(bots):
    updated = await bots.update(2, {"description": "rebuilt", "id": 99})
    assert updated["id"] == 2
    assert updated["description"] == "rebuilt"

    deleted = await bots.delete(2)
    assert deleted["name"] == "beta"
    assert await bots.count(None) == 2
    assert await bots.update(2, {"description": "gone"}) is None
    assert await bots.delete(2) is None


async def test_columns_outside_the_schema_are_refused(bots):
    with pytest.raises(ValueError):
        await bots.count(Eq("secret_column", 1))


async def test_paginated_listing_over_sql(bots):
    query = {"filter": "WEATHER", "fields": "description", "sort": "name", "order": "desc", "limit": "1"}

    result = await list_items_paginated(bots, BOT_SCHEMA, query, default_limit=10)

    assert result.total_count == 2
    assert result.total_pages == 2
    assert [bot.name for bot in result.items] == ["beta"]
    assert result.next_page == 2


async def test_account_repository(sql_session):
    repository = SqlAccountRepository(sql_session)
    account = await repository.create_account(
        first_name="Carol",
        email="carol@example.com",
        password="hash",
        verification="v-1",
    )

    assert account.verified is False
    assert account.login_attempts == 0
    assert (await repository.get_unverified("v-1")).id == account.id

    assert await repository.increment_login_attempts(account.id) == 1
    assert await repository.increment_login_attempts(account.id) == 2
    assert (await repository.get_by_email("carol@example.com")).login_attempts == 2

    await repository.add_access_log(AccessLogEntry(email=account.email, ip="1.1.1.1", browser="x", country="XX"))
    await repository.commit()


async def test_password_reset_repository(sql_session):
    repository = SqlPasswordResetRepository(sql_session)

    reset = await repository.create_request(email="a@example.com", verification="r-1", ip="ip", browser="b", country="c")
    assert (await repository.get_unused("r-1")).id == reset.id

    await repository.mark_used(reset.id, ip="ip2", browser="b2", country="c2")
    assert await repository.get_unused("r-1") is None


async def test_failed_attempt_survives_session_rollback(database, hasher, tokens):
    async with database.session() as session:
        await SqlAccountRepository(session).create_account(
            first_name="Dave",
            email="dave@example.com",
            password=hasher.hash("right"),
        )

    async with AsyncSession(database.engine, expire_on_commit=False) as session:
        auth = AuthService(SqlAccountRepository(session), hasher, tokens)
        with pytest.raises(IncorrectPasswordError):
            await auth.login("dave@example.com", "wrong", RequestContext())
        await session.rollback()

    async with database.session() as session:
        account = await SqlAccountRepository(session).get_by_email("dave@example.com")
        assert account.login_attempts == 1


async def test_ping(database):
    assert await database.ping() is True
