import asyncio

import pytest

from authme.exporters import InMemoryExporter, PostgresExporter
from authme.exporters import postgres as postgres_module
from authme.session.events import SessionEvent


class FakeConnection:
    def __init__(self, log) -> None:
        self.log = log

    async def execute(self, sql, *args) -> None:
        self.log.append((sql, args))


class FakeAcquire:
    def __init__(self, conn) -> None:
        self.conn = conn

    async def __aenter__(self):
        return self.conn

    async def __aexit__(self, *exc_info) -> None:
        return None


class FakePool:
    def __init__(self) -> None:
        self.log = []
        self.closed = False

    def acquire(self):
        return FakeAcquire(FakeConnection(self.log))

    async def close(self) -> None:
        self.closed = True


def test_event_serialization_has_no_secrets() -> None:
    payload = SessionEvent(kind="login_online", display_name="Alice", account_id="abc").to_dict()
    assert set(payload) == {
        "event_id",
        "kind",
        "display_name",
        "account_id",
        "account_type",
        "status",
        "success",
        "error",
        "occurred_at",
    }


def test_in_memory_exporter_collects_events() -> None:
    exporter = InMemoryExporter()
    asyncio.run(exporter.export(SessionEvent(kind="status_check", display_name="Alice", status="VALID")))
    assert exporter.kinds() == ["status_check"]


def test_postgres_exporter_creates_table_once_and_inserts() -> None:
    pool = FakePool()
    exporter = PostgresExporter(pool=pool)

    async def run() -> None:
        await exporter.export(SessionEvent(kind="login_offline", display_name="Alice"))
        await exporter.export(SessionEvent(kind="status_check", display_name="Alice", status="INVALID", success=False))
        await exporter.close()

    asyncio.run(run())

    statements = [sql for sql, _ in pool.log]
    assert sum("CREATE TABLE" in sql for sql in statements) == 1
    inserts = [args for sql, args in pool.log if "INSERT INTO authme_session_events" in sql]
    assert [args[1] for args in inserts] == ["login_offline", "status_check"]
    assert inserts[1][5] == "INVALID"
    assert inserts[1][6] is False
    assert pool.closed


def test_postgres_exporter_requires_dsn_or_pool() -> None:
    with pytest.raises(ValueError):
        asyncio.run(PostgresExporter().connect())


def test_concurrent_first_exports_share_one_pool(monkeypatch) -> None:
    created = []

    async def create_pool(**kwargs):
        await asyncio.sleep(0)
        pool = FakePool()
        created.append(pool)
        return pool

    monkeypatch.setattr(postgres_module.asyncpg, "create_pool", create_pool)
    exporter = PostgresExporter("postgresql://localhost/authme")

    async def run() -> None:
        await asyncio.gather(
            exporter.export(SessionEvent(kind="status_check", display_name="Alice", status="VALID")),
            exporter.export(SessionEvent(kind="login_offline", display_name="Bob")),
            exporter.export(SessionEvent(kind="login_online", display_name="Carol")),
        )
        await exporter.close()

    asyncio.run(run())

    assert len(created) == 1
    pool = created[0]
    assert pool.closed
    assert sum("CREATE TABLE" in sql for sql, _ in pool.log) == 1
    assert sum("INSERT INTO authme_session_events" in sql for sql, _ in pool.log) == 3
