import asyncio

import pytest
from fakes import ALICE_ID, FakeIdentityClient, FakeTransport, online_session

from authme import AuthMeConfig, LoginError, Status, create_session_service
from authme.errors import InvalidCredentialsError
from authme.exporters import InMemoryExporter
from authme.identity.client import YggdrasilIdentityClient
from authme.identity.transport import HttpResponse
from authme.session.login import offline_session


def test_service_starts_with_offline_default_user() -> None:
    service = create_session_service(AuthMeConfig(default_username="Steve"), client=FakeIdentityClient())

    assert service.session == offline_session("Steve")
    asyncio.run(service.close())


def test_service_checks_status_and_exports_event() -> None:
    async def run() -> None:
        exporter = InMemoryExporter()
        async with create_session_service(
            AuthMeConfig(),
            initial_session=online_session(),
            client=FakeIdentityClient(status=Status.VALID),
            exporter=exporter,
        ) as service:
            assert await service.get_status() is Status.VALID
            assert await service.get_status() is Status.VALID

        assert exporter.closed
        assert exporter.kinds() == ["status_check"]
        event = exporter.events[0]
        assert event.status == "VALID"
        assert event.account_id == str(ALICE_ID)

    asyncio.run(run())


def test_service_online_login_exports_success_and_failure() -> None:
    async def run() -> None:
        exporter = InMemoryExporter()
        client = FakeIdentityClient()
        service = create_session_service(AuthMeConfig(), client=client, exporter=exporter)
        try:
            session = await service.login("alice@example.com", "hunter2")
            assert service.session is session

            client.auth_error = InvalidCredentialsError("Invalid credentials.")
            with pytest.raises(LoginError):
                await service.login("alice@example.com", "wrong")
            assert service.session is session
        finally:
            await service.close()

        assert [(e.kind, e.success) for e in exporter.events] == [("login_online", True), ("login_online", False)]
        assert exporter.events[1].error and "Invalid credentials" in exporter.events[1].error

    asyncio.run(run())


def test_service_offline_login_inside_loop_exports_event() -> None:
    async def run() -> None:
        exporter = InMemoryExporter()
        service = create_session_service(AuthMeConfig(), client=FakeIdentityClient(), exporter=exporter)
        session = service.login_offline("Alice")
        await service.close()

        assert session.display_name == "Alice"
        assert exporter.kinds() == ["login_offline"]
        assert exporter.events[0].success is True

    asyncio.run(run())


def test_service_offline_login_without_loop_still_logs_in() -> None:
    exporter = InMemoryExporter()
    service = create_session_service(AuthMeConfig(), client=FakeIdentityClient(), exporter=exporter)

    session = service.login_offline("Alice")

    assert service.session is session
    assert exporter.events == []
    asyncio.run(service.close())


def test_service_offline_login_store_failure_returns_previous() -> None:
    def sink(_session) -> None:
        raise RuntimeError("host rejected session")

    async def run() -> None:
        exporter = InMemoryExporter()
        service = create_session_service(
            AuthMeConfig(), initial_session=online_session(), client=FakeIdentityClient(), sink=sink, exporter=exporter
        )
        previous = service.session
        assert service.login_offline("Alice") is previous
        await service.close()
        assert [(e.kind, e.success, e.error) for e in exporter.events] == [
            ("login_offline", False, "session_store_rejected")
        ]

    asyncio.run(run())


def test_service_login_resets_cached_status() -> None:
    async def run() -> None:
        client = FakeIdentityClient(status=Status.VALID)
        async with create_session_service(AuthMeConfig(), initial_session=online_session(), client=client) as service:
            await service.get_status()
            service.login_offline("Bob")
            assert service.cache.snapshot().value is Status.UNKNOWN
            await service.get_status()
        assert client.validate_calls == 2
        assert client.validated[-1].display_name == "Bob"

    asyncio.run(run())


def test_failing_exporter_does_not_break_login() -> None:
    class BrokenExporter(InMemoryExporter):
        async def export(self, event) -> None:
            raise ConnectionError("database down")

    async def run() -> None:
        async with create_session_service(AuthMeConfig(), client=FakeIdentityClient(), exporter=BrokenExporter()) as service:
            session = await service.login("alice", "pw")
            assert service.session is session

    asyncio.run(run())


def test_service_builds_yggdrasil_client_from_config() -> None:
    transport = FakeTransport(
        {
            ("POST", "/session/minecraft/join"): HttpResponse(status=204),
            ("GET", "/session/minecraft/hasJoined"): HttpResponse(status=200, body={"id": ALICE_ID.hex}),
        }
    )
    config = AuthMeConfig(session_server_url="https://session.example", client_token="fixed")

    async def run() -> None:
        async with create_session_service(config, initial_session=online_session(), transport=transport) as service:
            assert isinstance(service.client, YggdrasilIdentityClient)
            assert service.client.client_token == "fixed"
            assert await service.get_status() is Status.VALID

    asyncio.run(run())
    assert transport.requests[0]["url"] == "https://session.example/session/minecraft/join"


def test_service_attaches_postgres_exporter_when_dsn_configured() -> None:
    from authme.exporters.postgres import PostgresExporter

    service = create_session_service(AuthMeConfig(pg_dsn="postgresql://localhost/authme"), client=FakeIdentityClient())

    assert isinstance(service.exporter, PostgresExporter)
    service.executor.shutdown(wait=False)
