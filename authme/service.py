"""Session service wiring store, status cache, login flow and exporter."""

from __future__ import annotations

import asyncio
from concurrent.futures import Executor, ThreadPoolExecutor
from typing import Optional, Set

from .config import AuthMeConfig
from .errors import LoginError
from .exporters.base import Exporter
from .identity.client import IdentityClient, YggdrasilIdentityClient
from .identity.transport import Transport, UrllibTransport
from .logging_config import get_logger
from .session.cache import StatusCache
from .session.events import SessionEvent
from .session.login import LoginFlow, offline_session
from .session.store import SessionSink, SessionStore
from .session.types import Session, Status, ValidationResult

logger = get_logger(__name__)


class SessionService:
    """Owns the session state and the worker pool that talks to the identity service."""

    def __init__(
        self,
        *,
        store: SessionStore,
        client: IdentityClient,
        config: Optional[AuthMeConfig] = None,
        executor: Optional[Executor] = None,
        exporter: Optional[Exporter] = None,
    ) -> None:
        self.config = config or AuthMeConfig()
        self.store = store
        self.client = client
        self.exporter = exporter
        self._owns_executor = executor is None
        self.executor = executor or ThreadPoolExecutor(max_workers=self.config.max_workers, thread_name_prefix="authme")
        self.cache = StatusCache(
            store,
            client,
            executor=self.executor,
            ttl_ms=self.config.status_ttl_ms,
            single_flight=self.config.single_flight,
            on_checked=self._status_checked,
        )
        self.flow = LoginFlow(store, client, executor=self.executor)
        self._pending: Set[asyncio.Task] = set()
        self._closed = False

    @property
    def session(self) -> Session:
        return self.store.current()

    async def get_status(self) -> Status:
        return await self.cache.get_status()

    async def login(self, username: str, password: str) -> Session:
        """Online login; raises :class:`LoginError` on failure."""
        try:
            session = await self.flow.login_online(username, password)
        except LoginError as exc:
            await self._export(SessionEvent(kind="login_online", display_name=username, success=False, error=exc.reason))
            raise
        await self._export(self._session_event("login_online", session))
        return session

    def login_offline(self, username: str) -> Session:
        """Offline login; never raises and returns the previous session if it could not be replaced."""
        previous = self.store.current()
        session = self.flow.login_offline(username)
        if session is previous:
            self._schedule_export(
                SessionEvent(kind="login_offline", display_name=username, success=False, error="session_store_rejected")
            )
        else:
            self._schedule_export(self._session_event("login_offline", session))
        return session

    async def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        if self._pending:
            await asyncio.gather(*self._pending, return_exceptions=True)
        if self.exporter is not None:
            await self.exporter.close()
        if self._owns_executor:
            self.executor.shutdown(wait=False)

    async def __aenter__(self) -> "SessionService":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    def _status_checked(self, session: Session, result: ValidationResult) -> None:
        event = self._session_event("status_check", session)
        event.status = result.status.value
        event.success = result.valid
        event.error = None if result.valid else result.reason
        self._schedule_export(event)

    @staticmethod
    def _session_event(kind: str, session: Session) -> SessionEvent:
        return SessionEvent(
            kind=kind,
            display_name=session.display_name,
            account_id=str(session.account_id),
            account_type=session.account_type.value,
        )

    def _schedule_export(self, event: SessionEvent) -> None:
        if self.exporter is None:
            return
        try:
            task = asyncio.get_running_loop().create_task(self._export(event))
        except RuntimeError:
            logger.debug("No running event loop, session event not exported", kind=event.kind)
            return
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def _export(self, event: SessionEvent) -> None:
        if self.exporter is None:
            return
        try:
            await self.exporter.export(event)
        except Exception as exc:
            logger.warning("Session event export failed", kind=event.kind, error=str(exc))


def create_session_service(
    config: Optional[AuthMeConfig] = None,
    *,
    initial_session: Optional[Session] = None,
    client: Optional[IdentityClient] = None,
    transport: Optional[Transport] = None,
    sink: Optional[SessionSink] = None,
    exporter: Optional[Exporter] = None,
    executor: Optional[Executor] = None,
) -> SessionService:
    """Create a ready-to-use session service.

    Without an explicit ``initial_session`` the service starts with the
    offline session of ``config.default_username``. A Postgres exporter is
    attached when ``config.pg_dsn`` is set and no exporter is given.
    """
    config = config or AuthMeConfig.from_env()
    if client is None:
        client = YggdrasilIdentityClient(
            transport or UrllibTransport(timeout_s=config.request_timeout_s, proxy_url=config.proxy_url),
            auth_server_url=config.auth_server_url,
            session_server_url=config.session_server_url,
            client_token=config.client_token,
        )
    if exporter is None and config.pg_dsn:
        from .exporters.postgres import PostgresExporter

        exporter = PostgresExporter(config.pg_dsn)

    store = SessionStore(initial_session or offline_session(config.default_username), sink=sink)
    return SessionService(store=store, client=client, config=config, executor=executor, exporter=exporter)
