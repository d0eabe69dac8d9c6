"""Time-boxed cache of the current session's validity."""

from __future__ import annotations

import asyncio
import threading
from concurrent.futures import Executor
from typing import TYPE_CHECKING, Callable, Dict, Hashable, Optional

from ..config import DEFAULT_STATUS_TTL_MS
from ..logging_config import get_logger
from ..utils.time import now_ms
from .store import SessionStore
from .types import Session, Status, StatusSnapshot, ValidationResult

if TYPE_CHECKING:
    from ..identity.client import IdentityClient

logger = get_logger(__name__)

Clock = Callable[[], int]


class StatusCache:
    """Memoizes the last validity check of the store's session for ``ttl_ms``.

    Each refresh is tagged with the cache generation and the session it checks.
    A result that lands after the session was replaced goes back to its caller
    but is not cached for the newer session.

    Overlapping refreshes past the TTL each hit the identity service unless
    ``single_flight`` is set, in which case callers checking the same
    credentials share one in-flight check.
    """

    def __init__(
        self,
        store: SessionStore,
        client: "IdentityClient",
        *,
        executor: Optional[Executor] = None,
        ttl_ms: int = DEFAULT_STATUS_TTL_MS,
        single_flight: bool = False,
        clock: Clock = now_ms,
        on_checked: Optional[Callable[[Session, ValidationResult], None]] = None,
    ) -> None:
        self.store = store
        self.client = client
        self.executor = executor
        self.ttl_ms = ttl_ms
        self.single_flight = single_flight
        self._clock = clock
        self._on_checked = on_checked
        self._snapshot = StatusSnapshot()
        self._generation = 0
        self._lock = threading.Lock()
        self._inflight: Dict[Hashable, "asyncio.Future[Status]"] = {}
        store.add_listener(self._on_replace)

    def snapshot(self) -> StatusSnapshot:
        with self._lock:
            return self._snapshot

    def reset(self) -> None:
        """Forget the cached status; any in-flight check becomes stale."""
        with self._lock:
            self._snapshot = StatusSnapshot()
            self._generation += 1

    def _on_replace(self, _session: Session) -> None:
        self.reset()

    async def get_status(self) -> Status:
        """Return the cached status, refreshing it once the TTL has elapsed."""
        with self._lock:
            snapshot = self._snapshot
            generation = self._generation
        if snapshot.is_fresh(self._clock(), self.ttl_ms):
            return snapshot.value

        # Generation is read before the session so a concurrent replace can
        # only make this check stale, never misattribute it.
        session = self.store.current()
        if not self.single_flight:
            return await self._refresh(session, generation)

        key = session.identity_key
        pending = self._inflight.get(key)
        if pending is None:
            pending = asyncio.ensure_future(self._refresh(session, generation))
            self._inflight[key] = pending
            pending.add_done_callback(lambda _f, k=key: self._inflight.pop(k, None))
        return await asyncio.shield(pending)

    async def _refresh(self, session: Session, generation: int) -> Status:
        loop = asyncio.get_running_loop()
        result = await loop.run_in_executor(self.executor, self.client.validate, session)
        self._record(session, generation, result)
        if self._on_checked is not None:
            self._on_checked(session, result)
        return result.status

    def _record(self, session: Session, generation: int, result: ValidationResult) -> None:
        with self._lock:
            if generation != self._generation:
                logger.debug(
                    "Discarding status for replaced session",
                    username=session.display_name,
                    status=result.status.value,
                )
                return
            self._snapshot = StatusSnapshot(result.status, self._clock())
