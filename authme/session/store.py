"""Owned holder of the active session."""

from __future__ import annotations

import threading
from typing import Callable, List, Optional

from ..errors import SessionStoreError
from ..logging_config import get_logger
from .types import Session

logger = get_logger(__name__)

SessionSink = Callable[[Session], None]
ReplaceListener = Callable[[Session], None]


class SessionStore:
    """Holds the current session; every replace notifies listeners.

    ``sink`` receives each new session before it becomes current and stands in
    for the host client's session field. If it raises, the store is left
    unchanged and :class:`SessionStoreError` is raised.
    """

    def __init__(self, initial: Session, *, sink: Optional[SessionSink] = None) -> None:
        self._session = initial
        self._sink = sink
        self._listeners: List[ReplaceListener] = []
        self._lock = threading.RLock()

    def current(self) -> Session:
        with self._lock:
            return self._session

    def add_listener(self, listener: ReplaceListener) -> None:
        with self._lock:
            self._listeners.append(listener)

    def replace(self, session: Session) -> None:
        with self._lock:
            if self._sink is not None:
                try:
                    self._sink(session)
                except Exception as exc:
                    raise SessionStoreError(f"Unable to install session for '{session.display_name}': {exc}") from exc
            self._session = session
            listeners = list(self._listeners)

            # Cached status is now stale
            for listener in listeners:
                try:
                    listener(session)
                except Exception as exc:
                    logger.error("Session replace listener failed", username=session.display_name, error=str(exc))

        logger.debug("Session replaced", username=session.display_name, account_type=session.account_type.value)
