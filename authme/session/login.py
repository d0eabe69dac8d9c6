"""Credential exchange and offline fallback login."""

from __future__ import annotations

import asyncio
from concurrent.futures import Executor
from typing import TYPE_CHECKING, Optional

from ..errors import AuthError, LoginError, SessionStoreError
from ..logging_config import get_logger
from ..utils.hashing import offline_account_id
from .store import SessionStore
from .types import AccountType, Credentials, Session

if TYPE_CHECKING:
    from ..identity.client import IdentityClient

logger = get_logger(__name__)

OFFLINE_TOKEN = "invalidtoken"


def offline_session(username: str) -> Session:
    """Build the deterministic legacy session used for offline play."""
    return Session(
        display_name=username,
        account_id=offline_account_id(username),
        auth_token=OFFLINE_TOKEN,
        account_type=AccountType.LEGACY,
    )


class LoginFlow:
    """Logs in online or offline and installs the result in the store."""

    def __init__(self, store: SessionStore, client: "IdentityClient", *, executor: Optional[Executor] = None) -> None:
        self.store = store
        self.client = client
        self.executor = executor

    async def login_online(self, username: str, password: str) -> Session:
        """Authenticate with the identity service and make the result current.

        Raises :class:`LoginError` (cause chained) without touching the store
        when authentication or the store write fails.
        """
        credentials = Credentials(username, password)
        logger.info("Logging into a new session", username=credentials.username)
        loop = asyncio.get_running_loop()
        try:
            session = await loop.run_in_executor(
                self.executor, self.client.authenticate, credentials.username, credentials.password
            )
            self.store.replace(session)
        except (AuthError, SessionStoreError) as exc:
            logger.error("Session login failed", username=credentials.username, error=str(exc))
            raise LoginError(credentials.username, str(exc)) from exc

        logger.info("Session login successful.", username=session.display_name)
        return session

    def login_offline(self, username: str) -> Session:
        """Install an offline session; returns the previous one if the store refuses it."""
        session = offline_session(username)
        try:
            self.store.replace(session)
        except SessionStoreError as exc:
            logger.error("Session login (offline) failed", username=username, error=str(exc))
            return self.store.current()

        logger.info("Session login (offline) successful.", username=username)
        return session
