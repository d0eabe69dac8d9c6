"""authme package.

Keeps a game client's authentication session: cached validity checks, online
login against a Yggdrasil identity service and a deterministic offline
fallback.
"""

from .config import AuthMeConfig
from .errors import (
    AuthenticationError,
    AuthenticationUnavailableError,
    AuthError,
    InvalidCredentialsError,
    LoginError,
    SessionStoreError,
)
from .logging_config import configure_logging
from .service import SessionService, create_session_service
from .session.types import AccountType, Session, Status

__all__ = [
    "AccountType",
    "AuthError",
    "AuthMeConfig",
    "AuthenticationError",
    "AuthenticationUnavailableError",
    "InvalidCredentialsError",
    "LoginError",
    "Session",
    "SessionService",
    "SessionStoreError",
    "Status",
    "configure_logging",
    "create_session_service",
]
