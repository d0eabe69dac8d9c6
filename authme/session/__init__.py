"""Session model, store, status cache and login flow."""

from .cache import StatusCache
from .events import SessionEvent
from .login import OFFLINE_TOKEN, LoginFlow, offline_session
from .store import SessionStore
from .types import AccountType, Credentials, Session, Status, StatusSnapshot, ValidationResult

__all__ = [
    "AccountType",
    "Credentials",
    "LoginFlow",
    "OFFLINE_TOKEN",
    "Session",
    "SessionEvent",
    "SessionStore",
    "Status",
    "StatusCache",
    "StatusSnapshot",
    "ValidationResult",
    "offline_session",
]
