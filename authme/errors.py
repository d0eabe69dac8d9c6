"""Error taxonomy for session login and storage."""

from __future__ import annotations


class AuthError(Exception):
    """Remote identity call failed or rejected the token/credentials."""


class AuthenticationError(AuthError):
    """The identity service rejected the request."""


class InvalidCredentialsError(AuthenticationError):
    """Username/password pair was refused."""


class AuthenticationUnavailableError(AuthError):
    """The identity service could not be reached or answered with a server error."""


class SessionStoreError(Exception):
    """Writing a new session to the store (or its host sink) failed."""


class LoginError(Exception):
    """Single failure kind surfaced by an online login.

    The underlying :class:`AuthError` or :class:`SessionStoreError` is chained
    as ``__cause__``.
    """

    def __init__(self, username: str, reason: str) -> None:
        super().__init__(f"Login failed for '{username}': {reason}")
        self.username = username
        self.reason = reason
