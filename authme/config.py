"""Runtime configuration for the session service."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Mapping, Optional
from uuid import uuid4

DEFAULT_STATUS_TTL_MS = 60_000
DEFAULT_AUTH_SERVER_URL = "https://authserver.mojang.com"
DEFAULT_SESSION_SERVER_URL = "https://sessionserver.mojang.com"

_TRUE_VALUES = {"1", "true", "yes", "on"}


def _new_client_token() -> str:
    return uuid4().hex


@dataclass(frozen=True)
class AuthMeConfig:
    """Settings for identity calls, status caching and logging."""

    status_ttl_ms: int = DEFAULT_STATUS_TTL_MS
    request_timeout_s: float = 10.0
    max_workers: int = 2
    auth_server_url: str = DEFAULT_AUTH_SERVER_URL
    session_server_url: str = DEFAULT_SESSION_SERVER_URL
    client_token: str = field(default_factory=_new_client_token, repr=False)
    proxy_url: Optional[str] = None
    single_flight: bool = False
    default_username: str = "Player"
    log_level: str = "INFO"
    pg_dsn: Optional[str] = field(default=None, repr=False)

    def __post_init__(self) -> None:
        if self.status_ttl_ms <= 0:
            raise ValueError(f"status_ttl_ms must be positive, got {self.status_ttl_ms}.")
        if self.request_timeout_s <= 0:
            raise ValueError(f"request_timeout_s must be positive, got {self.request_timeout_s}.")
        if self.max_workers <= 0:
            raise ValueError(f"max_workers must be positive, got {self.max_workers}.")

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "AuthMeConfig":
        """Build config from ``AUTHME_*`` variables, falling back to defaults."""
        env = os.environ if environ is None else environ
        kwargs: dict = {}

        if "AUTHME_STATUS_TTL_MS" in env:
            kwargs["status_ttl_ms"] = int(env["AUTHME_STATUS_TTL_MS"])
        if "AUTHME_REQUEST_TIMEOUT_S" in env:
            kwargs["request_timeout_s"] = float(env["AUTHME_REQUEST_TIMEOUT_S"])
        if "AUTHME_MAX_WORKERS" in env:
            kwargs["max_workers"] = int(env["AUTHME_MAX_WORKERS"])
        if "AUTHME_SINGLE_FLIGHT" in env:
            kwargs["single_flight"] = env["AUTHME_SINGLE_FLIGHT"].strip().lower() in _TRUE_VALUES

        for key, name in (
            ("auth_server_url", "AUTHME_AUTH_SERVER_URL"),
            ("session_server_url", "AUTHME_SESSION_SERVER_URL"),
            ("client_token", "AUTHME_CLIENT_TOKEN"),
            ("proxy_url", "AUTHME_PROXY_URL"),
            ("default_username", "AUTHME_DEFAULT_USERNAME"),
            ("log_level", "AUTHME_LOG_LEVEL"),
        ):
            value = env.get(name)
            if value:
                kwargs[key] = value

        dsn = env.get("AUTHME_PG_DSN") or env.get("DATABASE_URL")
        if dsn:
            kwargs["pg_dsn"] = dsn

        return cls(**kwargs)
