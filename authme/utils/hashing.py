"""Deterministic identity helpers."""

from __future__ import annotations

import hashlib
from uuid import UUID

OFFLINE_PREFIX = "offline:"


def name_uuid_from_bytes(data: bytes) -> UUID:
    """Return a version-3 UUID built from the MD5 digest of ``data``.

    No namespace is mixed in, so the result matches the name-based UUIDs
    produced by the JVM for the same bytes.
    """
    return UUID(bytes=hashlib.md5(data).digest(), version=3)


def offline_account_id(username: str) -> UUID:
    """Return the stable pseudo account id used for offline sessions.

    Characters that cannot be encoded become ``?``, as the JVM does.
    """
    return name_uuid_from_bytes(f"{OFFLINE_PREFIX}{username}".encode("utf-8", errors="replace"))


def undashed(account_id: UUID) -> str:
    """Return the 32-char hex form used on the identity service wire."""
    return account_id.hex


def parse_account_id(value: str) -> UUID:
    """Parse a dashed or undashed UUID string."""
    return UUID(hex=value.strip())
