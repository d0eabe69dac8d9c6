"""Utility helpers for identity hashing and time operations."""

from .hashing import name_uuid_from_bytes, offline_account_id, parse_account_id, undashed
from .time import now_ms, utc_now, utc_now_naive

__all__ = [
    "name_uuid_from_bytes",
    "offline_account_id",
    "parse_account_id",
    "undashed",
    "now_ms",
    "utc_now",
    "utc_now_naive",
]
