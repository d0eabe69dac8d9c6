"""Session datatypes and enums."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Dict, List, Mapping, Tuple
from uuid import UUID

from ..utils.hashing import undashed


class AccountType(str, Enum):
    """Kind of account backing a session."""

    LEGACY = "legacy"
    MOJANG = "mojang"
    MICROSOFT = "msa"

    @classmethod
    def parse(cls, value: str) -> "AccountType":
        lowered = value.strip().lower()
        for member in cls:
            if member.value == lowered or member.name.lower() == lowered:
                return member
        raise ValueError(f"Unknown account type '{value}'. Expected one of: {', '.join(m.value for m in cls)}.")


class Status(str, Enum):
    """Last known validity of the current session token."""

    UNKNOWN = "UNKNOWN"
    VALID = "VALID"
    INVALID = "INVALID"


def _freeze_properties(properties: Mapping[str, List[str]]) -> Mapping[str, Tuple[str, ...]]:
    return MappingProxyType({name: tuple(values) for name, values in properties.items()})


@dataclass(frozen=True)
class Session:
    """Credential bundle for one logged-in identity. Replaced whole, never patched."""

    display_name: str
    account_id: UUID
    auth_token: str = field(repr=False)
    account_type: AccountType = AccountType.LEGACY
    extra_properties: Mapping[str, Tuple[str, ...]] = field(default_factory=dict, hash=False, repr=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "extra_properties", _freeze_properties(self.extra_properties))

    @property
    def account_id_hex(self) -> str:
        return undashed(self.account_id)

    @property
    def identity_key(self) -> Tuple[UUID, str]:
        """Key identifying which credentials a status check targets."""
        return (self.account_id, self.auth_token)


@dataclass(frozen=True)
class StatusSnapshot:
    """Cached status value and when it was checked (epoch millis)."""

    value: Status = Status.UNKNOWN
    checked_at_ms: int = 0

    def is_fresh(self, now_ms: int, ttl_ms: int) -> bool:
        return now_ms - self.checked_at_ms < ttl_ms


@dataclass(frozen=True)
class Credentials:
    username: str
    password: str = field(repr=False)


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of a validity check. Failures are reported here, never raised."""

    status: Status
    reason: str

    @property
    def valid(self) -> bool:
        return self.status is Status.VALID


def group_properties(raw: List[Dict[str, str]]) -> Dict[str, List[str]]:
    """Group ``[{name, value}]`` user properties into ``name -> [values]``."""
    grouped: Dict[str, List[str]] = {}
    for item in raw:
        name = item.get("name")
        if name is None:
            continue
        grouped.setdefault(name, []).append(str(item.get("value", "")))
    return grouped
