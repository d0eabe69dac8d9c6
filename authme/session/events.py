"""Audit records for session activity."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional
from uuid import uuid4

from ..utils.time import utc_now_naive


def _new_id() -> str:
    return str(uuid4())


@dataclass
class SessionEvent:
    """One status check or login attempt.

    Tokens and passwords are never part of an event.
    """

    kind: str
    display_name: str
    account_id: Optional[str] = None
    account_type: Optional[str] = None
    status: Optional[str] = None
    success: bool = True
    error: Optional[str] = None
    event_id: str = field(default_factory=_new_id)
    occurred_at: datetime = field(default_factory=utc_now_naive)

    def to_dict(self) -> dict:
        """Serialize event for exporters."""
        return {
            "event_id": self.event_id,
            "kind": self.kind,
            "display_name": self.display_name,
            "account_id": self.account_id,
            "account_type": self.account_type,
            "status": self.status,
            "success": self.success,
            "error": self.error,
            "occurred_at": self.occurred_at,
        }
