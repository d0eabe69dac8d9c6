"""Base exporter interface."""

from __future__ import annotations

from abc import ABC, abstractmethod

from ..session.events import SessionEvent


class Exporter(ABC):
    """Abstract base class for session event exporters."""

    @abstractmethod
    async def export(self, event: SessionEvent) -> None:
        """Export one session event."""

    async def close(self) -> None:
        """Close exporter resources if needed."""
