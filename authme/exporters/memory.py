"""In-memory exporter, mostly for tests and local runs."""

from __future__ import annotations

from typing import List

from ..session.events import SessionEvent
from .base import Exporter


class InMemoryExporter(Exporter):
    def __init__(self) -> None:
        self.events: List[SessionEvent] = []
        self.closed = False

    async def export(self, event: SessionEvent) -> None:
        self.events.append(event)

    async def close(self) -> None:
        self.closed = True

    def kinds(self) -> List[str]:
        return [event.kind for event in self.events]
