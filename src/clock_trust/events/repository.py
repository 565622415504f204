from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from .model import ClockEvent


class ClockEventRepository(Protocol):
    def list_for_employee_since(self, employee_id: str, since: datetime) -> Sequence[ClockEvent]:
        """Events of one employee at or after `since`, oldest first."""

        raise NotImplementedError

    def get_by_id(self, event_id: str) -> Optional[ClockEvent]:
        raise NotImplementedError

    def create(self, event: ClockEvent) -> str:
        """Persist an event together with its integrity bundle.

        Returns the new event id.
        """

        raise NotImplementedError
