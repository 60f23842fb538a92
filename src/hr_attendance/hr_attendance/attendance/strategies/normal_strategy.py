from __future__ import annotations

from ...core.enums import AttendanceStatus
from .base import AttendanceStrategy, StatusDecision


class NormalStrategy(AttendanceStrategy):
    """Punch-in at or before the cutoff."""

    def decide_punch_in(self) -> StatusDecision:
        return StatusDecision(status=AttendanceStatus.PRESENT)
