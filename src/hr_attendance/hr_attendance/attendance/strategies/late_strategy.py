from __future__ import annotations

from ...core.enums import AttendanceStatus, LateApproval
from .base import AttendanceStrategy, StatusDecision


class LateStrategy(AttendanceStrategy):
    """Late punch-in; needs a separate late sign-off."""

    def decide_punch_in(self) -> StatusDecision:
        return StatusDecision(status=AttendanceStatus.LATE, late_approval_status=LateApproval.NOT_APPROVED)
