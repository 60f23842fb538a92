from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from ..common.datetime_utils import minutes_of_day
from ..core.enums import WorkMode, WorkModeApproval
from .strategies.base import AttendanceStrategy
from .strategies.late_strategy import LateStrategy
from .strategies.normal_strategy import NormalStrategy


def is_late(now: datetime, cutoff_minutes: int) -> bool:
    """Strictly after the cutoff minute is late; 09:35:59 with a 09:35 cutoff is not."""
    return minutes_of_day(now) > cutoff_minutes


def initial_work_mode_approval(work_mode: WorkMode) -> WorkModeApproval:
    # Office punches are geofenced, so they skip the approval track.
    if work_mode == WorkMode.OFFICE:
        return WorkModeApproval.APPROVED
    return WorkModeApproval.PENDING


@dataclass
class AttendanceStrategyFactory:
    """Factory Pattern: choose appropriate strategy based on rules."""

    def for_punch_in(self, *, now: datetime, cutoff_minutes: int) -> AttendanceStrategy:
        if is_late(now, cutoff_minutes):
            return LateStrategy()
        return NormalStrategy()
