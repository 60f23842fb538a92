from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

from ...core.enums import AttendanceStatus, LateApproval


@dataclass(frozen=True)
class StatusDecision:
    status: AttendanceStatus
    late_approval_status: Optional[LateApproval] = None


class AttendanceStrategy(ABC):
    """Strategy Pattern: encapsulate how we decide an attendance status."""

    @abstractmethod
    def decide_punch_in(self) -> StatusDecision:
        raise NotImplementedError
