from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..common.geo import GeoPoint
from ..core.enums import EmploymentStatus, Gender, Role


@dataclass(frozen=True)
class Employee:
    """Domain entity read from the HR directory.

    The engine never mutates employees; it only reads identity, gender,
    home coordinates, role and status.
    """

    employee_id: int
    employee_code: str
    full_name: str
    gender: Gender
    role: Role
    status: EmploymentStatus = EmploymentStatus.ACTIVE
    department: Optional[str] = None
    position: Optional[str] = None
    home_lat: Optional[float] = None
    home_lng: Optional[float] = None

    @property
    def is_active(self) -> bool:
        return self.status == EmploymentStatus.ACTIVE

    @property
    def home_location(self) -> Optional[GeoPoint]:
        if self.home_lat is None or self.home_lng is None:
            return None
        return GeoPoint(self.home_lat, self.home_lng)
