from __future__ import annotations

from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal

from ..core.exceptions import ValidationError

_TWO_PLACES = Decimal("0.01")


def compute_work_hours(punch_in: datetime, punch_out: datetime) -> Decimal:
    """Elapsed hours between the stored timestamps, rounded to two decimals."""
    if punch_out < punch_in:
        raise ValidationError("Punch-out cannot be before punch-in")
    seconds = Decimal(int((punch_out - punch_in).total_seconds()))
    return (seconds / Decimal(3600)).quantize(_TWO_PLACES, rounding=ROUND_HALF_UP)
