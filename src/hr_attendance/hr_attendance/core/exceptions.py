from __future__ import annotations


class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class InvalidDateRange(ValidationError):
    """Raised when a leave ends before it starts."""


class HomeLocationNotConfigured(ValidationError):
    """Raised when reached-home is requested without home coordinates."""


class ReachedHomeNotApplicable(ValidationError):
    """Raised when reached-home is requested by an employee it does not apply to."""


class ApprovalNotApplicable(ValidationError):
    """Raised when an approval track does not apply to the record."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""


class NotFoundError(DomainError):
    """Raised when a referenced record does not exist."""


class ConflictError(DomainError):
    """Raised when the request conflicts with the current persisted state."""


class DuplicateRecordError(ConflictError):
    """Raised by repositories when the store rejects a duplicate key."""


class AlreadyPunchedToday(ConflictError):
    pass


class NoActivePunchIn(ConflictError):
    pass


class NotPunchedOut(ConflictError):
    pass


class SickLeaveAlreadyTakenThisMonth(ConflictError):
    pass


class ApprovalAlreadyDecided(ConflictError):
    pass


class LeaveAlreadyDecided(ConflictError):
    pass


class GeofenceError(DomainError):
    """Raised when a position is outside a geofence.

    Carries the measured distance so callers can tell the user how far off they are.
    """

    def __init__(self, message: str, *, distance_km: float, max_km: float):
        super().__init__(message)
        self.distance_km = distance_km
        self.max_km = max_km

    @property
    def distance_m(self) -> int:
        return int(round(self.distance_km * 1000))

    @property
    def max_m(self) -> int:
        return int(round(self.max_km * 1000))


class OutsideGeofence(GeofenceError):
    pass


class OutsideHomeRadius(GeofenceError):
    pass


class StoreError(DomainError):
    """Transient failure talking to the backing store. Callers may re-issue the request."""
