from __future__ import annotations

import dataclasses
import logging
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from functools import wraps
from typing import Any

from flask import Flask, jsonify, request, session

from ..core.enums import APPROVER_ROLES, Role
from ..core.exceptions import (
    AuthorizationError,
    ConflictError,
    DomainError,
    GeofenceError,
    NotFoundError,
    StoreError,
    ValidationError,
)
from .datetime_utils import parse_iso_date

logger = logging.getLogger(__name__)

# Identity is put in the session by the portal's login; this package only reads it.
SESSION_EMPLOYEE_ID = "employee_id"
SESSION_ROLE = "role"


def to_payload(value: Any) -> Any:
    """Dataclasses/enums/dates/decimals -> JSON-friendly primitives."""
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {f.name: to_payload(getattr(value, f.name)) for f in dataclasses.fields(value)}
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, datetime):
        return value.isoformat(timespec="seconds")
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, Decimal):
        return float(value)
    if isinstance(value, dict):
        return {str(k.value if isinstance(k, Enum) else k): to_payload(v) for k, v in value.items()}
    if isinstance(value, (list, tuple, set)):
        return [to_payload(v) for v in value]
    return value


def ok(data: Any = None, *, status: int = 200, message: str | None = None):
    body: dict[str, Any] = {"success": True, "data": to_payload(data)}
    if message:
        body["message"] = message
    return jsonify(body), status


def current_employee_id() -> int:
    return int(session[SESSION_EMPLOYEE_ID])


def current_role() -> Role:
    try:
        return Role(session.get(SESSION_ROLE))
    except ValueError:
        return Role.EMPLOYEE


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if SESSION_EMPLOYEE_ID not in session:
            return jsonify({"success": False, "error": "Unauthenticated", "message": "Please log in to continue"}), 401
        return view(*args, **kwargs)

    return wrapper


def approver_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if SESSION_EMPLOYEE_ID not in session:
            return jsonify({"success": False, "error": "Unauthenticated", "message": "Please log in to continue"}), 401
        if current_role() not in APPROVER_ROLES:
            return jsonify({"success": False, "error": "AuthorizationError", "message": "Admins and managers only"}), 403
        return view(*args, **kwargs)

    return wrapper


def json_body() -> dict[str, Any]:
    return request.get_json(silent=True) or {}


def date_arg(name: str, default: date | None = None) -> date | None:
    value = (request.args.get(name) or "").strip()
    if not value:
        return default
    try:
        return parse_iso_date(value)
    except ValueError:
        raise ValidationError(f"{name} must be YYYY-MM-DD")


def date_field(body: dict[str, Any], name: str) -> date | None:
    value = body.get(name)
    if not value:
        return None
    try:
        return parse_iso_date(str(value).strip())
    except ValueError:
        raise ValidationError(f"{name} must be YYYY-MM-DD")


def float_field(body: dict[str, Any], name: str) -> float | None:
    value = body.get(name)
    if value is None or value == "":
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{name} must be a number")


_STATUS_BY_ERROR = (
    (GeofenceError, 422),
    (ValidationError, 400),
    (AuthorizationError, 403),
    (NotFoundError, 404),
    (ConflictError, 409),
    (StoreError, 503),
)


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def handle_domain_error(e: DomainError):
        status = next((code for cls, code in _STATUS_BY_ERROR if isinstance(e, cls)), 400)
        body: dict[str, Any] = {"success": False, "error": type(e).__name__, "message": str(e)}
        if isinstance(e, GeofenceError):
            body["distance_m"] = e.distance_m
            body["max_m"] = e.max_m
        if status >= 500:
            logger.error("Request failed: %s", e)
        return jsonify(body), status
