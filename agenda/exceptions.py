"""Domain errors raised by the service layer and mapped to HTTP in main.py"""

from typing import Any, Optional


class AgendaError(Exception):
    """Base exception for booking and catalog failures."""

    code = "error"

    def __init__(self, message: str, *, code: Optional[str] = None, details: Any = None):
        super().__init__(message)
        self.message = message
        if code:
            self.code = code
        self.details = details


class ValidationError(AgendaError):
    """Missing/malformed input or an unknown service. Never retried."""

    code = "ValidationError"


class ConflictError(AgendaError):
    """The requested time range overlaps another active appointment."""

    code = "SlotTaken"

    def __init__(self, message: str = "slot taken", *, details: Any = None):
        super().__init__(message, details=details)


class NotFoundError(AgendaError):
    """Unknown id, or an id that belongs to another owner."""

    code = "NotFound"


class MissingField(ValidationError):
    code = "MissingField"


class ServiceNotFound(ValidationError):
    code = "ServiceNotFound"

    def __init__(self, service_id: str):
        super().__init__(
            "Service not found or does not belong to this account",
            details={"serviceId": service_id},
        )


class InvalidTimeRange(ValidationError):
    code = "InvalidTimeRange"


class InvalidStatusTransition(ValidationError):
    code = "InvalidStatusTransition"

    def __init__(self, current: str, requested: str):
        super().__init__(
            f"Cannot change status from {current} to {requested}",
            details={"from": current, "to": requested},
        )


class InvalidBusinessHours(ValidationError):
    code = "InvalidBusinessHours"
