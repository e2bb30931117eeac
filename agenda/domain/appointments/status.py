"""Appointment status lifecycle"""

import logging
from enum import Enum

from ...exceptions import InvalidStatusTransition

logger = logging.getLogger(__name__)


class AppointmentStatus(str, Enum):
    SCHEDULED = "SCHEDULED"
    CONFIRMED = "CONFIRMED"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"
    NO_SHOW = "NO_SHOW"


INITIAL_STATUS = AppointmentStatus.SCHEDULED

# Appointments in these states never block a time range
NON_BLOCKING_STATUSES = frozenset({AppointmentStatus.CANCELLED, AppointmentStatus.NO_SHOW})

ALLOWED_TRANSITIONS: dict[AppointmentStatus, frozenset[AppointmentStatus]] = {
    AppointmentStatus.SCHEDULED: frozenset(
        {
            AppointmentStatus.CONFIRMED,
            AppointmentStatus.COMPLETED,
            AppointmentStatus.CANCELLED,
            AppointmentStatus.NO_SHOW,
        }
    ),
    AppointmentStatus.CONFIRMED: frozenset(
        {
            AppointmentStatus.COMPLETED,
            AppointmentStatus.CANCELLED,
            AppointmentStatus.NO_SHOW,
        }
    ),
    AppointmentStatus.COMPLETED: frozenset(),
    AppointmentStatus.CANCELLED: frozenset(),
    AppointmentStatus.NO_SHOW: frozenset(),
}

# Statuses a new appointment may start in when transitions are enforced
CREATABLE_STATUSES = frozenset({AppointmentStatus.SCHEDULED, AppointmentStatus.CONFIRMED})


def is_blocking(status) -> bool:
    return AppointmentStatus(status) not in NON_BLOCKING_STATUSES


def can_transition(current, requested) -> bool:
    current = AppointmentStatus(current)
    requested = AppointmentStatus(requested)
    return current == requested or requested in ALLOWED_TRANSITIONS[current]


def ensure_transition(current, requested, strict: bool = True) -> None:
    """Raise InvalidStatusTransition unless current -> requested is legal"""
    if strict and not can_transition(current, requested):
        current, requested = AppointmentStatus(current).value, AppointmentStatus(requested).value
        logger.warning(f"Rejected status change {current} -> {requested}")
        raise InvalidStatusTransition(current, requested)


def ensure_initial(status, strict: bool = True) -> None:
    if strict and AppointmentStatus(status) not in CREATABLE_STATUSES:
        raise InvalidStatusTransition("NEW", AppointmentStatus(status).value)
