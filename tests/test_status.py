import pytest

from agenda.domain.appointments.status import (
    AppointmentStatus,
    can_transition,
    ensure_initial,
    ensure_transition,
    is_blocking,
)
from agenda.exceptions import InvalidStatusTransition

S = AppointmentStatus


@pytest.mark.parametrize(
    "current,requested",
    [
        (S.SCHEDULED, S.CONFIRMED),
        (S.SCHEDULED, S.COMPLETED),
        (S.SCHEDULED, S.CANCELLED),
        (S.SCHEDULED, S.NO_SHOW),
        (S.CONFIRMED, S.COMPLETED),
        (S.CONFIRMED, S.CANCELLED),
        (S.CONFIRMED, S.NO_SHOW),
        (S.COMPLETED, S.COMPLETED),
        (S.CANCELLED, S.CANCELLED),
    ],
)
def test_allowed(current, requested):
    assert can_transition(current, requested)
    ensure_transition(current, requested)


@pytest.mark.parametrize(
    "current,requested",
    [
        (S.CONFIRMED, S.SCHEDULED),
        (S.COMPLETED, S.SCHEDULED),
        (S.COMPLETED, S.CANCELLED),
        (S.CANCELLED, S.SCHEDULED),
        (S.CANCELLED, S.CONFIRMED),
        (S.NO_SHOW, S.SCHEDULED),
    ],
)
def test_rejected(current, requested):
    assert not can_transition(current, requested)
    with pytest.raises(InvalidStatusTransition) as exc:
        ensure_transition(current, requested)
    assert exc.value.details == {"from": current.value, "to": requested.value}

    # Lenient mode accepts anything
    ensure_transition(current, requested, strict=False)


def test_plain_strings_are_accepted():
    assert can_transition("SCHEDULED", "CONFIRMED")
    with pytest.raises(ValueError):
        can_transition("SCHEDULED", "ARCHIVED")


def test_blocking_statuses():
    assert is_blocking(S.SCHEDULED)
    assert is_blocking("CONFIRMED")
    assert is_blocking(S.COMPLETED)
    assert not is_blocking(S.CANCELLED)
    assert not is_blocking("NO_SHOW")


def test_initial_status():
    ensure_initial(S.SCHEDULED)
    ensure_initial(S.CONFIRMED)
    with pytest.raises(InvalidStatusTransition):
        ensure_initial(S.COMPLETED)
    ensure_initial(S.CANCELLED, strict=False)
