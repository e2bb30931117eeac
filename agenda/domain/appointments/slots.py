"""
Slot generation for the day and week calendar views.

Pure functions over appointments that were already fetched; no I/O here.
"""

from collections import defaultdict
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import Iterable, Sequence

from .time_calculator import BusinessWindow, format_label, validate_interval


@dataclass
class TimeSlot:
    time: str
    end: str
    appointments: list = field(default_factory=list)

    @property
    def is_available(self) -> bool:
        return not self.appointments


@dataclass
class DaySlots:
    date: date
    slots: list[TimeSlot]


def _index_by_start(appointments: Iterable) -> dict[datetime, list]:
    by_start = defaultdict(list)
    for appointment in appointments:
        by_start[appointment.start_time].append(appointment)
    return by_start


def generate_slots(
    day: date,
    window: BusinessWindow,
    interval_minutes: int,
    appointments: Iterable = (),
    by_range: bool = False,
) -> list[TimeSlot]:
    """
    Label the window at a fixed interval and attach appointments to labels.

    By default an appointment is attached to a slot only when its start_time
    equals the label exactly. With by_range, it is attached to the slot whose
    [label, end) contains its start_time. The last slot ends at the window
    end even when the interval does not divide the window evenly.

    Args:
        day: calendar date of the window
        window: one opening period of that day
        interval_minutes: distance between labels, at least 1
        appointments: objects exposing ``start_time``
        by_range: attach by containment instead of exact start

    Returns:
        Slots ordered by time
    """
    step = validate_interval(interval_minutes)
    cursor, window_end = window.bounds(day)
    appointments = list(appointments)
    by_start = _index_by_start(appointments)

    slots = []
    while cursor < window_end:
        slot_end = min(cursor + step, window_end)
        if by_range:
            attached = [a for a in appointments if cursor <= a.start_time < slot_end]
        else:
            attached = list(by_start.get(cursor, ()))
        slots.append(TimeSlot(time=format_label(cursor), end=format_label(slot_end), appointments=attached))
        cursor += step
    return slots


def generate_day(
    day: date,
    windows: Sequence[BusinessWindow],
    interval_minutes: int,
    appointments: Iterable = (),
    by_range: bool = False,
) -> list[TimeSlot]:
    """Slots of every opening period of a day in order; gaps between periods get no labels"""
    validate_interval(interval_minutes)
    appointments = list(appointments)

    slots = []
    for window in sorted(windows, key=lambda w: w.start):
        slots.extend(generate_slots(day, window, interval_minutes, appointments, by_range))
    return slots


def generate_week(
    first_day: date,
    windows: dict[date, Sequence[BusinessWindow]],
    interval_minutes: int,
    appointments: Iterable = (),
) -> list[DaySlots]:
    """
    Seven consecutive days from first_day; a day without periods is closed.

    The week grid is coarser than the day grid, so appointments are grouped
    into the slot containing their start rather than matched on the label.
    """
    validate_interval(interval_minutes)
    appointments = list(appointments)

    days = []
    for offset in range(7):
        day = first_day + timedelta(days=offset)
        todays = [a for a in appointments if a.start_time.date() == day]
        slots = generate_day(day, windows.get(day, ()), interval_minutes, todays, by_range=True)
        days.append(DaySlots(date=day, slots=slots))
    return days
