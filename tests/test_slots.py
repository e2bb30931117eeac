"""Slot generation over already-fetched appointments"""

from datetime import date, datetime, time
from types import SimpleNamespace

import pytest

from agenda.domain.appointments.slots import generate_day, generate_slots, generate_week
from agenda.domain.appointments.time_calculator import (
    BusinessWindow,
    optional_window,
    parse_window,
    week_start,
)
from agenda.exceptions import InvalidBusinessHours

DAY = date(2030, 1, 7)
OFFICE = BusinessWindow(time(8, 0), time(18, 0))


def appt(hour, minute=0, day=DAY):
    return SimpleNamespace(start_time=datetime.combine(day, time(hour, minute)))


def test_half_hour_labels_cover_the_window():
    slots = generate_slots(DAY, OFFICE, 30)

    assert len(slots) == 20
    assert (slots[0].time, slots[0].end) == ("08:00", "08:30")
    assert (slots[-1].time, slots[-1].end) == ("17:30", "18:00")
    assert all(s.is_available for s in slots)


def test_last_slot_is_truncated_at_window_end():
    slots = generate_slots(DAY, OFFICE, 45)

    assert len(slots) == 14
    assert (slots[-1].time, slots[-1].end) == ("17:45", "18:00")


def test_interval_longer_than_window():
    slots = generate_slots(DAY, BusinessWindow(time(9, 0), time(9, 20)), 60)
    assert [(s.time, s.end) for s in slots] == [("09:00", "09:20")]


def test_appointments_attach_on_exact_label_only():
    at_nine = appt(9)
    off_grid = appt(9, 15)
    other_day = appt(9, day=date(2030, 1, 8))

    slots = {s.time: s for s in generate_slots(DAY, OFFICE, 30, [at_nine, off_grid, other_day])}

    assert slots["09:00"].appointments == [at_nine]
    assert slots["09:00"].is_available is False
    assert slots["09:30"].is_available is True
    assert all(other_day not in s.appointments for s in slots.values())


def test_two_appointments_on_one_label():
    first, second = appt(10), appt(10)
    slots = {s.time: s for s in generate_slots(DAY, OFFICE, 60, [first, second])}
    assert slots["10:00"].appointments == [first, second]


def test_range_attachment_uses_slot_containing_start():
    half_past = appt(10, 30)
    on_label = appt(11)

    slots = {s.time: s for s in generate_slots(DAY, OFFICE, 60, [half_past, on_label], by_range=True)}

    assert slots["10:00"].appointments == [half_past]
    assert slots["11:00"].appointments == [on_label]
    assert slots["12:00"].is_available


def test_split_day_has_no_labels_in_the_gap():
    afternoon = BusinessWindow(time(14, 0), time(16, 0))
    morning = BusinessWindow(time(9, 0), time(12, 0))

    slots = generate_day(DAY, [afternoon, morning], 60, [appt(14)])

    assert [s.time for s in slots] == ["09:00", "10:00", "11:00", "14:00", "15:00"]
    assert slots[3].appointments and not slots[2].appointments


def test_day_without_periods():
    assert generate_day(DAY, [], 30, [appt(9)]) == []


def test_week_groups_off_grid_starts_into_the_hour():
    monday = date(2030, 1, 7)
    half_past_ten = appt(10, 30, day=monday)

    days = generate_week(date(2030, 1, 6), {monday: [OFFICE]}, 60, [half_past_ten])

    ten = next(s for s in days[1].slots if s.time == "10:00")
    assert ten.appointments == [half_past_ten]
    assert ten.is_available is False


def test_invalid_interval():
    with pytest.raises(InvalidBusinessHours):
        generate_slots(DAY, OFFICE, 0)


def test_week_with_closed_days():
    sunday = date(2030, 1, 6)
    windows = {date(2030, 1, 7): [OFFICE], date(2030, 1, 8): [OFFICE], date(2030, 1, 9): []}
    monday_visit = appt(8)

    days = generate_week(sunday, windows, 60, [monday_visit])

    assert [d.date.day for d in days] == [6, 7, 8, 9, 10, 11, 12]
    assert days[0].slots == []
    assert len(days[1].slots) == 10
    assert days[1].slots[0].appointments == [monday_visit]
    assert days[2].slots[0].is_available
    assert days[3].slots == []


def test_parse_window_rejects_bad_hours():
    assert parse_window("08:00", "18:00") == OFFICE
    for start, end in [("18:00", "08:00"), ("08:00", "08:00"), ("8", "18:00"), ("25:00", "26:00")]:
        with pytest.raises(InvalidBusinessHours):
            parse_window(start, end)


def test_optional_window():
    assert optional_window(None, None) is None
    assert optional_window("09:00", "12:00") == BusinessWindow(time(9, 0), time(12, 0))
    with pytest.raises(InvalidBusinessHours):
        optional_window(None, "12:00")


def test_week_start():
    wednesday = date(2030, 1, 9)
    assert week_start(wednesday, "sunday") == date(2030, 1, 6)
    assert week_start(wednesday, "monday") == date(2030, 1, 7)
    assert week_start(date(2030, 1, 6), "sunday") == date(2030, 1, 6)

