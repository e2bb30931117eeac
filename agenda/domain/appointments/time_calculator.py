"""Time parsing and interval arithmetic for bookings and calendar views"""

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Optional

from ...exceptions import InvalidBusinessHours, InvalidTimeRange
from ...shared.validators import parse_hhmm

WEEKDAY_INDEX = {"monday": 0, "sunday": 6}


@dataclass(frozen=True)
class BusinessWindow:
    """One opening period of a day, start inclusive, end exclusive"""

    start: time
    end: time

    def bounds(self, day: date) -> tuple[datetime, datetime]:
        return datetime.combine(day, self.start), datetime.combine(day, self.end)


def parse_window(start: str, end: str) -> BusinessWindow:
    try:
        window = BusinessWindow(parse_hhmm(start), parse_hhmm(end))
    except ValueError as e:
        raise InvalidBusinessHours(str(e), details={"start": start, "end": end}) from e
    if window.start >= window.end:
        raise InvalidBusinessHours(
            "Business hours must start before they end",
            details={"start": start, "end": end},
        )
    return window


def validate_interval(interval_minutes: int) -> timedelta:
    if interval_minutes < 1:
        raise InvalidBusinessHours(
            "Slot interval must be at least 1 minute",
            details={"interval": interval_minutes},
        )
    return timedelta(minutes=interval_minutes)


def end_for(start: datetime, duration_minutes: int) -> datetime:
    return start + timedelta(minutes=duration_minutes)


def ensure_range(start: datetime, end: datetime) -> None:
    if end <= start:
        raise InvalidTimeRange(
            "endTime must be after startTime",
            details={"startTime": start.isoformat(), "endTime": end.isoformat()},
        )


def week_start(day: date, starts_on: str = "sunday") -> date:
    first = WEEKDAY_INDEX.get(starts_on, 6)
    return day - timedelta(days=(day.weekday() - first) % 7)


def day_bounds(day: date, days: int = 1) -> tuple[datetime, datetime]:
    start = datetime.combine(day, time.min)
    return start, start + timedelta(days=days)


def format_label(moment: datetime) -> str:
    return moment.strftime("%H:%M")


def optional_window(start: Optional[str], end: Optional[str]) -> Optional[BusinessWindow]:
    """Parse an explicit window only when both ends are given"""
    if start is None and end is None:
        return None
    if start is None or end is None:
        raise InvalidBusinessHours(
            "Both start and end are required to override business hours",
            details={"start": start, "end": end},
        )
    return parse_window(start, end)
