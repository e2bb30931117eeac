"""Business hours service - weekly opening periods per owner"""

import logging
from datetime import date

from sqlalchemy.orm import Session

from ... import config
from ...database import begin_write
from ..appointments.time_calculator import BusinessWindow, parse_window
from .repository import BusinessHoursRepository
from .schemas import BusinessDay, Period

logger = logging.getLogger(__name__)

OPEN_BY_DEFAULT = range(0, 5)  # Monday to Friday


def default_day(weekday: int) -> BusinessDay:
    if weekday in OPEN_BY_DEFAULT:
        return BusinessDay(
            weekday=weekday,
            isOpen=True,
            periods=[Period(start=config.BUSINESS_HOURS_START, end=config.BUSINESS_HOURS_END)],
        )
    return BusinessDay(weekday=weekday, isOpen=False)


class AvailabilityService:
    def __init__(self, db: Session):
        self.db = db
        self.repo = BusinessHoursRepository()

    def get_week(self, owner_id: int) -> list[BusinessDay]:
        """Seven days, stored rows taking precedence over the defaults"""
        stored = {
            row.weekday: BusinessDay(
                weekday=row.weekday,
                isOpen=row.is_open,
                periods=[Period(**p) for p in row.periods or []],
            )
            for row in self.repo.get_hours(self.db, owner_id)
        }
        return [stored.get(weekday) or default_day(weekday) for weekday in range(7)]

    def replace_week(self, owner_id: int, days: list[BusinessDay]) -> list[BusinessDay]:
        logger.info(f"Updating business hours for user_id: {owner_id} ({len(days)} days)")
        try:
            begin_write(self.db)
            self.repo.upsert_hours(
                self.db,
                owner_id,
                [
                    {
                        "weekday": d.weekday,
                        "is_open": d.isOpen,
                        "periods": [p.model_dump() for p in d.periods],
                    }
                    for d in days
                ],
            )
        except Exception:
            self.db.rollback()
            raise
        return self.get_week(owner_id)

    def windows_for(self, owner_id: int, days: list[date]) -> dict[date, list[BusinessWindow]]:
        """Opening periods of each day; an empty list for closed days"""
        week = self.get_week(owner_id)
        windows = {}
        for day in days:
            entry = week[day.weekday()]
            windows[day] = [parse_window(p.start, p.end) for p in entry.periods] if entry.isOpen else []
        return windows
