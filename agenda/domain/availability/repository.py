"""Business hours repository"""

from sqlalchemy.orm import Session

from ...models import BusinessHours


class BusinessHoursRepository:
    @staticmethod
    def get_hours(db: Session, user_id: int) -> list[BusinessHours]:
        return (
            db.query(BusinessHours)
            .filter(BusinessHours.user_id == user_id)
            .order_by(BusinessHours.weekday.asc())
            .all()
        )

    @staticmethod
    def upsert_hours(db: Session, user_id: int, days: list[dict]) -> list[BusinessHours]:
        """Insert or overwrite one row per weekday in a single commit"""
        existing = {
            row.weekday: row
            for row in db.query(BusinessHours).filter(BusinessHours.user_id == user_id).all()
        }
        for day in days:
            row = existing.get(day["weekday"])
            if row is None:
                row = BusinessHours(user_id=user_id, weekday=day["weekday"])
                db.add(row)
            row.is_open = day["is_open"]
            row.periods = day["periods"]

        db.commit()
        return BusinessHoursRepository.get_hours(db, user_id)
