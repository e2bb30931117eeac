"""Appointment repository - Database operations for appointments"""

from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session, joinedload

from ...models import Appointment, User
from .status import NON_BLOCKING_STATUSES

NON_BLOCKING = [status.value for status in NON_BLOCKING_STATUSES]


def _escape_like(term: str) -> str:
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class AppointmentRepository:
    """Repository for appointment database operations"""

    @staticmethod
    def lock_owner(db: Session, user_id: int) -> None:
        """
        Take the per-owner write lock for the rest of the transaction.

        SELECT ... FOR UPDATE on the owner's row serializes concurrent
        bookings of one owner without blocking other owners. SQLite ignores
        FOR UPDATE; there the transaction was opened with BEGIN IMMEDIATE
        by database.begin_write and already holds the write lock.
        """
        db.query(User.id).filter(User.id == user_id).with_for_update().first()

    @staticmethod
    def find_conflict(
        db: Session,
        user_id: int,
        start_time: datetime,
        end_time: datetime,
        exclude_id: Optional[str] = None,
    ) -> Optional[Appointment]:
        """First active appointment of the owner intersecting [start_time, end_time)"""
        query = db.query(Appointment).filter(
            Appointment.user_id == user_id,
            Appointment.status.notin_(NON_BLOCKING),
            Appointment.start_time < end_time,
            Appointment.end_time > start_time,
        )
        if exclude_id:
            query = query.filter(Appointment.id != exclude_id)
        return query.order_by(Appointment.start_time.asc()).first()

    @staticmethod
    def get_appointment_by_id(db: Session, appointment_id: str, user_id: int) -> Optional[Appointment]:
        return (
            db.query(Appointment)
            .options(joinedload(Appointment.service))
            .filter(Appointment.id == appointment_id, Appointment.user_id == user_id)
            .first()
        )

    @staticmethod
    def create_appointment(db: Session, user_id: int, **appointment_data) -> Appointment:
        """Insert and commit; callers run their checks in the same transaction first"""
        appointment = Appointment(user_id=user_id, **appointment_data)
        db.add(appointment)
        db.commit()
        db.refresh(appointment)
        return appointment

    @staticmethod
    def update_appointment(db: Session, appointment: Appointment, **updates) -> Appointment:
        """Apply every given field, including explicit None for optional columns"""
        for key, value in updates.items():
            if hasattr(appointment, key):
                setattr(appointment, key, value)

        db.commit()
        db.refresh(appointment)
        return appointment

    @staticmethod
    def search_appointments(
        db: Session,
        user_id: int,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
        status: Optional[str] = None,
        service_id: Optional[str] = None,
        client_name: Optional[str] = None,
    ) -> list[Appointment]:
        """Filter the owner's appointments, ordered by start time"""
        query = (
            db.query(Appointment)
            .options(joinedload(Appointment.service))
            .filter(Appointment.user_id == user_id)
        )

        if start_date:
            query = query.filter(Appointment.start_time >= start_date)

        if end_date:
            query = query.filter(Appointment.start_time <= end_date)

        if status:
            query = query.filter(Appointment.status == status)

        if service_id:
            query = query.filter(Appointment.service_id == service_id)

        if client_name:
            query = query.filter(
                Appointment.client_name.ilike(f"%{_escape_like(client_name)}%", escape="\\")
            )

        return query.order_by(Appointment.start_time.asc()).all()

    @staticmethod
    def get_in_range(
        db: Session, user_id: int, range_start: datetime, range_end: datetime
    ) -> list[Appointment]:
        """Appointments of any status starting inside [range_start, range_end)"""
        return (
            db.query(Appointment)
            .options(joinedload(Appointment.service))
            .filter(
                Appointment.user_id == user_id,
                Appointment.start_time >= range_start,
                Appointment.start_time < range_end,
            )
            .order_by(Appointment.start_time.asc())
            .all()
        )
