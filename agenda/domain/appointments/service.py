"""Appointment service - conflict-checked booking, updates and calendar views"""

import logging
from datetime import date, datetime, time, timedelta
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ... import config
from ...database import begin_write
from ...exceptions import ConflictError, MissingField, NotFoundError, ValidationError
from ...models import Appointment
from ...shared.validators import to_store_datetime
from ..availability.service import AvailabilityService
from ..catalog.service import CatalogService
from .repository import AppointmentRepository
from .schemas import AppointmentCreate, AppointmentUpdate
from .slots import DaySlots, TimeSlot, generate_day, generate_week
from .status import (
    INITIAL_STATUS,
    AppointmentStatus,
    ensure_initial,
    ensure_transition,
    is_blocking,
)
from .time_calculator import (
    BusinessWindow,
    day_bounds,
    end_for,
    ensure_range,
    validate_interval,
    week_start,
)

logger = logging.getLogger(__name__)

# Name of the optional PostgreSQL exclusion constraint, see migrations/
OVERLAP_CONSTRAINT = "ex_appointments_no_overlap"

REQUIRED_CONTACT_FIELDS = ("clientName", "clientPhone")


def _require(field: str, value: Optional[str]) -> str:
    if value is None or not value.strip():
        raise MissingField(f"{field} is required", details={"field": field})
    return value.strip()


def _conflict_details(conflict: Appointment) -> dict:
    return {
        "conflictingAppointmentId": conflict.id,
        "startTime": conflict.start_time.isoformat(),
        "endTime": conflict.end_time.isoformat(),
    }


def _range_details(start_time: datetime, end_time: datetime) -> dict:
    return {"startTime": start_time.isoformat(), "endTime": end_time.isoformat()}


def _violates_overlap_constraint(error: IntegrityError) -> bool:
    if OVERLAP_CONSTRAINT in str(error.orig):
        logger.warning("Overlap rejected by database exclusion constraint")
        return True
    return False


def parse_filter_datetime(value: Optional[str], field: str, end_of_day: bool = False) -> Optional[datetime]:
    """Parse an ISO date or datetime query value; a bare endDate covers the whole day"""
    if not value:
        return None
    try:
        if len(value) == 10:
            day = date.fromisoformat(value)
            return datetime.combine(day, time.max if end_of_day else time.min)
        return to_store_datetime(datetime.fromisoformat(value.replace("Z", "+00:00")))
    except ValueError as e:
        raise ValidationError(f"Invalid {field}", details={field: value}) from e


class AppointmentService:
    """Service layer for the booking conflict engine"""

    def __init__(self, db: Session, strict_transitions: Optional[bool] = None):
        self.db = db
        self.repo = AppointmentRepository()
        self.catalog = CatalogService(db)
        self.availability = AvailabilityService(db)
        if strict_transitions is None:
            strict_transitions = config.STRICT_STATUS_TRANSITIONS
        self.strict = strict_transitions

    def get_appointment(self, owner_id: int, appointment_id: str) -> Appointment:
        """Appointments of other owners are reported as not found"""
        appointment = self.repo.get_appointment_by_id(self.db, appointment_id, owner_id)
        if not appointment:
            raise NotFoundError("Appointment not found")
        return appointment

    def list_appointments(
        self,
        owner_id: int,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
        status: Optional[AppointmentStatus] = None,
        service_id: Optional[str] = None,
        client_name: Optional[str] = None,
    ) -> list[Appointment]:
        return self.repo.search_appointments(
            self.db,
            owner_id,
            start_date=parse_filter_datetime(start_date, "startDate"),
            end_date=parse_filter_datetime(end_date, "endDate", end_of_day=True),
            status=AppointmentStatus(status).value if status else None,
            service_id=service_id,
            client_name=client_name.strip() if client_name else None,
        )

    def check_and_create(self, owner_id: int, data: AppointmentCreate) -> Appointment:
        """
        Book an appointment if its time range is free.

        The service lookup, the per-owner lock, the overlap query and the
        insert share one transaction, so two concurrent bookings of
        overlapping ranges cannot both commit.

        Raises:
            ValidationError: missing contact field, unknown service, bad status
            ConflictError: the range overlaps an active appointment
        """
        client_name = _require("clientName", data.clientName)
        client_phone = _require("clientPhone", data.clientPhone)
        status = AppointmentStatus(data.status or INITIAL_STATUS)
        ensure_initial(status, self.strict)

        try:
            begin_write(self.db)
            service = self.catalog.resolve_for_booking(owner_id, data.serviceId)
            start_time = data.startTime
            end_time = end_for(start_time, service.duration)

            if is_blocking(status):
                self.repo.lock_owner(self.db, owner_id)
                conflict = self.repo.find_conflict(self.db, owner_id, start_time, end_time)
                if conflict:
                    logger.warning(
                        f"Slot taken for user_id {owner_id}: {start_time.isoformat()} overlaps {conflict.id}"
                    )
                    raise ConflictError(details=_conflict_details(conflict))

            appointment = self.repo.create_appointment(
                self.db,
                owner_id,
                service_id=service.id,
                client_name=client_name,
                client_phone=client_phone,
                client_email=data.clientEmail,
                start_time=start_time,
                end_time=end_time,
                status=status.value,
                notes=data.notes,
            )
        except IntegrityError as e:
            self.db.rollback()
            if _violates_overlap_constraint(e):
                raise ConflictError(details=_range_details(start_time, end_time)) from e
            raise
        except Exception:
            self.db.rollback()
            raise

        logger.info(
            f"Booked appointment {appointment.id} for user_id {owner_id} at {start_time.isoformat()}"
        )
        return appointment

    def update_appointment(self, owner_id: int, appointment_id: str, data: AppointmentUpdate) -> Appointment:
        """
        Apply a partial update.

        The overlap check runs only when the effective time range changes
        and the resulting status still blocks the calendar.
        """
        changes = data.model_dump(exclude_unset=True)

        try:
            begin_write(self.db)
            appointment = self.get_appointment(owner_id, appointment_id)
            updates = {}

            for field in REQUIRED_CONTACT_FIELDS:
                if field in changes:
                    changes[field] = _require(field, changes[field])
            if "clientName" in changes:
                updates["client_name"] = changes["clientName"]
            if "clientPhone" in changes:
                updates["client_phone"] = changes["clientPhone"]
            if "clientEmail" in changes:
                updates["client_email"] = changes["clientEmail"]
            if "notes" in changes:
                updates["notes"] = changes["notes"]

            new_status = AppointmentStatus(appointment.status)
            if "status" in changes:
                if changes["status"] is None:
                    raise MissingField("status cannot be null", details={"field": "status"})
                new_status = AppointmentStatus(changes["status"])
                ensure_transition(appointment.status, new_status, self.strict)
                updates["status"] = new_status.value

            service = appointment.service
            service_changed = False
            if changes.get("serviceId") and changes["serviceId"] != appointment.service_id:
                service = self.catalog.resolve_for_booking(owner_id, changes["serviceId"])
                service_changed = True
                updates["service_id"] = service.id
            elif "serviceId" in changes and not changes["serviceId"]:
                raise MissingField("serviceId cannot be empty", details={"field": "serviceId"})

            new_start = changes.get("startTime") or appointment.start_time
            if changes.get("endTime"):
                new_end = changes["endTime"]
            elif service_changed:
                new_end = end_for(new_start, service.duration)
            else:
                # Keep the current length when only the start moves
                new_end = new_start + (appointment.end_time - appointment.start_time)
            ensure_range(new_start, new_end)

            times_changed = new_start != appointment.start_time or new_end != appointment.end_time
            if times_changed:
                updates["start_time"] = new_start
                updates["end_time"] = new_end

                if is_blocking(new_status):
                    self.repo.lock_owner(self.db, owner_id)
                    conflict = self.repo.find_conflict(
                        self.db, owner_id, new_start, new_end, exclude_id=appointment.id
                    )
                    if conflict:
                        logger.warning(
                            f"Reschedule of {appointment.id} conflicts with {conflict.id}"
                        )
                        raise ConflictError(details=_conflict_details(conflict))

            appointment = self.repo.update_appointment(self.db, appointment, **updates)
        except IntegrityError as e:
            self.db.rollback()
            if _violates_overlap_constraint(e):
                raise ConflictError(details=_range_details(new_start, new_end)) from e
            raise
        except Exception:
            self.db.rollback()
            raise

        logger.info(f"Updated appointment {appointment.id}: {sorted(updates)}")
        return appointment

    def cancel_appointment(self, owner_id: int, appointment_id: str) -> Appointment:
        """Soft-cancel; the record stays for history and stops blocking its slot"""
        try:
            begin_write(self.db)
            appointment = self.get_appointment(owner_id, appointment_id)
            if appointment.status == AppointmentStatus.CANCELLED.value:
                return appointment

            ensure_transition(appointment.status, AppointmentStatus.CANCELLED, self.strict)
            appointment = self.repo.update_appointment(
                self.db, appointment, status=AppointmentStatus.CANCELLED.value
            )
        except Exception:
            self.db.rollback()
            raise

        logger.info(f"Cancelled appointment {appointment.id} for user_id {owner_id}")
        return appointment

    def day_slots(
        self,
        owner_id: int,
        day: date,
        interval_minutes: int,
        window: Optional[BusinessWindow] = None,
    ) -> list[TimeSlot]:
        """
        Slots of one day; uses the owner's opening periods unless a window
        is given. Every appointment starting exactly on a label is attached,
        whatever its status.
        """
        validate_interval(interval_minutes)
        windows = [window] if window else self.availability.windows_for(owner_id, [day])[day]
        if not windows:
            return []

        range_start, range_end = day_bounds(day)
        appointments = self.repo.get_in_range(self.db, owner_id, range_start, range_end)
        return generate_day(day, windows, interval_minutes, appointments)

    def week_slots(
        self,
        owner_id: int,
        day: date,
        interval_minutes: int,
        window: Optional[BusinessWindow] = None,
    ) -> tuple[date, list[DaySlots]]:
        first_day = week_start(day, config.WEEK_STARTS_ON)
        days = [first_day + timedelta(days=offset) for offset in range(7)]

        if window is None:
            windows = self.availability.windows_for(owner_id, days)
        else:
            windows = {d: [window] for d in days}

        range_start, range_end = day_bounds(first_day, days=7)
        appointments = self.repo.get_in_range(self.db, owner_id, range_start, range_end)
        return first_day, generate_week(first_day, windows, interval_minutes, appointments)
