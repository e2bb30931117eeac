"""Appointment router - FastAPI endpoints for booking and calendar views"""

import logging
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from ... import config
from ...auth import get_current_user
from ...database import get_db
from ...models import Appointment, User
from .schemas import (
    AppointmentCreate,
    AppointmentResponse,
    AppointmentUpdate,
    CancelResponse,
    DaySlotsResponse,
    ErrorResponse,
    ServiceSummary,
    SlotResponse,
    WeekSlotsResponse,
)
from .service import AppointmentService
from .slots import TimeSlot
from .status import AppointmentStatus
from .time_calculator import optional_window

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/appointments",
    tags=["Appointments"],
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)


def get_appointment_service(db: Session = Depends(get_db)) -> AppointmentService:
    """Dependency injection for AppointmentService"""
    return AppointmentService(db)


def appointment_to_response(a: Appointment) -> AppointmentResponse:
    return AppointmentResponse(
        id=a.id,
        ownerId=a.user_id,
        serviceId=a.service_id,
        clientName=a.client_name,
        clientPhone=a.client_phone,
        clientEmail=a.client_email,
        startTime=a.start_time,
        endTime=a.end_time,
        status=a.status,
        notes=a.notes,
        createdAt=a.created_at,
        updatedAt=a.updated_at,
        service=(
            ServiceSummary(name=a.service.name, duration=a.service.duration, price=a.service.price)
            if a.service
            else None
        ),
    )


def slot_to_response(slot: TimeSlot) -> SlotResponse:
    return SlotResponse(
        time=slot.time,
        end=slot.end,
        isAvailable=slot.is_available,
        appointments=[appointment_to_response(a) for a in slot.appointments],
    )


# ============================================================================
# BOOKING OPERATIONS
# ============================================================================


@router.get("", response_model=list[AppointmentResponse])
def list_appointments(
    startDate: Optional[str] = Query(None, description="ISO date or datetime, inclusive"),
    endDate: Optional[str] = Query(None, description="ISO date or datetime, inclusive"),
    status_filter: Optional[AppointmentStatus] = Query(None, alias="status"),
    serviceId: Optional[str] = Query(None),
    clientName: Optional[str] = Query(None, description="Case-insensitive substring"),
    current_user: User = Depends(get_current_user),
    service: AppointmentService = Depends(get_appointment_service),
):
    """List the current user's appointments ordered by start time"""
    appointments = service.list_appointments(
        current_user.id,
        start_date=startDate,
        end_date=endDate,
        status=status_filter,
        service_id=serviceId,
        client_name=clientName,
    )
    return [appointment_to_response(a) for a in appointments]


@router.post(
    "",
    response_model=AppointmentResponse,
    status_code=status.HTTP_201_CREATED,
    responses={409: {"model": ErrorResponse}},
)
def create_appointment(
    data: AppointmentCreate,
    current_user: User = Depends(get_current_user),
    service: AppointmentService = Depends(get_appointment_service),
):
    """Book an appointment; 409 when the time range is already taken"""
    appointment = service.check_and_create(current_user.id, data)
    return appointment_to_response(appointment)


# ============================================================================
# CALENDAR VIEWS
# ============================================================================


@router.get("/calendar/day", response_model=DaySlotsResponse)
def get_day_calendar(
    day: date = Query(..., alias="date"),
    start: Optional[str] = Query(None, description="HH:MM, overrides business hours"),
    end: Optional[str] = Query(None, description="HH:MM, overrides business hours"),
    interval: int = Query(config.SLOT_INTERVAL_MINUTES, description="Minutes between slots"),
    current_user: User = Depends(get_current_user),
    service: AppointmentService = Depends(get_appointment_service),
):
    """Time slots of one day with the appointments starting on each label"""
    slots = service.day_slots(current_user.id, day, interval, optional_window(start, end))
    return DaySlotsResponse(date=day, slots=[slot_to_response(s) for s in slots])


@router.get("/calendar/week", response_model=WeekSlotsResponse)
def get_week_calendar(
    day: date = Query(..., alias="date"),
    start: Optional[str] = Query(None, description="HH:MM, overrides business hours"),
    end: Optional[str] = Query(None, description="HH:MM, overrides business hours"),
    interval: int = Query(config.WEEK_SLOT_INTERVAL_MINUTES, description="Minutes between slots"),
    current_user: User = Depends(get_current_user),
    service: AppointmentService = Depends(get_appointment_service),
):
    """Seven days of slots for the week containing the given date"""
    week_start, days = service.week_slots(current_user.id, day, interval, optional_window(start, end))
    return WeekSlotsResponse(
        weekStart=week_start,
        days=[
            DaySlotsResponse(date=d.date, slots=[slot_to_response(s) for s in d.slots])
            for d in days
        ],
    )


# ============================================================================
# SINGLE APPOINTMENT
# ============================================================================


@router.get("/{appointment_id}", response_model=AppointmentResponse)
def get_appointment(
    appointment_id: str,
    current_user: User = Depends(get_current_user),
    service: AppointmentService = Depends(get_appointment_service),
):
    return appointment_to_response(service.get_appointment(current_user.id, appointment_id))


@router.put(
    "/{appointment_id}",
    response_model=AppointmentResponse,
    responses={409: {"model": ErrorResponse}},
)
@router.patch(
    "/{appointment_id}",
    response_model=AppointmentResponse,
    responses={409: {"model": ErrorResponse}},
)
def update_appointment(
    appointment_id: str,
    data: AppointmentUpdate,
    current_user: User = Depends(get_current_user),
    service: AppointmentService = Depends(get_appointment_service),
):
    """Partially update an appointment; time changes are re-checked for overlaps"""
    appointment = service.update_appointment(current_user.id, appointment_id, data)
    return appointment_to_response(appointment)


@router.delete("/{appointment_id}", response_model=CancelResponse)
def cancel_appointment(
    appointment_id: str,
    current_user: User = Depends(get_current_user),
    service: AppointmentService = Depends(get_appointment_service),
):
    """Cancel an appointment. The record is kept and its slot is freed."""
    appointment = service.cancel_appointment(current_user.id, appointment_id)
    return CancelResponse(
        message="Appointment cancelled",
        appointment=appointment_to_response(appointment),
    )
