"""Appointment domain schemas - Pydantic models for validation"""

from datetime import date, datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, field_validator

from ...shared.validators import to_store_datetime, validate_email, validate_phone
from .status import AppointmentStatus


class _ContactFields(BaseModel):
    """Contact validators shared by create and update"""

    model_config = ConfigDict(extra="forbid")

    @field_validator("clientPhone", check_fields=False)
    @classmethod
    def check_phone(cls, v):
        if v:
            return validate_phone(v)
        return v

    @field_validator("clientEmail", check_fields=False)
    @classmethod
    def check_email(cls, v):
        if v:
            return validate_email(v)
        return v or None

    @field_validator("startTime", "endTime", check_fields=False)
    @classmethod
    def normalize_timestamp(cls, v):
        if v is not None:
            return to_store_datetime(v)
        return v


class AppointmentCreate(_ContactFields):
    """Booking intent. clientName/clientPhone presence is checked by the service."""

    serviceId: str
    clientName: Optional[str] = None
    clientPhone: Optional[str] = None
    clientEmail: Optional[str] = None
    startTime: datetime
    status: Optional[AppointmentStatus] = None
    notes: Optional[str] = None


class AppointmentUpdate(_ContactFields):
    """Partial update; only fields present in the request body are applied"""

    clientName: Optional[str] = None
    clientPhone: Optional[str] = None
    clientEmail: Optional[str] = None
    serviceId: Optional[str] = None
    startTime: Optional[datetime] = None
    endTime: Optional[datetime] = None
    status: Optional[AppointmentStatus] = None
    notes: Optional[str] = None


class ServiceSummary(BaseModel):
    name: str
    duration: int
    price: float


class AppointmentResponse(BaseModel):
    id: str
    ownerId: int
    serviceId: str
    clientName: str
    clientPhone: str
    clientEmail: Optional[str] = None
    startTime: datetime
    endTime: datetime
    status: AppointmentStatus
    notes: Optional[str] = None
    createdAt: Optional[datetime] = None
    updatedAt: Optional[datetime] = None
    service: Optional[ServiceSummary] = None


class CancelResponse(BaseModel):
    message: str
    appointment: AppointmentResponse


class SlotResponse(BaseModel):
    time: str
    end: str
    isAvailable: bool
    appointments: list[AppointmentResponse]


class DaySlotsResponse(BaseModel):
    date: date
    slots: list[SlotResponse]


class WeekSlotsResponse(BaseModel):
    weekStart: date
    days: list[DaySlotsResponse]


class ErrorResponse(BaseModel):
    error: str
    code: Optional[str] = None
    details: Any = None
