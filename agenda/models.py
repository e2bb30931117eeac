import uuid

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    JSON,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from .database import Base


def generate_id():
    """Generate an opaque identifier for services and appointments"""
    return str(uuid.uuid4())


class User(Base):
    """A business account. Services, appointments and hours are scoped to it."""

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    firebase_uid = Column(String(255), unique=True, index=True, nullable=False)
    full_name = Column(String(255), nullable=True)
    email = Column(String(255), unique=True, index=True, nullable=False)
    created_at = Column(DateTime, server_default=func.now())

    services = relationship("Service", back_populates="user")
    appointments = relationship("Appointment", back_populates="user")
    business_hours = relationship("BusinessHours", back_populates="user")


class Service(Base):
    __tablename__ = "services"

    id = Column(String(36), primary_key=True, default=generate_id)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    price = Column(Float, nullable=False, default=0)
    duration = Column(Integer, nullable=False, default=60)  # minutes
    category = Column(String(100), nullable=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    user = relationship("User", back_populates="services")
    appointments = relationship("Appointment", back_populates="service")

    __table_args__ = (
        CheckConstraint("duration > 0", name="ck_services_duration_positive"),
        CheckConstraint("price >= 0", name="ck_services_price_non_negative"),
    )


class Appointment(Base):
    __tablename__ = "appointments"

    id = Column(String(36), primary_key=True, default=generate_id)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    service_id = Column(String(36), ForeignKey("services.id"), nullable=False)
    client_name = Column(String(255), nullable=False)
    client_phone = Column(String(50), nullable=False)
    client_email = Column(String(255), nullable=True)
    start_time = Column(DateTime, nullable=False)
    end_time = Column(DateTime, nullable=False)
    # SCHEDULED, CONFIRMED, COMPLETED, CANCELLED, NO_SHOW
    status = Column(String(20), nullable=False, default="SCHEDULED")
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    user = relationship("User", back_populates="appointments")
    service = relationship("Service", back_populates="appointments")

    __table_args__ = (
        CheckConstraint("end_time > start_time", name="ck_appointments_time_range"),
        Index("ix_appointments_user_start", "user_id", "start_time"),
    )


class BusinessHours(Base):
    """Weekly opening hours, one row per owner and weekday (0 = Monday)"""

    __tablename__ = "business_hours"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    weekday = Column(Integer, nullable=False)
    is_open = Column(Boolean, default=True, nullable=False)
    periods = Column(JSON, default=list, nullable=False)  # e.g., [{"start": "08:00", "end": "12:00"}]

    user = relationship("User", back_populates="business_hours")

    __table_args__ = (UniqueConstraint("user_id", "weekday", name="uq_business_hours_day"),)
