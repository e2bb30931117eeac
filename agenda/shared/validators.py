"""Shared validation utilities"""

import re
from datetime import datetime, time, timezone
from typing import Optional


def validate_phone(phone: Optional[str]) -> Optional[str]:
    """
    Normalize a client phone number for WhatsApp delivery.

    Keeps a leading "+" and the digits; everything else (spaces, dashes,
    parentheses) is dropped.

    Raises:
        ValueError: If fewer than 8 or more than 15 digits remain
    """
    if phone is None:
        return phone

    phone = phone.strip()
    if not phone:
        return phone

    digits = re.sub(r"\D", "", phone)
    if len(digits) < 8 or len(digits) > 15:
        raise ValueError("Phone number must have between 8 and 15 digits")

    return f"+{digits}" if phone.startswith("+") else digits


def validate_email(email: Optional[str]) -> Optional[str]:
    """
    Validate email format.

    Returns:
        Lowercase email address

    Raises:
        ValueError: If email format is invalid
    """
    if not email:
        return email

    email = email.strip().lower()

    email_pattern = r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$"

    if not re.match(email_pattern, email):
        raise ValueError("Invalid email format")

    return email


def parse_hhmm(value: str) -> time:
    """Parse a 24h "HH:MM" string. Raises ValueError on anything else."""
    if not isinstance(value, str) or not re.fullmatch(r"\d{2}:\d{2}", value.strip()):
        raise ValueError(f"Invalid time {value!r}, expected HH:MM")
    return datetime.strptime(value.strip(), "%H:%M").time()


def to_store_datetime(value: datetime) -> datetime:
    """Convert an aware datetime to naive UTC; naive values pass through."""
    if value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value
