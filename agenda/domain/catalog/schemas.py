"""Service catalog schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _strip_name(v):
    if v is None:
        return v
    v = v.strip()
    if not v:
        raise ValueError("Service name is required")
    return v


class ServiceCreate(BaseModel):
    """Schema for registering a bookable service"""

    model_config = ConfigDict(extra="forbid")

    name: str = Field(min_length=1, max_length=255)
    description: Optional[str] = None
    price: float = Field(ge=0)
    duration: int = Field(default=60, ge=1, description="Duration in minutes")
    category: Optional[str] = None

    @field_validator("name")
    @classmethod
    def strip_name(cls, v):
        return _strip_name(v)


class ServiceUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = None
    price: Optional[float] = Field(default=None, ge=0)
    duration: Optional[int] = Field(default=None, ge=1)
    category: Optional[str] = None

    @field_validator("name")
    @classmethod
    def strip_name(cls, v):
        return _strip_name(v)


class ServiceResponse(BaseModel):
    id: str
    name: str
    description: Optional[str] = None
    price: float
    duration: int
    category: Optional[str] = None
    createdAt: Optional[datetime] = None
