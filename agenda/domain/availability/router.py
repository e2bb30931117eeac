"""Business hours router"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...auth import get_current_user
from ...database import get_db
from ...models import User
from .schemas import BusinessHoursResponse, BusinessHoursUpdate
from .service import AvailabilityService

router = APIRouter(prefix="/availability", tags=["Availability"])


def get_availability_service(db: Session = Depends(get_db)) -> AvailabilityService:
    return AvailabilityService(db)


@router.get("", response_model=BusinessHoursResponse)
def get_business_hours(
    current_user: User = Depends(get_current_user),
    service: AvailabilityService = Depends(get_availability_service),
):
    """Weekly opening hours; days never configured fall back to the defaults"""
    return BusinessHoursResponse(days=service.get_week(current_user.id))


@router.put("", response_model=BusinessHoursResponse)
def replace_business_hours(
    data: BusinessHoursUpdate,
    current_user: User = Depends(get_current_user),
    service: AvailabilityService = Depends(get_availability_service),
):
    return BusinessHoursResponse(days=service.replace_week(current_user.id, data.days))
