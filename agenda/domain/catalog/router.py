"""Service catalog router"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from ...auth import get_current_user
from ...database import get_db
from ...models import Service, User
from .schemas import ServiceCreate, ServiceResponse, ServiceUpdate
from .service import CatalogService

router = APIRouter(prefix="/services", tags=["Services"])


def get_catalog_service(db: Session = Depends(get_db)) -> CatalogService:
    return CatalogService(db)


def service_to_response(s: Service) -> ServiceResponse:
    return ServiceResponse(
        id=s.id,
        name=s.name,
        description=s.description,
        price=s.price,
        duration=s.duration,
        category=s.category,
        createdAt=s.created_at,
    )


@router.get("", response_model=list[ServiceResponse])
def get_services(
    current_user: User = Depends(get_current_user),
    catalog: CatalogService = Depends(get_catalog_service),
):
    """Get all services of the current user, newest first"""
    return [service_to_response(s) for s in catalog.get_services(current_user.id)]


@router.post("", response_model=ServiceResponse, status_code=status.HTTP_201_CREATED)
def create_service(
    data: ServiceCreate,
    current_user: User = Depends(get_current_user),
    catalog: CatalogService = Depends(get_catalog_service),
):
    return service_to_response(catalog.create_service(current_user.id, data))


@router.get("/{service_id}", response_model=ServiceResponse)
def get_service(
    service_id: str,
    current_user: User = Depends(get_current_user),
    catalog: CatalogService = Depends(get_catalog_service),
):
    return service_to_response(catalog.get_service(current_user.id, service_id))


@router.patch("/{service_id}", response_model=ServiceResponse)
def update_service(
    service_id: str,
    data: ServiceUpdate,
    current_user: User = Depends(get_current_user),
    catalog: CatalogService = Depends(get_catalog_service),
):
    """Update a service. Existing appointments keep their stored end time."""
    return service_to_response(catalog.update_service(current_user.id, service_id, data))
