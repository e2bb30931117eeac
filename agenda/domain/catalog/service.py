"""Catalog service - lookups used by booking plus owner-facing CRUD"""

import logging

from sqlalchemy.orm import Session

from ...database import begin_write
from ...exceptions import NotFoundError, ServiceNotFound
from ...models import Service
from .repository import ServiceRepository
from .schemas import ServiceCreate, ServiceUpdate

logger = logging.getLogger(__name__)


class CatalogService:
    def __init__(self, db: Session):
        self.db = db
        self.repo = ServiceRepository()

    def get_services(self, owner_id: int) -> list[Service]:
        return self.repo.get_services(self.db, owner_id)

    def get_service(self, owner_id: int, service_id: str) -> Service:
        service = self.repo.get_service_by_id(self.db, service_id, owner_id)
        if not service:
            raise NotFoundError("Service not found")
        return service

    def resolve_for_booking(self, owner_id: int, service_id: str) -> Service:
        """Like get_service, but an unknown service is a validation failure"""
        service = self.repo.get_service_by_id(self.db, service_id, owner_id)
        if not service:
            raise ServiceNotFound(service_id)
        return service

    def create_service(self, owner_id: int, data: ServiceCreate) -> Service:
        logger.info(f"Creating service '{data.name}' for user_id: {owner_id}")
        try:
            begin_write(self.db)
            return self.repo.create_service(self.db, owner_id, **data.model_dump())
        except Exception:
            self.db.rollback()
            raise

    def update_service(self, owner_id: int, service_id: str, data: ServiceUpdate) -> Service:
        try:
            begin_write(self.db)
            service = self.get_service(owner_id, service_id)
            return self.repo.update_service(self.db, service, **data.model_dump(exclude_unset=True))
        except Exception:
            self.db.rollback()
            raise
