"""Service catalog repository - Database operations for services"""

from typing import Optional

from sqlalchemy.orm import Session

from ...models import Service


class ServiceRepository:
    """Repository for service database operations"""

    @staticmethod
    def get_services(db: Session, user_id: int) -> list[Service]:
        return (
            db.query(Service)
            .filter(Service.user_id == user_id)
            .order_by(Service.created_at.desc())
            .all()
        )

    @staticmethod
    def get_service_by_id(db: Session, service_id: str, user_id: int) -> Optional[Service]:
        """Get a service only if it belongs to the given owner"""
        return (
            db.query(Service)
            .filter(Service.id == service_id, Service.user_id == user_id)
            .first()
        )

    @staticmethod
    def create_service(db: Session, user_id: int, **service_data) -> Service:
        service = Service(user_id=user_id, **service_data)
        db.add(service)
        db.commit()
        db.refresh(service)
        return service

    @staticmethod
    def update_service(db: Session, service: Service, **updates) -> Service:
        for key, value in updates.items():
            if value is not None and hasattr(service, key):
                setattr(service, key, value)

        db.commit()
        db.refresh(service)
        return service
