"""Catalog repository - Database operations for the salon catalog"""

from typing import Optional

from sqlalchemy.orm import Session

from ...models import Client, PaymentMethod, Professional, Service


class CatalogRepository:
    """Repository for services, professionals, clients and payment methods"""

    @staticmethod
    def list_services(db: Session) -> list[Service]:
        return db.query(Service).order_by(Service.name).all()

    @staticmethod
    def get_service(db: Session, service_id: str) -> Optional[Service]:
        return db.query(Service).filter(Service.id == service_id).first()

    @staticmethod
    def services_by_id(db: Session) -> dict[str, Service]:
        """All services keyed by id, for duration lookups"""
        return {s.id: s for s in db.query(Service).all()}

    @staticmethod
    def list_professionals(db: Session) -> list[Professional]:
        """Roster in creation order; "any professional" resolution depends on it"""
        return db.query(Professional).order_by(Professional.created_at, Professional.id).all()

    @staticmethod
    def get_professional(db: Session, professional_id: str) -> Optional[Professional]:
        return db.query(Professional).filter(Professional.id == professional_id).first()

    @staticmethod
    def get_client(db: Session, client_id: str) -> Optional[Client]:
        return db.query(Client).filter(Client.id == client_id).first()

    @staticmethod
    def get_payment_method(db: Session, payment_method_id: str) -> Optional[PaymentMethod]:
        return db.query(PaymentMethod).filter(PaymentMethod.id == payment_method_id).first()

    @staticmethod
    def add(db: Session, record):
        db.add(record)
        db.commit()
        db.refresh(record)
        return record

    @staticmethod
    def update(db: Session, record, **updates):
        """Update a record with provided fields"""
        for key, value in updates.items():
            if hasattr(record, key):
                setattr(record, key, value)
        db.commit()
        db.refresh(record)
        return record

    @staticmethod
    def list_payment_methods(db: Session) -> list[PaymentMethod]:
        return db.query(PaymentMethod).order_by(PaymentMethod.name).all()
