"""Catalog service - Business logic for the salon catalog"""

import logging

from sqlalchemy.orm import Session

from ...models import Client, PaymentMethod, Professional, Service
from ...shared.errors import NotFoundError
from .repository import CatalogRepository
from .schemas import (
    ClientCreate,
    ClientResponse,
    PaymentMethodCreate,
    ProfessionalCreate,
    ProfessionalResponse,
    ServiceCreate,
    ServiceResponse,
    WorkSchedule,
)

logger = logging.getLogger(__name__)


def service_to_response(service: Service) -> ServiceResponse:
    return ServiceResponse(
        id=service.id,
        name=service.name,
        description=service.description,
        durationMinutes=service.duration_minutes,
        bufferMinutes=service.buffer_minutes or 0,
        price=service.price,
    )


def professional_to_response(pro: Professional) -> ProfessionalResponse:
    return ProfessionalResponse(
        id=pro.id,
        name=pro.name,
        commissionPercentage=pro.commission_percentage,
        specialties=list(pro.specialties or []),
        schedule=WorkSchedule(
            workDays=list(pro.work_days or []),
            workStart=pro.work_start,
            workEnd=pro.work_end,
            breakStart=pro.break_start,
            breakEnd=pro.break_end,
        ),
    )


def client_to_response(client: Client) -> ClientResponse:
    return ClientResponse(
        id=client.id,
        name=client.name,
        email=client.email,
        phone=client.phone,
        birthDate=client.birth_date,
        loyaltyPoints=client.loyalty_points or 0,
    )


class CatalogService:
    """Service layer for catalog management"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = CatalogRepository()

    def list_services(self) -> list[Service]:
        return self.repo.list_services(self.db)

    def get_service(self, service_id: str) -> Service:
        service = self.repo.get_service(self.db, service_id)
        if not service:
            raise NotFoundError(f"Service {service_id} not found")
        return service

    def create_service(self, data: ServiceCreate) -> Service:
        service = Service(
            name=data.name,
            description=data.description,
            duration_minutes=data.durationMinutes,
            buffer_minutes=data.bufferMinutes,
            price=data.price,
        )
        if data.id:
            service.id = data.id
        service = self.repo.add(self.db, service)
        logger.info(f"✅ Created service {service.id} ({service.name})")
        return service

    def list_professionals(self) -> list[Professional]:
        return self.repo.list_professionals(self.db)

    def get_professional(self, professional_id: str) -> Professional:
        pro = self.repo.get_professional(self.db, professional_id)
        if not pro:
            raise NotFoundError(f"Professional {professional_id} not found")
        return pro

    def create_professional(self, data: ProfessionalCreate) -> Professional:
        pro = Professional(name=data.name, **self._professional_fields(data))
        if data.id:
            pro.id = data.id
        pro = self.repo.add(self.db, pro)
        logger.info(f"✅ Created professional {pro.id} ({pro.name})")
        return pro

    def update_professional(self, professional_id: str, data: ProfessionalCreate) -> Professional:
        pro = self.get_professional(professional_id)
        return self.repo.update(self.db, pro, name=data.name, **self._professional_fields(data))

    def create_client(self, data: ClientCreate) -> Client:
        client = Client(
            name=data.name,
            email=data.email,
            phone=data.phone,
            birth_date=data.birthDate,
            loyalty_points=0,
        )
        if data.id:
            client.id = data.id
        return self.repo.add(self.db, client)

    def get_client(self, client_id: str) -> Client:
        client = self.repo.get_client(self.db, client_id)
        if not client:
            raise NotFoundError(f"Client {client_id} not found")
        return client

    @staticmethod
    def _professional_fields(data: ProfessionalCreate) -> dict:
        return {
            "commission_percentage": data.commissionPercentage,
            "specialties": list(data.specialties),
            "work_days": data.schedule.workDays,
            "work_start": data.schedule.workStart,
            "work_end": data.schedule.workEnd,
            "break_start": data.schedule.breakStart,
            "break_end": data.schedule.breakEnd,
        }

    def list_payment_methods(self) -> list[PaymentMethod]:
        return self.repo.list_payment_methods(self.db)

    def create_payment_method(self, data: PaymentMethodCreate) -> PaymentMethod:
        method = PaymentMethod(name=data.name, active=data.active)
        if data.id:
            method.id = data.id
        return self.repo.add(self.db, method)
