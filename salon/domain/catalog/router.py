"""Catalog router - FastAPI endpoints for services, professionals and clients"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...database import get_db
from .schemas import (
    ClientCreate,
    ClientResponse,
    PaymentMethodCreate,
    PaymentMethodResponse,
    ProfessionalCreate,
    ProfessionalResponse,
    ServiceCreate,
    ServiceResponse,
)
from .service import (
    CatalogService,
    client_to_response,
    professional_to_response,
    service_to_response,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/catalog", tags=["Catalog"])


def get_catalog_service(db: Session = Depends(get_db)) -> CatalogService:
    """Dependency injection for CatalogService"""
    return CatalogService(db)


@router.get("/services", response_model=list[ServiceResponse])
async def list_services(service: CatalogService = Depends(get_catalog_service)):
    return [service_to_response(s) for s in service.list_services()]


@router.post("/services", response_model=ServiceResponse, status_code=201)
async def create_service(data: ServiceCreate, service: CatalogService = Depends(get_catalog_service)):
    return service_to_response(service.create_service(data))


@router.get("/professionals", response_model=list[ProfessionalResponse])
async def list_professionals(service: CatalogService = Depends(get_catalog_service)):
    return [professional_to_response(p) for p in service.list_professionals()]


@router.post("/professionals", response_model=ProfessionalResponse, status_code=201)
async def create_professional(
    data: ProfessionalCreate, service: CatalogService = Depends(get_catalog_service)
):
    return professional_to_response(service.create_professional(data))


@router.put("/professionals/{professional_id}", response_model=ProfessionalResponse)
async def update_professional(
    professional_id: str,
    data: ProfessionalCreate,
    service: CatalogService = Depends(get_catalog_service),
):
    """Replace a professional's schedule, specialties and commission"""
    return professional_to_response(service.update_professional(professional_id, data))


@router.post("/clients", response_model=ClientResponse, status_code=201)
async def create_client(data: ClientCreate, service: CatalogService = Depends(get_catalog_service)):
    return client_to_response(service.create_client(data))


@router.get("/clients/{client_id}", response_model=ClientResponse)
async def get_client(client_id: str, service: CatalogService = Depends(get_catalog_service)):
    return client_to_response(service.get_client(client_id))


@router.get("/payment-methods", response_model=list[PaymentMethodResponse])
async def list_payment_methods(service: CatalogService = Depends(get_catalog_service)):
    return service.list_payment_methods()


@router.post("/payment-methods", response_model=PaymentMethodResponse, status_code=201)
async def create_payment_method(
    data: PaymentMethodCreate, service: CatalogService = Depends(get_catalog_service)
):
    return service.create_payment_method(data)
