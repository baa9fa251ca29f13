"""Finance router - read-only views over the booking side effects"""

import logging
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...database import get_db
from .schemas import (
    ClientPackageResponse,
    CommissionResponse,
    PointsHistoryResponse,
    TransactionResponse,
)
from .service import FinanceService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/finance", tags=["Finance"])


def get_finance_service(db: Session = Depends(get_db)) -> FinanceService:
    """Dependency injection for FinanceService"""
    return FinanceService(db)


@router.get("/transactions", response_model=list[TransactionResponse])
async def list_transactions(
    start: Optional[date] = Query(None),
    end: Optional[date] = Query(None),
    service: FinanceService = Depends(get_finance_service),
):
    return service.list_transactions(start, end)


@router.get("/appointments/{appointment_id}/transactions", response_model=list[TransactionResponse])
async def list_appointment_transactions(
    appointment_id: str, service: FinanceService = Depends(get_finance_service)
):
    """Ledger entries of one appointment; empty when its side effects never landed"""
    return service.appointment_transactions(appointment_id)


@router.get("/commissions", response_model=list[CommissionResponse])
async def list_commissions(
    professional_id: Optional[str] = Query(None),
    service: FinanceService = Depends(get_finance_service),
):
    return service.list_commissions(professional_id)


@router.get("/clients/{client_id}/packages", response_model=list[ClientPackageResponse])
async def list_client_packages(
    client_id: str, service: FinanceService = Depends(get_finance_service)
):
    """Packages the client can still redeem"""
    return service.client_packages(client_id, date.today())


@router.get("/clients/{client_id}/points", response_model=list[PointsHistoryResponse])
async def list_points_history(
    client_id: str, service: FinanceService = Depends(get_finance_service)
):
    return service.points_history(client_id)
