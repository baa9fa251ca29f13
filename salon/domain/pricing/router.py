"""Pricing router - price quotes and promotions"""

import logging
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...database import get_db
from .schemas import PriceQuote, PromotionCreate, PromotionResponse
from .service import PricingService, promotion_to_response

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/pricing", tags=["Pricing"])


def get_pricing_service(db: Session = Depends(get_db)) -> PricingService:
    """Dependency injection for PricingService"""
    return PricingService(db)


@router.get("/quote", response_model=PriceQuote)
async def calculate_price(
    service_id: str = Query(...),
    date: date = Query(...),
    time: str = Query(..., description="Start time HH:MM"),
    client_id: Optional[str] = Query(None),
    service: PricingService = Depends(get_pricing_service),
):
    """Effective price of a service at a date/time, with the applied discount if any"""
    return service.quote(service_id, date, time, client_id)


@router.get("/promotions", response_model=list[PromotionResponse])
async def list_promotions(service: PricingService = Depends(get_pricing_service)):
    return [promotion_to_response(p) for p in service.list_promotions()]


@router.post("/promotions", response_model=PromotionResponse, status_code=201)
async def create_promotion(
    data: PromotionCreate, service: PricingService = Depends(get_pricing_service)
):
    return promotion_to_response(service.create_promotion(data))
