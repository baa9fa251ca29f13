"""
Pricing engine.

At most one discount applies per priced service instance. Happy hour windows
are checked first; the birthday discount only applies when no happy hour did.
"""

import logging
from datetime import date
from typing import Optional, Union

from sqlalchemy.orm import Session

from ...models import Client, Promotion, PromotionType, Service
from ...shared.errors import NotFoundError
from ..catalog.repository import CatalogRepository
from ..scheduling.time_calculator import day_of_week, parse_date, time_to_minutes
from .repository import PromotionRepository
from .schemas import BirthdayRule, HappyHourRule, PriceQuote, PromotionCreate, PromotionResponse

logger = logging.getLogger(__name__)


def to_rule(promotion: Promotion) -> Union[HappyHourRule, BirthdayRule, None]:
    """Map a stored promotion onto its typed rule"""
    if promotion.type == PromotionType.HAPPY_HOUR.value:
        return HappyHourRule(
            name=promotion.name,
            discountPercentage=promotion.discount_percentage,
            daysOfWeek=list(promotion.days_of_week or []),
            startHour=promotion.start_hour or "00:00",
            endHour=promotion.end_hour or "23:59",
        )
    if promotion.type == PromotionType.BIRTHDAY.value:
        return BirthdayRule(name=promotion.name, discountPercentage=promotion.discount_percentage)
    logger.warning(f"Ignoring promotion {promotion.id} with unsupported type {promotion.type}")
    return None


def happy_hour_applies(rule: HappyHourRule, day: date, clock: str) -> bool:
    """Weekday matches and the start time is within [startHour, endHour] inclusive"""
    if day_of_week(day) not in rule.daysOfWeek:
        return False
    minute = time_to_minutes(clock)
    return time_to_minutes(rule.startHour) <= minute <= time_to_minutes(rule.endHour)


def birthday_applies(client: Optional[Client], day: date) -> bool:
    return bool(client and client.birth_date and client.birth_date.month == day.month)


def apply_discount(price: float, percentage: float) -> float:
    return round(price * (1 - percentage / 100), 2)


def promotion_to_response(promotion: Promotion) -> PromotionResponse:
    return PromotionResponse(
        id=promotion.id,
        name=promotion.name,
        type=promotion.type,
        discountPercentage=promotion.discount_percentage,
        active=promotion.active,
        daysOfWeek=promotion.days_of_week,
        startHour=promotion.start_hour,
        endHour=promotion.end_hour,
    )


class PricingService:
    """Service layer for price calculation"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = PromotionRepository()
        self.catalog = CatalogRepository()

    def calculate_price(
        self, service: Service, day, clock: str, client_id: Optional[str] = None
    ) -> PriceQuote:
        day = parse_date(day)
        time_to_minutes(clock)  # Reject malformed times up front

        rules = [rule for rule in map(to_rule, self.repo.list_active(self.db)) if rule]
        base_price = service.price
        final_price = base_price
        reason = None

        for rule in rules:
            if isinstance(rule, HappyHourRule) and happy_hour_applies(rule, day, clock):
                final_price = apply_discount(base_price, rule.discountPercentage)
                reason = rule.label
                break

        if reason is None and client_id:
            client = self.catalog.get_client(self.db, client_id)
            birthday = next((rule for rule in rules if isinstance(rule, BirthdayRule)), None)
            if birthday and birthday_applies(client, day):
                final_price = apply_discount(base_price, birthday.discountPercentage)
                reason = birthday.label

        return PriceQuote(
            serviceId=service.id,
            basePrice=base_price,
            finalPrice=final_price,
            discountReason=reason,
        )

    def quote(self, service_id: str, day, clock: str, client_id: Optional[str] = None) -> PriceQuote:
        service = self.catalog.get_service(self.db, service_id)
        if not service:
            raise NotFoundError(f"Service {service_id} not found")
        if client_id and not self.catalog.get_client(self.db, client_id):
            raise NotFoundError(f"Client {client_id} not found")
        return self.calculate_price(service, day, clock, client_id)

    def list_promotions(self) -> list[Promotion]:
        return self.repo.list_promotions(self.db)

    def create_promotion(self, data: PromotionCreate) -> Promotion:
        promotion = Promotion(
            name=data.name,
            type=data.type,
            discount_percentage=data.discountPercentage,
            active=data.active,
            days_of_week=data.daysOfWeek,
            start_hour=data.startHour,
            end_hour=data.endHour,
        )
        if data.id:
            promotion.id = data.id
        promotion = self.repo.create(self.db, promotion)
        logger.info(f"✅ Created {promotion.type} promotion {promotion.id} ({promotion.name})")
        return promotion
