from datetime import datetime

import pytest

from salon.domain.catalog.repository import CatalogRepository
from salon.domain.pricing.schemas import PromotionCreate
from salon.domain.pricing.service import PricingService
from salon.models import Promotion
from salon.shared.errors import NotFoundError

from conftest import MONDAY, TUESDAY


@pytest.fixture
def promotions(db):
    db.add_all(
        [
            Promotion(
                id="promo-1",
                name="Morning",
                type="HAPPY_HOUR",
                discount_percentage=20,
                days_of_week=[1],
                start_hour="09:00",
                end_hour="11:00",
                created_at=datetime(2029, 1, 1),
            ),
            Promotion(
                id="promo-2",
                name="Birthday",
                type="BIRTHDAY",
                discount_percentage=10,
                created_at=datetime(2029, 1, 2),
            ),
            Promotion(
                id="promo-3",
                name="Monday all day",
                type="HAPPY_HOUR",
                discount_percentage=50,
                days_of_week=[1],
                created_at=datetime(2029, 1, 3),
            ),
            Promotion(
                id="promo-4",
                name="Retired",
                type="HAPPY_HOUR",
                discount_percentage=90,
                days_of_week=[2],
                active=False,
                created_at=datetime(2029, 1, 4),
            ),
        ]
    )
    db.commit()


def cut(db):
    return CatalogRepository.get_service(db, "cut")


def test_no_promotions_keeps_list_price(db):
    quote = PricingService(db).calculate_price(cut(db), MONDAY, "10:00", "client-1")

    assert quote.finalPrice == 50
    assert quote.basePrice == 50
    assert quote.discountReason is None


def test_happy_hour_beats_birthday(db, promotions):
    quote = PricingService(db).calculate_price(cut(db), MONDAY, "10:00", "client-1")

    assert quote.finalPrice == 40
    assert quote.discountReason == "Morning (-20%)"


def test_happy_hour_window_is_inclusive(db, promotions):
    service = PricingService(db)

    assert service.calculate_price(cut(db), MONDAY, "09:00").discountReason == "Morning (-20%)"
    assert service.calculate_price(cut(db), MONDAY, "11:00").discountReason == "Morning (-20%)"


def test_first_matching_happy_hour_wins(db, promotions):
    quote = PricingService(db).calculate_price(cut(db), MONDAY, "15:00")

    assert quote.finalPrice == 25
    assert quote.discountReason == "Monday all day (-50%)"


def test_birthday_month_discount(db, promotions):
    # Inactive Tuesday happy hour is ignored
    quote = PricingService(db).calculate_price(cut(db), TUESDAY, "15:00", "client-1")

    assert quote.finalPrice == 45
    assert quote.discountReason == "Birthday (-10%)"


def test_birthday_needs_a_matching_client(db, promotions):
    service = PricingService(db)

    assert service.calculate_price(cut(db), TUESDAY, "15:00", "client-2").finalPrice == 50
    assert service.calculate_price(cut(db), TUESDAY, "15:00").finalPrice == 50


def test_prices_are_rounded_to_cents(db):
    db.add(
        Promotion(name="Odd", type="HAPPY_HOUR", discount_percentage=33, days_of_week=[1])
    )
    db.commit()

    quote = PricingService(db).calculate_price(cut(db), MONDAY, "10:00")

    assert quote.finalPrice == 33.5


def test_quote_checks_references(db):
    service = PricingService(db)

    with pytest.raises(NotFoundError):
        service.quote("unknown", MONDAY, "10:00")
    with pytest.raises(NotFoundError):
        service.quote("cut", MONDAY, "10:00", client_id="nobody")


def test_create_promotion(db):
    promotion = PricingService(db).create_promotion(
        PromotionCreate(
            name="Lunch",
            type="HAPPY_HOUR",
            discountPercentage=15,
            daysOfWeek=[3, 1, 3],
            startHour="12:00",
            endHour="14:00",
        )
    )

    assert promotion.days_of_week == [1, 3]
    quote = PricingService(db).calculate_price(cut(db), MONDAY, "13:00")
    assert quote.discountReason == "Lunch (-15%)"


def test_happy_hour_needs_days():
    with pytest.raises(ValueError):
        PromotionCreate(name="Never", type="HAPPY_HOUR", discountPercentage=10)
