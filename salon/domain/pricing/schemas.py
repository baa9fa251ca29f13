"""Pricing schemas - promotion rules as a closed tagged variant"""

from typing import Literal, Optional

from pydantic import BaseModel, field_validator, model_validator

from ...shared.validators import validate_clock_time, validate_percentage, validate_weekdays


class HappyHourRule(BaseModel):
    """Recurring weekly time window discount"""

    kind: Literal["HAPPY_HOUR"] = "HAPPY_HOUR"
    name: str
    discountPercentage: float
    daysOfWeek: list[int]
    startHour: str = "00:00"
    endHour: str = "23:59"

    @property
    def label(self) -> str:
        return f"{self.name} (-{self.discountPercentage:g}%)"


class BirthdayRule(BaseModel):
    """Discount during the client's birth month"""

    kind: Literal["BIRTHDAY"] = "BIRTHDAY"
    name: str
    discountPercentage: float

    @property
    def label(self) -> str:
        return f"{self.name} (-{self.discountPercentage:g}%)"


class PromotionCreate(BaseModel):
    id: Optional[str] = None
    name: str
    type: Literal["HAPPY_HOUR", "BIRTHDAY"]
    discountPercentage: float
    active: bool = True
    daysOfWeek: Optional[list[int]] = None
    startHour: Optional[str] = None
    endHour: Optional[str] = None

    @field_validator("discountPercentage")
    @classmethod
    def check_discount(cls, v):
        return validate_percentage(v)

    @field_validator("startHour", "endHour")
    @classmethod
    def check_hours(cls, v):
        return validate_clock_time(v)

    @field_validator("daysOfWeek")
    @classmethod
    def check_days(cls, v):
        if v is None:
            return v
        return validate_weekdays(v)

    @model_validator(mode="after")
    def check_happy_hour_rule(self):
        if self.type == "HAPPY_HOUR" and not self.daysOfWeek:
            raise ValueError("Happy hour promotions need at least one day of week")
        return self


class PromotionResponse(BaseModel):
    id: str
    name: str
    type: str
    discountPercentage: float
    active: bool
    daysOfWeek: Optional[list[int]] = None
    startHour: Optional[str] = None
    endHour: Optional[str] = None


class PriceQuote(BaseModel):
    """Effective price of one service instance"""

    serviceId: str
    basePrice: float
    finalPrice: float
    discountReason: Optional[str] = None
