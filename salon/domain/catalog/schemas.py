"""Catalog domain schemas - Pydantic models for validation"""

from datetime import date
from typing import Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from ...shared.validators import (
    validate_clock_time,
    validate_email,
    validate_percentage,
    validate_phone,
    validate_weekdays,
)


class ServiceCreate(BaseModel):
    """Schema for creating a service"""

    id: Optional[str] = None
    name: str
    description: Optional[str] = None
    durationMinutes: int = Field(..., gt=0, le=24 * 60)
    bufferMinutes: int = Field(0, ge=0, le=240)
    price: float = Field(..., ge=0)


class ServiceResponse(BaseModel):
    id: str
    name: str
    description: Optional[str] = None
    durationMinutes: int
    bufferMinutes: int
    price: float

    class Config:
        from_attributes = True


class WorkSchedule(BaseModel):
    """Weekly working hours of a professional"""

    workDays: list[int]
    workStart: str
    workEnd: str
    breakStart: Optional[str] = None
    breakEnd: Optional[str] = None

    @field_validator("workDays")
    @classmethod
    def validate_days(cls, v):
        return validate_weekdays(v)

    @field_validator("workStart", "workEnd", "breakStart", "breakEnd")
    @classmethod
    def validate_times(cls, v):
        return validate_clock_time(v)

    @model_validator(mode="after")
    def validate_windows(self):
        if self.workStart >= self.workEnd:
            raise ValueError("workStart must be before workEnd")
        if (self.breakStart is None) != (self.breakEnd is None):
            raise ValueError("breakStart and breakEnd must be provided together")
        if self.breakStart is not None:
            if self.breakStart >= self.breakEnd:
                raise ValueError("breakStart must be before breakEnd")
            if self.breakStart < self.workStart or self.breakEnd > self.workEnd:
                raise ValueError("Break must lie within the working hours")
        return self


class ProfessionalCreate(BaseModel):
    """Schema for creating or replacing a professional"""

    id: Optional[str] = None
    name: str
    commissionPercentage: float = 0
    specialties: list[str] = []
    schedule: WorkSchedule

    @field_validator("commissionPercentage")
    @classmethod
    def validate_commission(cls, v):
        return validate_percentage(v)


class ProfessionalResponse(BaseModel):
    id: str
    name: str
    commissionPercentage: float
    specialties: list[str]
    schedule: WorkSchedule


class ClientCreate(BaseModel):
    id: Optional[str] = None
    name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    birthDate: Optional[date] = None

    @field_validator("email")
    @classmethod
    def check_email(cls, v):
        return validate_email(v)

    @field_validator("phone")
    @classmethod
    def check_phone(cls, v):
        return validate_phone(v)


class ClientResponse(BaseModel):
    id: str
    name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    birthDate: Optional[date] = None
    loyaltyPoints: int


class PaymentMethodCreate(BaseModel):
    id: Optional[str] = None
    name: str
    active: bool = True


class PaymentMethodResponse(BaseModel):
    id: str
    name: str
    active: bool

    class Config:
        from_attributes = True
