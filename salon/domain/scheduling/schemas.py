"""Scheduling domain schemas - booking, relocation and block requests"""

import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator

from ...config import MAX_APPOINTMENT_MINUTES, MAX_BLOCK_MINUTES, MIN_APPOINTMENT_MINUTES
from ...shared.validators import validate_clock_time


class SlotsResponse(BaseModel):
    date: datetime.date
    serviceIds: list[str]
    professionalId: Optional[str] = None
    slots: list[str]


class BookingCreate(BaseModel):
    """A cart of services booked back-to-back for one client"""

    clientId: str
    serviceIds: list[str] = Field(..., min_length=1)
    date: datetime.date
    time: str
    professionalId: Optional[str] = None
    packageId: Optional[str] = None
    paymentMethodId: Optional[str] = None
    rescheduleAppointmentId: Optional[str] = None
    notes: Optional[str] = None

    @field_validator("time")
    @classmethod
    def validate_time(cls, v):
        return validate_clock_time(v)


class BookingResponse(BaseModel):
    appointmentIds: list[str]
    professionalId: str
    cancelledAppointmentId: Optional[str] = None


class MoveRequest(BaseModel):
    date: datetime.date
    time: str
    professionalId: str

    @field_validator("time")
    @classmethod
    def validate_time(cls, v):
        return validate_clock_time(v)


class ResizeRequest(BaseModel):
    durationMinutes: int = Field(..., le=MAX_APPOINTMENT_MINUTES)


class BlockCreate(BaseModel):
    """Administrative unavailability window for one professional"""

    date: datetime.date
    time: str
    durationMinutes: int = Field(..., ge=MIN_APPOINTMENT_MINUTES, le=MAX_BLOCK_MINUTES)
    professionalId: str
    reason: str = Field(..., min_length=1)

    @field_validator("time")
    @classmethod
    def validate_time(cls, v):
        return validate_clock_time(v)


class StatusUpdate(BaseModel):
    status: Literal["PENDING", "CONFIRMED", "COMPLETED", "CANCELLED"]


class AppointmentResponse(BaseModel):
    id: str
    clientId: Optional[str] = None
    professionalId: str
    serviceId: str
    date: datetime.date
    time: str
    endTime: str
    durationMinutes: int
    status: str
    customDuration: Optional[int] = None
    notes: Optional[str] = None


class CanCancelResponse(BaseModel):
    allowed: bool
    reason: Optional[str] = None
