"""Scheduling router - FastAPI endpoints for slots, bookings and calendar changes"""

import logging
from datetime import date, datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...database import get_db
from .appointment_service import AppointmentService
from .availability_service import AvailabilityService
from .booking_service import BookingService
from .relocation_service import RelocationService
from .schemas import (
    AppointmentResponse,
    BlockCreate,
    BookingCreate,
    BookingResponse,
    CanCancelResponse,
    MoveRequest,
    ResizeRequest,
    SlotsResponse,
    StatusUpdate,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/scheduling", tags=["Scheduling"])


def get_availability_service(db: Session = Depends(get_db)) -> AvailabilityService:
    """Dependency injection for AvailabilityService"""
    return AvailabilityService(db)


def get_booking_service(db: Session = Depends(get_db)) -> BookingService:
    """Dependency injection for BookingService"""
    return BookingService(db)


def get_appointment_service(db: Session = Depends(get_db)) -> AppointmentService:
    """Dependency injection for AppointmentService"""
    return AppointmentService(db)


def get_relocation_service(db: Session = Depends(get_db)) -> RelocationService:
    """Dependency injection for RelocationService"""
    return RelocationService(db)


def split_ids(values: list[str]) -> list[str]:
    """Accept both ?service_ids=a&service_ids=b and ?service_ids=a,b"""
    ids = []
    for value in values:
        ids.extend(part.strip() for part in value.split(",") if part.strip())
    return ids


# ============================================================================
# AVAILABILITY
# ============================================================================


@router.get("/slots", response_model=SlotsResponse)
async def get_available_slots(
    date: date = Query(...),
    service_ids: list[str] = Query(...),
    professional_id: Optional[str] = Query(None),
    duration: Optional[int] = Query(None, description="Override the cart duration in minutes"),
    service: AvailabilityService = Depends(get_availability_service),
):
    """Start times at which the cart can be booked, across eligible professionals"""
    ids = split_ids(service_ids)
    slots = service.get_available_slots(date, ids, professional_id, duration)
    return SlotsResponse(date=date, serviceIds=ids, professionalId=professional_id, slots=slots)


# ============================================================================
# BOOKINGS
# ============================================================================


@router.post("/bookings", response_model=BookingResponse, status_code=201)
async def create_booking(
    data: BookingCreate, service: BookingService = Depends(get_booking_service)
):
    result = service.create_booking(
        client_id=data.clientId,
        service_ids=data.serviceIds,
        day=data.date,
        start_time=data.time,
        professional_id=data.professionalId,
        package_id=data.packageId,
        payment_method_id=data.paymentMethodId,
        reschedule_appointment_id=data.rescheduleAppointmentId,
        notes=data.notes,
    )
    return BookingResponse(
        appointmentIds=[a.id for a in result["appointments"]],
        professionalId=result["professional_id"],
        cancelledAppointmentId=result["cancelled_appointment_id"],
    )


# ============================================================================
# APPOINTMENTS
# ============================================================================


@router.get("/appointments", response_model=list[AppointmentResponse])
async def list_appointments(
    date: date = Query(...),
    professional_id: Optional[str] = Query(None),
    service: AppointmentService = Depends(get_appointment_service),
):
    """All appointments and blocks of a day, cancelled ones included"""
    return [service.describe(a) for a in service.list_appointments(date, professional_id)]


@router.get("/appointments/{appointment_id}", response_model=AppointmentResponse)
async def get_appointment(
    appointment_id: str, service: AppointmentService = Depends(get_appointment_service)
):
    return service.describe(service.get_appointment(appointment_id))


@router.post("/appointments/{appointment_id}/move", response_model=AppointmentResponse)
async def move_appointment(
    appointment_id: str,
    data: MoveRequest,
    service: RelocationService = Depends(get_relocation_service),
    appointments: AppointmentService = Depends(get_appointment_service),
):
    appointment = service.move_appointment(
        appointment_id, data.date, data.time, data.professionalId
    )
    return appointments.describe(appointment)


@router.post("/appointments/{appointment_id}/resize", response_model=AppointmentResponse)
async def resize_appointment(
    appointment_id: str,
    data: ResizeRequest,
    service: RelocationService = Depends(get_relocation_service),
    appointments: AppointmentService = Depends(get_appointment_service),
):
    appointment = service.resize_appointment(appointment_id, data.durationMinutes)
    return appointments.describe(appointment)


@router.get("/appointments/{appointment_id}/can-cancel", response_model=CanCancelResponse)
async def can_cancel(
    appointment_id: str,
    now: Optional[datetime] = Query(None, description="Reference time, defaults to server time"),
    service: AppointmentService = Depends(get_appointment_service),
):
    allowed, reason = service.can_cancel(appointment_id, now)
    return CanCancelResponse(allowed=allowed, reason=reason)


@router.post("/appointments/{appointment_id}/cancel", response_model=AppointmentResponse)
async def cancel_appointment(
    appointment_id: str,
    now: Optional[datetime] = Query(None),
    service: AppointmentService = Depends(get_appointment_service),
):
    return service.describe(service.cancel_appointment(appointment_id, now))


@router.patch("/appointments/{appointment_id}/status", response_model=AppointmentResponse)
async def update_status(
    appointment_id: str,
    data: StatusUpdate,
    service: AppointmentService = Depends(get_appointment_service),
):
    """Confirm, complete or cancel an appointment (no cancellation window check)"""
    return service.describe(service.update_status(appointment_id, data.status))


# ============================================================================
# BLOCKS
# ============================================================================


@router.post("/blocks", response_model=AppointmentResponse, status_code=201)
async def create_block(
    data: BlockCreate,
    service: RelocationService = Depends(get_relocation_service),
    appointments: AppointmentService = Depends(get_appointment_service),
):
    block = service.create_block(
        data.date, data.time, data.durationMinutes, data.professionalId, data.reason
    )
    return appointments.describe(block)
