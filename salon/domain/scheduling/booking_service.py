"""
Booking committer.

A cart of services is booked back-to-back on a single professional. Either
every appointment of the cart is persisted or none is; financial side effects
follow per appointment and never undo it.
"""

import logging
from datetime import date, datetime
from typing import Optional, Sequence

from sqlalchemy.orm import Session

from ...models import Appointment, AppointmentStatus, Professional, Service
from ...shared.errors import (
    CancellationNotAllowedError,
    ConflictError,
    NoProfessionalAvailableError,
    NotFoundError,
    ValidationError,
)
from ..catalog.repository import CatalogRepository
from ..finance.service import FinanceService
from ..pricing.schemas import PriceQuote
from ..pricing.service import PricingService
from .appointment_service import AppointmentService
from .availability_service import AvailabilityService
from .conflict_validator import ensure_no_conflict
from .locks import day_locks, package_locks
from .repository import AppointmentRepository
from .time_calculator import ensure_within_day, minutes_to_time, parse_date, time_to_minutes

logger = logging.getLogger(__name__)

# Attempts at "any professional" resolution when a concurrent writer takes the slot first
MAX_RESOLUTION_ATTEMPTS = 3


class BookingService:
    """Service layer for creating bookings"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = AppointmentRepository()
        self.catalog = CatalogRepository()
        self.availability = AvailabilityService(db)
        self.appointments = AppointmentService(db)
        self.pricing = PricingService(db)
        self.finance = FinanceService(db)

    def create_booking(
        self,
        client_id: str,
        service_ids: Sequence[str],
        day,
        start_time: str,
        professional_id: Optional[str] = None,
        package_id: Optional[str] = None,
        payment_method_id: Optional[str] = None,
        reschedule_appointment_id: Optional[str] = None,
        notes: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> dict:
        """
        Book every service of the cart sequentially from start_time.

        Returns the created appointments, the professional serving them and the
        id of the appointment cancelled by a reschedule, if any.
        """
        day = parse_date(day)
        start = time_to_minutes(start_time)
        if not service_ids:
            raise ValidationError("At least one service must be selected")

        if not self.catalog.get_client(self.db, client_id):
            raise NotFoundError(f"Client {client_id} not found")
        services = self._resolve_services(service_ids)
        ensure_within_day(start, sum(s.total_minutes for s in services))

        if payment_method_id:
            method = self.catalog.get_payment_method(self.db, payment_method_id)
            if not method:
                raise NotFoundError(f"Payment method {payment_method_id} not found")
            if not method.active:
                raise ValidationError(f"Payment method {method.name} is not active")

        if package_id:
            if len(services) != 1:
                raise ValidationError("A package credit can only pay for a single-service booking")
            # Checked again under the package lock when the cart commits
            self.finance.get_redeemable_package(package_id, client_id, services[0].id, date.today())

        if reschedule_appointment_id:
            self._check_reschedulable(reschedule_appointment_id, client_id, now)

        if professional_id:
            pro = self.catalog.get_professional(self.db, professional_id)
            if not pro:
                raise NotFoundError(f"Professional {professional_id} not found")
            created = self._commit_cart(pro, services, day, start, client_id, package_id, payment_method_id, notes)
        else:
            pro, created = self._commit_with_any_professional(
                services, day, start_time, client_id, package_id, payment_method_id, notes
            )

        logger.info(
            f"📅 Booked {len(created)} appointment(s) for client {client_id} with "
            f"{pro.id} on {day} at {start_time}"
        )

        for appointment, service in zip(created, services):
            quote = self._price_leg(service, appointment, client_id)
            self.finance.dispatch_booking_leg(
                appointment,
                service,
                quote,
                package_id=package_id,
                payment_method_id=payment_method_id,
                credit_reserved=True,
            )

        cancelled_id = None
        if reschedule_appointment_id:
            # The new booking is already committed, so a failure here leaves both visible
            self.appointments.update_status(reschedule_appointment_id, AppointmentStatus.CANCELLED.value)
            cancelled_id = reschedule_appointment_id
            logger.info(f"🔁 Rescheduled {reschedule_appointment_id} to {created[0].id}")

        return {
            "appointments": created,
            "professional_id": pro.id,
            "cancelled_appointment_id": cancelled_id,
        }

    def _resolve_services(self, service_ids: Sequence[str]) -> list[Service]:
        services = []
        for service_id in service_ids:
            service = self.catalog.get_service(self.db, service_id)
            if not service:
                raise NotFoundError(f"Service {service_id} not found")
            services.append(service)
        return services

    def _check_reschedulable(self, appointment_id: str, client_id: str, now: Optional[datetime]):
        original = self.appointments.get_appointment(appointment_id)
        if original.client_id != client_id:
            raise ValidationError("Only the client's own appointments can be rescheduled")
        allowed, reason = self.appointments.check_cancellation_window(original, now)
        if not allowed:
            raise CancellationNotAllowedError(reason)

    def _commit_with_any_professional(
        self,
        services: list[Service],
        day: date,
        start_time: str,
        client_id: str,
        package_id: Optional[str],
        payment_method_id: Optional[str],
        notes: Optional[str],
    ) -> tuple[Professional, list[Appointment]]:
        """Pick the first free eligible professional, re-checking under their lock"""
        service_ids = [s.id for s in services]
        start = time_to_minutes(start_time)
        for _ in range(MAX_RESOLUTION_ATTEMPTS):
            self.db.expire_all()
            pro = self.availability.find_free_professional(day, service_ids, start_time)
            if pro is None:
                break
            try:
                created = self._commit_cart(
                    pro, services, day, start, client_id, package_id, payment_method_id, notes
                )
                return pro, created
            except ConflictError:
                logger.info(f"Slot {day} {start_time} taken on {pro.id} meanwhile, resolving again")

        logger.warning(f"⚠️ No professional available for {service_ids} on {day} at {start_time}")
        raise NoProfessionalAvailableError(
            f"No professional is available on {day} at {start_time} for the selected services"
        )

    def _commit_cart(
        self,
        pro: Professional,
        services: list[Service],
        day: date,
        start: int,
        client_id: str,
        package_id: Optional[str],
        payment_method_id: Optional[str],
        notes: Optional[str],
    ) -> list[Appointment]:
        """
        Create one PENDING appointment per service at an advancing cursor, atomically.
        A package credit is taken in the same commit as the appointments.
        """
        package_keys = [(package_id,)] if package_id else []
        with day_locks.hold([(pro.id, day)]), package_locks.hold(package_keys):
            self.db.expire_all()
            existing = self.repo.list_occupying(self.db, day, pro.id)
            services_by_id = self.catalog.services_by_id(self.db)

            legs = []
            cursor = start
            for service in services:
                duration = service.total_minutes
                ensure_no_conflict(cursor, duration, existing, services_by_id)
                legs.append(
                    Appointment(
                        client_id=client_id,
                        professional_id=pro.id,
                        service_id=service.id,
                        date=day,
                        time=minutes_to_time(cursor),
                        status=AppointmentStatus.PENDING.value,
                        client_package_id=package_id,
                        payment_method_id=payment_method_id,
                        notes=notes,
                    )
                )
                cursor += duration

            if package_id:
                self.finance.reserve_package_credit(package_id, client_id, services[0].id, date.today())
            return self.repo.persist(self.db, *legs)

    def _price_leg(self, service: Service, appointment: Appointment, client_id: str) -> PriceQuote:
        try:
            return self.pricing.calculate_price(service, appointment.date, appointment.time, client_id)
        except Exception:
            logger.exception(f"❌ Pricing failed for appointment {appointment.id}; using list price")
            return PriceQuote(serviceId=service.id, basePrice=service.price, finalPrice=service.price)
