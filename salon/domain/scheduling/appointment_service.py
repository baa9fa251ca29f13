"""Appointment lifecycle - listing, status transitions and the cancellation policy"""

import logging
from contextlib import contextmanager
from datetime import datetime
from typing import Iterable, Optional

from sqlalchemy.orm import Session

from ...models import Appointment, AppointmentStatus
from ...shared.errors import (
    CancellationNotAllowedError,
    LockTimeoutError,
    NotFoundError,
    ValidationError,
)
from ..catalog.repository import CatalogRepository
from ..settings.repository import SettingsRepository
from .conflict_validator import effective_duration
from .locks import DayKey, day_locks
from .repository import AppointmentRepository
from .time_calculator import combine, end_time_label, parse_date, time_to_minutes, to_salon_time

logger = logging.getLogger(__name__)

MAX_LOCK_ATTEMPTS = 3

# Allowed status transitions; COMPLETED and CANCELLED are final
STATUS_TRANSITIONS = {
    AppointmentStatus.PENDING.value: {
        AppointmentStatus.CONFIRMED.value,
        AppointmentStatus.CANCELLED.value,
    },
    AppointmentStatus.CONFIRMED.value: {
        AppointmentStatus.COMPLETED.value,
        AppointmentStatus.CANCELLED.value,
    },
    AppointmentStatus.BLOCKED.value: {AppointmentStatus.CANCELLED.value},
    AppointmentStatus.COMPLETED.value: set(),
    AppointmentStatus.CANCELLED.value: set(),
}

FINAL_STATUSES = {AppointmentStatus.CANCELLED.value, AppointmentStatus.COMPLETED.value}


@contextmanager
def lock_appointment(db: Session, appointment_id: str, extra_keys: Iterable[DayKey] = ()):
    """
    Hold the calendar lock of an appointment's professional/day (plus extra_keys)
    and yield a freshly loaded copy of the appointment.
    """
    extra_keys = list(extra_keys)
    for _ in range(MAX_LOCK_ATTEMPTS):
        appointment = AppointmentRepository.get_appointment(db, appointment_id)
        if not appointment:
            raise NotFoundError(f"Appointment {appointment_id} not found")
        key = (appointment.professional_id, appointment.date)
        with day_locks.hold([key, *extra_keys]):
            db.expire_all()
            fresh = AppointmentRepository.get_appointment(db, appointment_id)
            if fresh is not None and (fresh.professional_id, fresh.date) == key:
                yield fresh
                return
        logger.info(f"Appointment {appointment_id} moved while waiting for its lock, retrying")
    raise LockTimeoutError(f"Appointment {appointment_id} keeps changing, please try again")


def ensure_relocatable(appointment: Appointment) -> None:
    if appointment.status in FINAL_STATUSES:
        raise ValidationError(
            f"Appointment {appointment.id} is {appointment.status} and cannot be changed"
        )


class AppointmentService:
    """Service layer for appointment reads and lifecycle changes"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = AppointmentRepository()
        self.catalog = CatalogRepository()

    def get_appointment(self, appointment_id: str) -> Appointment:
        appointment = self.repo.get_appointment(self.db, appointment_id)
        if not appointment:
            raise NotFoundError(f"Appointment {appointment_id} not found")
        return appointment

    def list_appointments(self, day, professional_id: Optional[str] = None) -> list[Appointment]:
        return self.repo.list_appointments(self.db, parse_date(day), professional_id)

    def describe(self, appointment: Appointment) -> dict:
        """Appointment fields plus its effective occupied range"""
        duration = effective_duration(appointment, self.catalog.services_by_id(self.db))
        return {
            "id": appointment.id,
            "clientId": appointment.client_id,
            "professionalId": appointment.professional_id,
            "serviceId": appointment.service_id,
            "date": appointment.date,
            "time": appointment.time,
            "endTime": end_time_label(time_to_minutes(appointment.time) + duration),
            "durationMinutes": duration,
            "status": appointment.status,
            "customDuration": appointment.custom_duration,
            "notes": appointment.notes,
        }

    def can_cancel(
        self, appointment_id: str, now: Optional[datetime] = None
    ) -> tuple[bool, Optional[str]]:
        """
        Cancellation (and rescheduling) is allowed only for open appointments that
        start at least cancellation_window_hours from now.
        """
        appointment = self.get_appointment(appointment_id)
        return self.check_cancellation_window(appointment, now)

    def check_cancellation_window(
        self, appointment: Appointment, now: Optional[datetime] = None
    ) -> tuple[bool, Optional[str]]:
        if appointment.status in FINAL_STATUSES:
            return False, f"Appointment is already {appointment.status}"

        now = to_salon_time(now or datetime.now())
        window = SettingsRepository.get_config(self.db).cancellation_window_hours
        starts_at = combine(appointment.date, appointment.time)
        hours_ahead = (starts_at - now).total_seconds() / 3600
        if hours_ahead < window:
            return False, f"Cancellations require at least {window}h notice"
        return True, None

    def update_status(self, appointment_id: str, status: str) -> Appointment:
        with lock_appointment(self.db, appointment_id) as appointment:
            if appointment.status == status:
                return appointment
            allowed = STATUS_TRANSITIONS.get(appointment.status, set())
            if status not in allowed:
                raise ValidationError(
                    f"Cannot change appointment status from {appointment.status} to {status}"
                )
            previous = appointment.status
            appointment = self.repo.update_appointment(self.db, appointment, status=status)
        logger.info(f"🔄 Appointment {appointment_id} status {previous} -> {status}")
        return appointment

    def cancel_appointment(self, appointment_id: str, now: Optional[datetime] = None) -> Appointment:
        allowed, reason = self.can_cancel(appointment_id, now)
        if not allowed:
            logger.warning(f"⚠️ Cancellation refused for {appointment_id}: {reason}")
            raise CancellationNotAllowedError(reason)
        return self.update_status(appointment_id, AppointmentStatus.CANCELLED.value)
