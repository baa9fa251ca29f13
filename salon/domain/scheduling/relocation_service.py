"""
Relocation engine - moving, resizing and blocking calendar time.

Relocations never touch the ledger: a moved or resized appointment keeps the
price and commission recorded when it was booked.
"""

import logging

from sqlalchemy.orm import Session

from ...config import MAX_BLOCK_MINUTES, MIN_APPOINTMENT_MINUTES
from ...models import BLOCK_SERVICE_ID, Appointment, AppointmentStatus
from ...shared.errors import NotFoundError, ValidationError
from ..catalog.repository import CatalogRepository
from ..settings.repository import SettingsRepository
from .appointment_service import ensure_relocatable, lock_appointment
from .conflict_validator import effective_duration, ensure_no_conflict
from .locks import day_locks
from .repository import AppointmentRepository
from .time_calculator import ensure_within_day, parse_date, time_to_minutes

logger = logging.getLogger(__name__)


class RelocationService:
    def __init__(self, db: Session):
        self.db = db
        self.repo = AppointmentRepository()
        self.catalog = CatalogRepository()

    def move_appointment(
        self, appointment_id: str, new_date, new_time: str, new_professional_id: str
    ) -> Appointment:
        """
        Move an appointment to another date, time and/or professional.

        Only the target calendar is checked for conflicts. The target
        professional's working hours and specialties are not enforced.
        """
        new_date = parse_date(new_date)
        start = time_to_minutes(new_time)
        if not self.catalog.get_professional(self.db, new_professional_id):
            raise NotFoundError(f"Professional {new_professional_id} not found")

        target_key = (new_professional_id, new_date)
        with lock_appointment(self.db, appointment_id, extra_keys=[target_key]) as appointment:
            ensure_relocatable(appointment)
            services = self.catalog.services_by_id(self.db)
            duration = effective_duration(appointment, services)
            ensure_within_day(start, duration)
            existing = self.repo.list_occupying(
                self.db, new_date, new_professional_id, exclude_id=appointment.id
            )
            ensure_no_conflict(start, duration, existing, services)

            source = (appointment.professional_id, appointment.date, appointment.time)
            appointment = self.repo.update_appointment(
                self.db,
                appointment,
                date=new_date,
                time=new_time,
                professional_id=new_professional_id,
            )

        logger.info(
            f"↔️ Moved appointment {appointment_id} from {source[0]} {source[1]} {source[2]} "
            f"to {new_professional_id} {new_date} {new_time}"
        )
        return appointment

    def resize_appointment(self, appointment_id: str, new_duration: int) -> Appointment:
        """Set a custom duration; neighbours are only checked in strict mode"""
        if new_duration is None or new_duration <= 0:
            raise ValidationError("Duration must be a positive number of minutes")
        duration = max(new_duration, MIN_APPOINTMENT_MINUTES)
        strict = SettingsRepository.get_config(self.db).strict_resize

        with lock_appointment(self.db, appointment_id) as appointment:
            ensure_relocatable(appointment)
            start = time_to_minutes(appointment.time)
            ensure_within_day(start, duration)
            if strict:
                existing = self.repo.list_occupying(
                    self.db, appointment.date, appointment.professional_id, exclude_id=appointment.id
                )
                ensure_no_conflict(
                    start,
                    duration,
                    existing,
                    self.catalog.services_by_id(self.db),
                )
            appointment = self.repo.update_appointment(self.db, appointment, custom_duration=duration)

        if duration != new_duration:
            logger.info(f"Resize of {appointment_id} clamped from {new_duration} to {duration} minutes")
        logger.info(f"↕️ Resized appointment {appointment_id} to {duration} minutes")
        return appointment

    def create_block(
        self, day, start_time: str, duration: int, professional_id: str, reason: str
    ) -> Appointment:
        """Reserve a professional's time with no client and no financial effect"""
        day = parse_date(day)
        start = time_to_minutes(start_time)
        if duration is None or not MIN_APPOINTMENT_MINUTES <= duration <= MAX_BLOCK_MINUTES:
            raise ValidationError(
                f"Block duration must be between {MIN_APPOINTMENT_MINUTES} and "
                f"{MAX_BLOCK_MINUTES} minutes"
            )
        ensure_within_day(start, duration)
        if not reason or not reason.strip():
            raise ValidationError("A block needs a reason")
        if not self.catalog.get_professional(self.db, professional_id):
            raise NotFoundError(f"Professional {professional_id} not found")

        with day_locks.hold([(professional_id, day)]):
            self.db.expire_all()
            existing = self.repo.list_occupying(self.db, day, professional_id)
            ensure_no_conflict(start, duration, existing, self.catalog.services_by_id(self.db))
            block = Appointment(
                client_id=None,
                professional_id=professional_id,
                service_id=BLOCK_SERVICE_ID,
                date=day,
                time=start_time,
                status=AppointmentStatus.BLOCKED.value,
                custom_duration=duration,
                notes=reason.strip(),
            )
            (block,) = self.repo.persist(self.db, block)

        logger.info(f"🚫 Blocked {professional_id} on {day} at {start_time} for {duration} minutes")
        return block
