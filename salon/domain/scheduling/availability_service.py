"""Availability resolver - bookable start times for a cart of services"""

import logging
from collections import defaultdict
from datetime import date
from typing import Optional, Sequence

from sqlalchemy.orm import Session

from ...config import SLOT_INTERVAL_MINUTES
from ...models import Appointment, Professional, Service
from ...shared.errors import ValidationError
from ..catalog.repository import CatalogRepository
from .conflict_validator import find_conflict
from .repository import AppointmentRepository
from .time_calculator import day_of_week, minutes_to_time, overlaps, parse_date, time_to_minutes

logger = logging.getLogger(__name__)


def cart_duration(service_ids: Sequence[str], services: dict[str, Service]) -> int:
    """Sum of duration + buffer over the cart; unknown services contribute nothing"""
    total = 0
    for service_id in service_ids:
        service = services.get(service_id)
        if service:
            total += service.total_minutes
    return total


def is_eligible(pro: Professional, service_ids: Sequence[str]) -> bool:
    specialties = set(pro.specialties or [])
    return all(service_id in specialties for service_id in service_ids)


def professional_slots(
    pro: Professional,
    total_duration: int,
    existing: list[Appointment],
    services: dict[str, Service],
) -> list[int]:
    """Start minutes at which a professional can take a block of total_duration"""
    work_start = time_to_minutes(pro.work_start)
    work_end = time_to_minutes(pro.work_end)
    has_break = bool(pro.break_start and pro.break_end)
    if has_break:
        break_start = time_to_minutes(pro.break_start)
        break_end = time_to_minutes(pro.break_end)

    slots = []
    candidate = work_start
    while candidate + total_duration <= work_end:
        candidate_end = candidate + total_duration
        if has_break and overlaps(candidate, candidate_end, break_start, break_end):
            candidate += SLOT_INTERVAL_MINUTES
            continue
        if find_conflict(candidate, total_duration, existing, services) is None:
            slots.append(candidate)
        candidate += SLOT_INTERVAL_MINUTES
    return slots


class AvailabilityService:
    """Computes slots from the roster, the catalog and the day's appointments"""

    def __init__(self, db: Session):
        self.db = db
        self.catalog = CatalogRepository()
        self.repo = AppointmentRepository()

    def get_available_slots(
        self,
        day,
        service_ids: Sequence[str],
        professional_id: Optional[str] = None,
        explicit_duration: Optional[int] = None,
    ) -> list[str]:
        """
        Union of start times offered by every eligible professional, ascending.

        An empty list means nobody can take the cart that day; it is not an error.
        """
        day = parse_date(day)
        if not service_ids:
            raise ValidationError("At least one service must be selected")
        if explicit_duration is not None and explicit_duration <= 0:
            raise ValidationError("Duration must be a positive number of minutes")

        services = self.catalog.services_by_id(self.db)
        total_duration = explicit_duration or cart_duration(service_ids, services)
        if total_duration == 0:
            return []

        per_professional = self._slots_by_professional(
            day, service_ids, total_duration, services, professional_id
        )
        offered = set()
        for slots in per_professional.values():
            offered.update(slots)
        return [minutes_to_time(m) for m in sorted(offered)]

    def find_free_professional(
        self,
        day,
        service_ids: Sequence[str],
        start_time: str,
        explicit_duration: Optional[int] = None,
    ) -> Optional[Professional]:
        """First professional in roster order whose own slots include start_time"""
        day = parse_date(day)
        start = time_to_minutes(start_time)
        services = self.catalog.services_by_id(self.db)
        total_duration = explicit_duration or cart_duration(service_ids, services)
        if total_duration == 0:
            return None

        per_professional = self._slots_by_professional(day, service_ids, total_duration, services)
        for pro in self.catalog.list_professionals(self.db):
            if start in per_professional.get(pro.id, ()):
                return pro
        return None

    def _slots_by_professional(
        self,
        day: date,
        service_ids: Sequence[str],
        total_duration: int,
        services: dict[str, Service],
        professional_id: Optional[str] = None,
    ) -> dict[str, list[int]]:
        weekday = day_of_week(day)
        eligible = [
            pro
            for pro in self.catalog.list_professionals(self.db)
            if is_eligible(pro, service_ids)
            and (not professional_id or pro.id == professional_id)
            and weekday in (pro.work_days or [])
        ]
        if not eligible:
            return {}

        # One query for the whole day, grouped per professional
        by_professional: dict[str, list[Appointment]] = defaultdict(list)
        for appointment in self.repo.list_occupying_for_day(self.db, day):
            by_professional[appointment.professional_id].append(appointment)

        return {
            pro.id: professional_slots(pro, total_duration, by_professional[pro.id], services)
            for pro in eligible
        }
