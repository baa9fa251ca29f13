"""
Booking conflict detection.

The same half-open overlap rule is used by availability, booking, moves,
strict resizes and blocks: [start, start + duration) intervals, where a
booking that ends exactly when another starts is not a conflict.
"""

import logging
from typing import Iterable, Optional

from ...config import UNKNOWN_SERVICE_FALLBACK_MINUTES
from ...models import Appointment, AppointmentStatus, Service
from ...shared.errors import ConflictError
from .time_calculator import end_time_label, minutes_to_time, overlaps, time_to_minutes

logger = logging.getLogger(__name__)


def effective_duration(appointment: Appointment, services: dict[str, Service]) -> int:
    """Minutes an appointment occupies on the calendar"""
    if appointment.custom_duration:
        return appointment.custom_duration
    service = services.get(appointment.service_id)
    if service is None:
        logger.warning(
            f"⚠️ Appointment {appointment.id} references unknown service "
            f"{appointment.service_id}; assuming {UNKNOWN_SERVICE_FALLBACK_MINUTES} minutes"
        )
        return UNKNOWN_SERVICE_FALLBACK_MINUTES
    return service.total_minutes


def occupied_interval(appointment: Appointment, services: dict[str, Service]) -> tuple[int, int]:
    start = time_to_minutes(appointment.time)
    return start, start + effective_duration(appointment, services)


def find_conflict(
    start: int,
    duration: int,
    existing: Iterable[Appointment],
    services: dict[str, Service],
) -> Optional[Appointment]:
    """Return the first occupying appointment that overlaps [start, start + duration)"""
    end = start + duration
    for appointment in existing:
        if appointment.status == AppointmentStatus.CANCELLED.value:
            continue
        existing_start, existing_end = occupied_interval(appointment, services)
        if overlaps(start, end, existing_start, existing_end):
            return appointment
    return None


def ensure_no_conflict(
    start: int,
    duration: int,
    existing: Iterable[Appointment],
    services: dict[str, Service],
) -> None:
    """Raise ConflictError describing the clashing appointment, if any"""
    conflict = find_conflict(start, duration, existing, services)
    if conflict is None:
        return
    conflict_start, conflict_end = occupied_interval(conflict, services)
    start_label = minutes_to_time(conflict_start)
    end_label = end_time_label(conflict_end)
    raise ConflictError(
        f"Conflict: professional has another appointment from {start_label} to {end_label}",
        appointment_id=conflict.id,
        start=start_label,
        end=end_label,
    )
