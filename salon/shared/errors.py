"""Domain errors raised by the booking engine and rendered by the API layer"""

from typing import Optional


class SalonError(Exception):
    """Base class for errors surfaced to API callers"""

    status_code = 400

    def __init__(self, message: str, **extra):
        super().__init__(message)
        self.message = message
        self.extra = extra

    def to_dict(self) -> dict:
        return {"detail": self.message, **self.extra}


class ValidationError(SalonError):
    """Malformed input, rejected before touching the store"""

    status_code = 422


class NotFoundError(SalonError):
    status_code = 404


class ConflictError(SalonError):
    """Target interval overlaps an existing commitment of the professional"""

    status_code = 409

    def __init__(
        self,
        message: str,
        appointment_id: Optional[str] = None,
        start: Optional[str] = None,
        end: Optional[str] = None,
    ):
        super().__init__(
            message, conflicting_appointment_id=appointment_id, conflict_start=start, conflict_end=end
        )
        self.appointment_id = appointment_id
        self.start = start
        self.end = end


class CancellationNotAllowedError(SalonError):
    status_code = 409


class LockTimeoutError(SalonError):
    """Calendar lock for a professional/day could not be acquired in time"""

    status_code = 503


class NoProfessionalAvailableError(SalonError):
    """No eligible professional is free for the whole cart at the requested time"""

    status_code = 409
