"""Appointment repository - the appointment store used by the booking engine"""

from datetime import date
from typing import Optional

from sqlalchemy.orm import Session

from ...models import Appointment, AppointmentStatus


class AppointmentRepository:
    """Repository for appointment and block database operations"""

    @staticmethod
    def get_appointment(db: Session, appointment_id: str) -> Optional[Appointment]:
        return db.query(Appointment).filter(Appointment.id == appointment_id).first()

    @staticmethod
    def list_appointments(
        db: Session, day: date, professional_id: Optional[str] = None
    ) -> list[Appointment]:
        """All appointments of a day, any status, ordered by start time"""
        query = db.query(Appointment).filter(Appointment.date == day)
        if professional_id:
            query = query.filter(Appointment.professional_id == professional_id)
        return query.order_by(Appointment.time, Appointment.created_at).all()

    @staticmethod
    def list_occupying(
        db: Session,
        day: date,
        professional_id: str,
        exclude_id: Optional[str] = None,
    ) -> list[Appointment]:
        """Appointments that occupy calendar space for a professional on a day"""
        query = db.query(Appointment).filter(
            Appointment.professional_id == professional_id,
            Appointment.date == day,
            Appointment.status != AppointmentStatus.CANCELLED.value,
        )
        if exclude_id:
            query = query.filter(Appointment.id != exclude_id)
        return query.order_by(Appointment.time).all()

    @staticmethod
    def list_occupying_for_day(db: Session, day: date) -> list[Appointment]:
        """Occupying appointments of every professional on a day"""
        return (
            db.query(Appointment)
            .filter(
                Appointment.date == day,
                Appointment.status != AppointmentStatus.CANCELLED.value,
            )
            .order_by(Appointment.time)
            .all()
        )

    @staticmethod
    def persist(db: Session, *appointments: Appointment) -> list[Appointment]:
        """Insert one or more appointments in a single transaction"""
        try:
            db.add_all(appointments)
            db.commit()
        except Exception:
            db.rollback()
            raise
        for appointment in appointments:
            db.refresh(appointment)
        return list(appointments)

    @staticmethod
    def update_appointment(db: Session, appointment: Appointment, **updates) -> Appointment:
        """Apply field updates atomically"""
        try:
            for key, value in updates.items():
                setattr(appointment, key, value)
            db.commit()
        except Exception:
            db.rollback()
            raise
        db.refresh(appointment)
        return appointment
