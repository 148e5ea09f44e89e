"""Appointment repository - database operations for appointments"""

from datetime import date, datetime, time, timedelta
from typing import Optional

from sqlalchemy.orm import Session

from nexsched.models.appointment import Appointment, AppointmentStatus


def day_bounds(day: date) -> tuple[datetime, datetime]:
    start = datetime.combine(day, time.min)
    return start, start + timedelta(days=1)


class AppointmentRepository:
    """Repository for appointment database operations.

    Methods only flush; the caller owns the transaction and commits.
    """

    @staticmethod
    def get_appointment(db: Session, appointment_id: int) -> Optional[Appointment]:
        return db.query(Appointment).filter(Appointment.id == appointment_id).first()

    @staticmethod
    def list_scheduled_appointments(db: Session, dentist_id: str, day: date) -> list[Appointment]:
        """Scheduled appointments for one dentist that start on ``day``."""
        day_start, day_end = day_bounds(day)
        return (
            db.query(Appointment)
            .filter(
                Appointment.dentist_id == dentist_id,
                Appointment.status == AppointmentStatus.SCHEDULED,
                Appointment.start_time >= day_start,
                Appointment.start_time < day_end,
            )
            .all()
        )

    @staticmethod
    def insert_appointment(db: Session, appointment: Appointment) -> Appointment:
        db.add(appointment)
        db.flush()
        return appointment

    @staticmethod
    def update_appointment_status(
        db: Session,
        appointment: Appointment,
        status: AppointmentStatus,
    ) -> Appointment:
        appointment.status = status
        db.flush()
        return appointment

    @staticmethod
    def list_for_patient(db: Session, patient_id: str) -> list[Appointment]:
        return db.query(Appointment).filter(Appointment.patient_id == patient_id).all()

    @staticmethod
    def list_all(db: Session) -> list[Appointment]:
        return db.query(Appointment).all()
