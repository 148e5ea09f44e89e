"""Appointment model definitions."""

import enum
from datetime import datetime

from sqlalchemy import Column, DateTime, Enum, ForeignKey, Index, Integer, String
from nexsched.core.errors import InvalidTransitionError
from nexsched.database import Base


class AppointmentStatus(str, enum.Enum):
    SCHEDULED = "scheduled"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    NO_SHOW = "no-show"


TERMINAL_STATUSES = frozenset({
    AppointmentStatus.COMPLETED,
    AppointmentStatus.CANCELLED,
    AppointmentStatus.NO_SHOW,
})

ALLOWED_TRANSITIONS = {
    AppointmentStatus.SCHEDULED: TERMINAL_STATUSES,
    AppointmentStatus.COMPLETED: frozenset(),
    AppointmentStatus.CANCELLED: frozenset(),
    AppointmentStatus.NO_SHOW: frozenset(),
}


def can_transition(current: AppointmentStatus, new: AppointmentStatus) -> bool:
    return new in ALLOWED_TRANSITIONS[current]


def validate_transition(current: AppointmentStatus, new: AppointmentStatus) -> None:
    if not can_transition(current, new):
        raise InvalidTransitionError(
            f"Appointment cannot move from '{current.value}' to '{new.value}'."
        )


class Appointment(Base):
    """Represents a booked visit.

    ``duration_minutes`` is copied from the service when the appointment is
    booked, so later catalog edits leave existing bookings untouched.
    """
    __tablename__ = "appointments"
    __table_args__ = (
        Index("idx_appointments_dentist_status_start", "dentist_id", "status", "start_time"),
    )

    id = Column(Integer, primary_key=True)
    patient_id = Column(String, nullable=False, index=True)
    dentist_id = Column(String, ForeignKey("dentists.id"), nullable=False)
    service_id = Column(String, ForeignKey("services.id"), nullable=False)
    start_time = Column(DateTime, nullable=False)
    end_time = Column(DateTime, nullable=False)
    duration_minutes = Column(Integer, nullable=False)
    status = Column(
        Enum(
            AppointmentStatus,
            native_enum=False,
            length=16,
            values_callable=lambda statuses: [status.value for status in statuses],
        ),
        nullable=False,
        default=AppointmentStatus.SCHEDULED,
    )
    notes = Column(String)
    created_at = Column(DateTime, nullable=False, default=datetime.now)
