"""
Availability engine

Combines the clinic calendar, the slot generator and the conflict
detector into the list of bookable slots for one dentist, day and service.
"""

from datetime import date, datetime, timedelta

from pydantic import BaseModel, ConfigDict
from sqlalchemy.orm import Session

from nexsched.repositories.appointment_repository import AppointmentRepository
from nexsched.repositories.catalog_repository import CatalogRepository
from nexsched.scheduling.calendar_policy import ClinicSettings, is_open_on
from nexsched.scheduling.overlap import is_slot_booked
from nexsched.scheduling.slots import generate_slots


class TimeSlot(BaseModel):
    model_config = ConfigDict(frozen=True)

    time: datetime
    is_available: bool


class AvailabilityEngine:
    def __init__(self, db: Session, settings: ClinicSettings):
        self.db = db
        self.settings = settings
        self.appointments = AppointmentRepository()
        self.catalog = CatalogRepository()

    def compute_availability(self, day: date, dentist_id: str, service_id: str) -> list[TimeSlot]:
        """
        Every candidate slot for the day, in chronological order.

        Unavailable slots are included with ``is_available=False``; filtering
        them out is left to the caller. A closed day yields an empty list.

        Raises:
            NotFoundError: unknown service or dentist
        """
        service = self.catalog.get_service(self.db, service_id)
        self.catalog.get_dentist(self.db, dentist_id)

        open_interval = is_open_on(day, self.settings)
        if open_interval is None:
            return []

        candidates = generate_slots(
            open_interval,
            self.settings.slot_duration_minutes,
            service.duration_minutes,
        )
        if not candidates:
            return []

        existing = self.appointments.list_scheduled_appointments(self.db, dentist_id, day)
        service_duration = timedelta(minutes=service.duration_minutes)

        return [
            TimeSlot(
                time=candidate,
                is_available=not is_slot_booked(candidate, candidate + service_duration, existing),
            )
            for candidate in candidates
        ]


def compute_availability(
    db: Session,
    settings: ClinicSettings,
    day: date,
    dentist_id: str,
    service_id: str,
) -> list[TimeSlot]:
    return AvailabilityEngine(db, settings).compute_availability(day, dentist_id, service_id)
