"""Appointment service - booking and status changes with conflict checks"""

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import date, datetime, timedelta
from threading import Lock
from weakref import WeakValueDictionary

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from nexsched.core.errors import ConflictError, NotFoundError, SchedulingError, ValidationError
from nexsched.models.appointment import Appointment, AppointmentStatus, validate_transition
from nexsched.repositories.appointment_repository import AppointmentRepository
from nexsched.repositories.catalog_repository import CatalogRepository
from nexsched.scheduling.calendar_policy import ClinicSettings, is_open_on
from nexsched.scheduling.overlap import find_conflicts

logger = logging.getLogger(__name__)

MAX_APPOINTMENT_NOTES_LENGTH = 600


class BookingLocks:
    """One lock per (dentist, day), guarding read -> conflict check -> write.

    Entries are weak: a lock lives only while some caller holds or waits on it.
    """

    def __init__(self):
        self._registry_lock = Lock()
        self._locks: WeakValueDictionary[tuple[str, date], Lock] = WeakValueDictionary()

    def __len__(self) -> int:
        return len(self._locks)

    def lock_for(self, dentist_id: str, day: date) -> Lock:
        key = (dentist_id, day)
        with self._registry_lock:
            lock = self._locks.get(key)
            if lock is None:
                lock = Lock()
                self._locks[key] = lock
            return lock


class AppointmentService:
    """Service layer for appointment booking and status transitions"""

    def __init__(self, db: Session, settings: ClinicSettings, locks: BookingLocks):
        self.db = db
        self.settings = settings
        self.locks = locks
        self.repo = AppointmentRepository()
        self.catalog = CatalogRepository()

    @contextmanager
    def _transaction(self, dentist_id: str, day: date) -> Iterator[None]:
        with self.locks.lock_for(dentist_id, day):
            try:
                yield
                self.db.commit()
            except (SQLAlchemyError, SchedulingError):
                self.db.rollback()
                raise

    def _get_appointment(self, appointment_id: int) -> Appointment:
        appointment = self.repo.get_appointment(self.db, appointment_id)
        if appointment is None:
            raise NotFoundError(f'Appointment {appointment_id} not found.')
        return appointment

    def _ensure_no_conflict(
        self,
        dentist_id: str,
        start_time: datetime,
        end_time: datetime,
    ) -> None:
        existing = self.repo.list_scheduled_appointments(self.db, dentist_id, start_time.date())
        conflicts = find_conflicts(start_time, end_time, existing)
        if conflicts:
            logger.warning(
                'Rejected booking for dentist %s at %s: overlaps appointment(s) %s',
                dentist_id,
                start_time.isoformat(),
                [conflict.id for conflict in conflicts],
            )
            raise ConflictError('This time is already booked.')

    def book(
        self,
        patient_id: str,
        dentist_id: str,
        service_id: str,
        start_time: datetime,
        notes: str | None = None,
    ) -> Appointment:
        """
        Book ``service_id`` with ``dentist_id`` starting at ``start_time``.

        The slot is re-checked against the dentist's scheduled appointments
        while holding that dentist's lock for the day, so a stale availability
        list can never produce a double booking.

        Raises:
            NotFoundError: unknown service or dentist
            ValidationError: bad input, or the visit falls outside opening hours
            ConflictError: the interval overlaps a scheduled appointment
        """
        patient_id = (patient_id or '').strip()
        if not patient_id:
            raise ValidationError('Patient id is required.')
        if start_time.tzinfo is not None:
            raise ValidationError('Start time must be a clinic-local time without timezone.')
        if notes is not None and len(notes) > MAX_APPOINTMENT_NOTES_LENGTH:
            raise ValidationError(f'Notes must be {MAX_APPOINTMENT_NOTES_LENGTH} characters or fewer.')
        if start_time.second or start_time.microsecond:
            raise ValidationError('Start time must fall on a whole minute.')

        service = self.catalog.get_service(self.db, service_id)
        self.catalog.get_dentist(self.db, dentist_id)
        if service.duration_minutes <= 0:
            raise ValidationError(f"Service '{service.id}' has no positive duration.")

        end_time = start_time + timedelta(minutes=service.duration_minutes)

        open_interval = is_open_on(start_time.date(), self.settings)
        if open_interval is None:
            raise ValidationError('The clinic is closed on this date.')
        if start_time < open_interval.start or end_time > open_interval.end:
            raise ValidationError('Appointment is outside clinic hours.')

        with self._transaction(dentist_id, start_time.date()):
            self._ensure_no_conflict(dentist_id, start_time, end_time)
            appointment = self.repo.insert_appointment(
                self.db,
                Appointment(
                    patient_id=patient_id,
                    dentist_id=dentist_id,
                    service_id=service.id,
                    start_time=start_time,
                    end_time=end_time,
                    duration_minutes=service.duration_minutes,
                    status=AppointmentStatus.SCHEDULED,
                    notes=notes,
                    created_at=datetime.now(),
                ),
            )

        self.db.refresh(appointment)
        logger.info(
            'Booked appointment %s: patient %s with dentist %s at %s (%s)',
            appointment.id,
            patient_id,
            dentist_id,
            start_time.isoformat(),
            service.name,
        )
        return appointment

    def cancel(self, appointment_id: int) -> Appointment:
        appointment = self._get_appointment(appointment_id)

        with self._transaction(appointment.dentist_id, appointment.start_time.date()):
            self.db.refresh(appointment)
            validate_transition(appointment.status, AppointmentStatus.CANCELLED)
            self.repo.update_appointment_status(self.db, appointment, AppointmentStatus.CANCELLED)

        self.db.refresh(appointment)
        logger.info('Cancelled appointment %s', appointment.id)
        return appointment

    def set_status(self, appointment_id: int, new_status: AppointmentStatus | str) -> Appointment:
        """
        Staff override that writes any status.

        Moving an appointment back to scheduled re-runs the conflict check
        so the dentist is never double booked.
        """
        try:
            new_status = AppointmentStatus(new_status)
        except ValueError as exc:
            raise ValidationError(f"Unknown appointment status '{new_status}'.") from exc

        appointment = self._get_appointment(appointment_id)

        with self._transaction(appointment.dentist_id, appointment.start_time.date()):
            self.db.refresh(appointment)
            previous_status = appointment.status
            if new_status == AppointmentStatus.SCHEDULED and previous_status != AppointmentStatus.SCHEDULED:
                self._ensure_no_conflict(appointment.dentist_id, appointment.start_time, appointment.end_time)
            self.repo.update_appointment_status(self.db, appointment, new_status)

        self.db.refresh(appointment)
        logger.info(
            'Appointment %s status changed from %s to %s',
            appointment.id,
            previous_status.value,
            new_status.value,
        )
        return appointment

    def list_for_patient(self, patient_id: str) -> list[Appointment]:
        return self.repo.list_for_patient(self.db, patient_id)

    def list_all(self) -> list[Appointment]:
        return self.repo.list_all(self.db)
