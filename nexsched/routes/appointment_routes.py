from datetime import datetime
from zoneinfo import ZoneInfo

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, field_validator
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from nexsched.core import config
from nexsched.core.errors import SchedulingError
from nexsched.database import get_db
from nexsched.models.appointment import AppointmentStatus
from nexsched.routes.dependencies import (
    database_unavailable,
    get_booking_locks,
    get_clinic_settings,
    to_http_exception,
)
from nexsched.scheduling.calendar_policy import ClinicSettings
from nexsched.services.appointment_service import (
    MAX_APPOINTMENT_NOTES_LENGTH,
    AppointmentService,
    BookingLocks,
)

router = APIRouter(tags=['appointments'])


class CreateAppointmentRequest(BaseModel):
    patient_id: str
    dentist_id: str
    service_id: str
    start_time: datetime
    notes: str | None = None

    @field_validator('patient_id', 'dentist_id', 'service_id')
    @classmethod
    def validate_identifier(cls, value: str) -> str:
        normalized = value.strip()
        if not normalized:
            raise ValueError('Identifier is required.')
        return normalized

    @field_validator('start_time')
    @classmethod
    def validate_start_time(cls, value: datetime) -> datetime:
        if value.tzinfo is not None:
            value = value.astimezone(ZoneInfo(config.CLINIC_TIMEZONE)).replace(tzinfo=None)
        return value

    @field_validator('notes')
    @classmethod
    def validate_notes(cls, value: str | None) -> str | None:
        if value is None:
            return None

        normalized = value.strip()
        if not normalized:
            return None

        if len(normalized) > MAX_APPOINTMENT_NOTES_LENGTH:
            raise ValueError(f'Notes must be {MAX_APPOINTMENT_NOTES_LENGTH} characters or fewer.')

        return normalized


class UpdateStatusRequest(BaseModel):
    status: AppointmentStatus


class AppointmentResponse(BaseModel):
    id: int
    patient_id: str
    dentist_id: str
    service_id: str
    start_time: datetime
    end_time: datetime
    duration_minutes: int
    status: AppointmentStatus
    notes: str | None = None
    created_at: datetime

    class Config:
        from_attributes = True


def get_appointment_service(
    db: Session = Depends(get_db),
    settings: ClinicSettings = Depends(get_clinic_settings),
    locks: BookingLocks = Depends(get_booking_locks),
) -> AppointmentService:
    return AppointmentService(db, settings, locks)


def _sorted_by_start(appointments):
    return sorted(appointments, key=lambda appointment: (appointment.start_time, appointment.id))


@router.post('', response_model=AppointmentResponse, status_code=status.HTTP_201_CREATED)
def create_appointment(
    data: CreateAppointmentRequest,
    service: AppointmentService = Depends(get_appointment_service),
):
    try:
        return service.book(
            patient_id=data.patient_id,
            dentist_id=data.dentist_id,
            service_id=data.service_id,
            start_time=data.start_time,
            notes=data.notes,
        )
    except SchedulingError as exc:
        raise to_http_exception(exc) from exc
    except SQLAlchemyError as exc:
        raise database_unavailable() from exc


@router.get('', response_model=list[AppointmentResponse])
def list_appointments(service: AppointmentService = Depends(get_appointment_service)):
    try:
        return _sorted_by_start(service.list_all())
    except SQLAlchemyError as exc:
        raise database_unavailable() from exc


@router.get('/patients/{patient_id}', response_model=list[AppointmentResponse])
def list_patient_appointments(
    patient_id: str,
    service: AppointmentService = Depends(get_appointment_service),
):
    try:
        return _sorted_by_start(service.list_for_patient(patient_id.strip()))
    except SQLAlchemyError as exc:
        raise database_unavailable() from exc


@router.post('/{appointment_id}/cancel', response_model=AppointmentResponse)
def cancel_appointment(
    appointment_id: int,
    service: AppointmentService = Depends(get_appointment_service),
):
    try:
        return service.cancel(appointment_id)
    except SchedulingError as exc:
        raise to_http_exception(exc) from exc
    except SQLAlchemyError as exc:
        raise database_unavailable() from exc


@router.patch('/{appointment_id}/status', response_model=AppointmentResponse)
def update_appointment_status(
    appointment_id: int,
    data: UpdateStatusRequest,
    service: AppointmentService = Depends(get_appointment_service),
):
    try:
        return service.set_status(appointment_id, data.status)
    except SchedulingError as exc:
        raise to_http_exception(exc) from exc
    except SQLAlchemyError as exc:
        raise database_unavailable() from exc
