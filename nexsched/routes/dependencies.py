from fastapi import HTTPException, Request, status

from nexsched.core.clinic import load_clinic_settings
from nexsched.core.errors import (
    ConflictError,
    InvalidTransitionError,
    NotFoundError,
    SchedulingError,
    ValidationError,
)
from nexsched.scheduling.calendar_policy import ClinicSettings
from nexsched.services.appointment_service import BookingLocks

DATABASE_UNAVAILABLE_DETAIL = 'Database unavailable. Verify DATABASE_URL and database credentials.'

_ERROR_STATUS_CODES = {
    NotFoundError: status.HTTP_404_NOT_FOUND,
    ConflictError: status.HTTP_409_CONFLICT,
    InvalidTransitionError: status.HTTP_409_CONFLICT,
    ValidationError: status.HTTP_400_BAD_REQUEST,
}


def get_clinic_settings(request: Request) -> ClinicSettings:
    settings = getattr(request.app.state, 'clinic_settings', None)
    if settings is None:
        settings = load_clinic_settings()
        request.app.state.clinic_settings = settings
    return settings


def get_booking_locks(request: Request) -> BookingLocks:
    return request.app.state.booking_locks


def to_http_exception(exc: SchedulingError) -> HTTPException:
    status_code = _ERROR_STATUS_CODES.get(type(exc), status.HTTP_400_BAD_REQUEST)
    return HTTPException(status_code=status_code, detail=exc.detail)


def database_unavailable() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        detail=DATABASE_UNAVAILABLE_DETAIL,
    )
