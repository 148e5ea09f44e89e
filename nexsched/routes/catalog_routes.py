from datetime import date, time

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from nexsched.core import config
from nexsched.database import get_db
from nexsched.repositories.catalog_repository import CatalogRepository
from nexsched.routes.dependencies import database_unavailable, get_clinic_settings
from nexsched.scheduling.calendar_policy import ClinicSettings

router = APIRouter(tags=['catalog'])
clinic_router = APIRouter(tags=['clinic'])


class ServiceResponse(BaseModel):
    id: str
    name: str
    duration_minutes: int

    class Config:
        from_attributes = True


class DentistResponse(BaseModel):
    id: str
    name: str
    specialty: str | None = None
    color: str | None = None

    class Config:
        from_attributes = True


class WorkingHoursResponse(BaseModel):
    day_of_week: int
    is_open: bool
    start: time
    end: time


class ClinicSettingsResponse(BaseModel):
    timezone: str
    slot_duration_minutes: int
    working_hours: list[WorkingHoursResponse]
    holidays: list[date]


@router.get('/services', response_model=list[ServiceResponse])
def list_services(db: Session = Depends(get_db)):
    try:
        return CatalogRepository.list_services(db)
    except SQLAlchemyError as exc:
        raise database_unavailable() from exc


@router.get('/dentists', response_model=list[DentistResponse])
def list_dentists(db: Session = Depends(get_db)):
    try:
        return CatalogRepository.list_dentists(db)
    except SQLAlchemyError as exc:
        raise database_unavailable() from exc


@clinic_router.get('/settings', response_model=ClinicSettingsResponse)
def read_clinic_settings(settings: ClinicSettings = Depends(get_clinic_settings)):
    return ClinicSettingsResponse(
        timezone=config.CLINIC_TIMEZONE,
        slot_duration_minutes=settings.slot_duration_minutes,
        working_hours=[
            WorkingHoursResponse(
                day_of_week=entry.day_of_week,
                is_open=entry.is_open,
                start=entry.start,
                end=entry.end,
            )
            for entry in settings.working_hours
        ],
        holidays=sorted(settings.holidays),
    )
