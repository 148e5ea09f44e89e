from datetime import date

from fastapi import APIRouter, Depends, Query
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from nexsched.core.errors import SchedulingError
from nexsched.database import get_db
from nexsched.routes.dependencies import (
    database_unavailable,
    get_clinic_settings,
    to_http_exception,
)
from nexsched.scheduling.availability import AvailabilityEngine, TimeSlot
from nexsched.scheduling.calendar_policy import ClinicSettings

router = APIRouter(tags=['availability'])


@router.get('/slots', response_model=list[TimeSlot])
def list_time_slots(
    slot_date: date = Query(..., alias='date'),
    dentist_id: str = Query(...),
    service_id: str = Query(...),
    available_only: bool = Query(default=False),
    db: Session = Depends(get_db),
    settings: ClinicSettings = Depends(get_clinic_settings),
):
    try:
        slots = AvailabilityEngine(db, settings).compute_availability(
            slot_date,
            dentist_id.strip(),
            service_id.strip(),
        )
    except SchedulingError as exc:
        raise to_http_exception(exc) from exc
    except SQLAlchemyError as exc:
        raise database_unavailable() from exc

    if available_only:
        return [slot for slot in slots if slot.is_available]
    return slots
