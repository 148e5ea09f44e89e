import json

import pydantic

from nexsched.core import config
from nexsched.core.errors import ValidationError
from nexsched.scheduling.calendar_policy import ClinicSettings

DEFAULT_WORKING_HOURS = [
    {'day_of_week': 0, 'is_open': False, 'start': '09:00', 'end': '17:00'},
    {'day_of_week': 1, 'is_open': True, 'start': '09:00', 'end': '17:00'},
    {'day_of_week': 2, 'is_open': True, 'start': '09:00', 'end': '17:00'},
    {'day_of_week': 3, 'is_open': True, 'start': '09:00', 'end': '17:00'},
    {'day_of_week': 4, 'is_open': True, 'start': '09:00', 'end': '18:00'},
    {'day_of_week': 5, 'is_open': True, 'start': '09:00', 'end': '16:00'},
    {'day_of_week': 6, 'is_open': False, 'start': '09:00', 'end': '17:00'},
]


def build_clinic_settings(
    working_hours: list[dict] | None = None,
    slot_duration_minutes: int | str | None = None,
    holidays: list[str] | None = None,
) -> ClinicSettings:
    """Validate raw clinic configuration, raising ValidationError on bad input."""
    try:
        return ClinicSettings(
            working_hours=working_hours if working_hours is not None else DEFAULT_WORKING_HOURS,
            slot_duration_minutes=slot_duration_minutes if slot_duration_minutes is not None else 30,
            holidays=holidays or [],
        )
    except pydantic.ValidationError as exc:
        raise ValidationError(f'Invalid clinic settings: {exc}') from exc


def load_clinic_settings() -> ClinicSettings:
    working_hours = None
    if config.CLINIC_WORKING_HOURS:
        try:
            working_hours = json.loads(config.CLINIC_WORKING_HOURS)
        except json.JSONDecodeError as exc:
            raise ValidationError('CLINIC_WORKING_HOURS must be a JSON list.') from exc

    return build_clinic_settings(
        working_hours=working_hours,
        slot_duration_minutes=config.CLINIC_SLOT_DURATION_MINUTES,
        holidays=config.CLINIC_HOLIDAYS,
    )
