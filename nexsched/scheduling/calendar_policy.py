"""Clinic opening rules: weekly working hours plus holiday closures."""

from datetime import date, datetime, time

from pydantic import BaseModel, ConfigDict, field_validator, model_validator

DAYS_PER_WEEK = 7
DAY_NAMES = ('Sunday', 'Monday', 'Tuesday', 'Wednesday', 'Thursday', 'Friday', 'Saturday')


def day_of_week_index(day: date) -> int:
    """Weekday index with Sunday as 0 and Saturday as 6."""
    return day.isoweekday() % DAYS_PER_WEEK


class ClinicWorkingHours(BaseModel):
    model_config = ConfigDict(frozen=True)

    day_of_week: int
    is_open: bool
    start: time
    end: time

    @field_validator('day_of_week')
    @classmethod
    def validate_day_of_week(cls, value: int) -> int:
        if not 0 <= value < DAYS_PER_WEEK:
            raise ValueError('day_of_week must be between 0 (Sunday) and 6 (Saturday).')
        return value

    @model_validator(mode='after')
    def validate_open_range(self) -> 'ClinicWorkingHours':
        if self.is_open and self.start >= self.end:
            raise ValueError(f'{DAY_NAMES[self.day_of_week]} opens at {self.start} but closes at {self.end}.')
        return self


class ClinicSettings(BaseModel):
    model_config = ConfigDict(frozen=True)

    working_hours: tuple[ClinicWorkingHours, ...]
    slot_duration_minutes: int
    holidays: frozenset[date] = frozenset()

    @field_validator('slot_duration_minutes')
    @classmethod
    def validate_slot_duration(cls, value: int) -> int:
        if value <= 0:
            raise ValueError('slot_duration_minutes must be positive.')
        return value

    @field_validator('working_hours')
    @classmethod
    def validate_one_entry_per_weekday(
        cls,
        value: tuple[ClinicWorkingHours, ...],
    ) -> tuple[ClinicWorkingHours, ...]:
        days = sorted(entry.day_of_week for entry in value)
        if days != list(range(DAYS_PER_WEEK)):
            raise ValueError('working_hours needs exactly one entry for each weekday.')
        return tuple(sorted(value, key=lambda entry: entry.day_of_week))

    def hours_for(self, day: date) -> ClinicWorkingHours:
        return self.working_hours[day_of_week_index(day)]

    def is_holiday(self, day: date) -> bool:
        return day in self.holidays


class OpenInterval(BaseModel):
    """Half-open ``[start, end)`` operating window anchored to one date."""

    model_config = ConfigDict(frozen=True)

    start: datetime
    end: datetime

    @property
    def duration_minutes(self) -> int:
        return int((self.end - self.start).total_seconds() // 60)


def is_open_on(day: date, settings: ClinicSettings) -> OpenInterval | None:
    """Return the clinic's open interval for ``day``, or None when it is closed."""
    hours = settings.hours_for(day)
    if not hours.is_open or settings.is_holiday(day):
        return None

    return OpenInterval(
        start=datetime.combine(day, hours.start),
        end=datetime.combine(day, hours.end),
    )
