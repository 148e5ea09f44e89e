from datetime import datetime, timedelta

from nexsched.core.errors import ValidationError
from nexsched.scheduling.calendar_policy import OpenInterval


def generate_slots(
    open_interval: OpenInterval,
    slot_duration_minutes: int,
    service_duration_minutes: int,
) -> list[datetime]:
    """Candidate start times, one every ``slot_duration_minutes``.

    Generation stops at the first start whose service would run past
    ``open_interval.end``.
    """
    if slot_duration_minutes <= 0:
        raise ValidationError('Slot duration must be a positive number of minutes.')
    if service_duration_minutes <= 0:
        raise ValidationError('Service duration must be a positive number of minutes.')

    step = timedelta(minutes=slot_duration_minutes)
    service_duration = timedelta(minutes=service_duration_minutes)

    candidates: list[datetime] = []
    current = open_interval.start

    while current + service_duration <= open_interval.end:
        candidates.append(current)
        current += step

    return candidates
