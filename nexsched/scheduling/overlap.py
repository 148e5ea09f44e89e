"""Interval conflict checks shared by the availability engine and booking.

Every interval is half-open, ``[start, end)``: an appointment ending at 10:00
does not conflict with one starting at 10:00.
"""

from collections.abc import Iterable
from datetime import datetime
from typing import Protocol, TypeVar


class BookedInterval(Protocol):
    start_time: datetime
    end_time: datetime


BookedT = TypeVar('BookedT', bound=BookedInterval)


def intervals_overlap(
    first_start: datetime,
    first_end: datetime,
    second_start: datetime,
    second_end: datetime,
) -> bool:
    return first_start < second_end and second_start < first_end


def find_conflicts(
    candidate_start: datetime,
    candidate_end: datetime,
    existing_appointments: Iterable[BookedT],
) -> list[BookedT]:
    return [
        appointment
        for appointment in existing_appointments
        if intervals_overlap(candidate_start, candidate_end, appointment.start_time, appointment.end_time)
    ]


def is_slot_booked(
    candidate_start: datetime,
    candidate_end: datetime,
    existing_appointments: Iterable[BookedInterval],
) -> bool:
    """True when any of ``existing_appointments`` overlaps the candidate.

    Callers pass only scheduled appointments for the same dentist and day;
    cancelled, completed and no-show visits never block a slot.
    """
    return any(
        intervals_overlap(candidate_start, candidate_end, appointment.start_time, appointment.end_time)
        for appointment in existing_appointments
    )
