"""Utilization report built from the full appointment set."""

from collections import Counter
from collections.abc import Iterable

from pydantic import BaseModel

from nexsched.models.appointment import Appointment, AppointmentStatus
from nexsched.models.service import Service
from nexsched.scheduling.calendar_policy import DAY_NAMES, day_of_week_index


class ReportData(BaseModel):
    total_appointments: int
    no_show_rate: float
    attendance_rate: float
    appointments_by_service: dict[str, int]
    busiest_days: dict[str, int]


def _percentage(count: int, total: int) -> float:
    return (count / total) * 100 if total > 0 else 0.0


def build_report(appointments: Iterable[Appointment], services: Iterable[Service]) -> ReportData:
    """Counts by status, service and weekday.

    Rates are percentages of every appointment ever booked, cancelled ones
    included. Every catalog service appears in ``appointments_by_service``;
    ``busiest_days`` only lists weekdays that have appointments.
    """
    appointments = list(appointments)
    total = len(appointments)
    status_counts = Counter(appointment.status for appointment in appointments)
    service_counts = Counter(appointment.service_id for appointment in appointments)
    day_counts = Counter(DAY_NAMES[day_of_week_index(appointment.start_time.date())] for appointment in appointments)

    return ReportData(
        total_appointments=total,
        no_show_rate=_percentage(status_counts[AppointmentStatus.NO_SHOW], total),
        attendance_rate=_percentage(status_counts[AppointmentStatus.COMPLETED], total),
        appointments_by_service={service.name: service_counts[service.id] for service in services},
        busiest_days={day: day_counts[day] for day in DAY_NAMES if day_counts[day]},
    )
