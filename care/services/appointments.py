"""Appointment booking, cancellation and calendar lookups."""
from __future__ import annotations

import calendar
import datetime
import logging
from typing import Any, Optional

from care.exceptions import ConflictError
from care.filters import RecordFilter, as_day, field_value
from care.models import Appointment, Hospital
from care.repositories import ModelRepository, RecordRepository

logger = logging.getLogger(__name__)

SEARCH_FIELDS = ('doctor', 'specialty', 'hospital')
DEFAULT_HOSPITAL = 'Selected Hospital'


def appointment_repository(user) -> ModelRepository:
    return ModelRepository(Appointment, owner=user)


def appointment_filter(*, q: str = '', status: Any = None, date: Any = None) -> RecordFilter:
    return RecordFilter(query=q, text_fields=SEARCH_FIELDS, selectors={'status': status}, date=date)


def book_appointment(repo: RecordRepository, *, doctor: str, specialty: str, date, time: str,
                     notes: str = '', hospital: Optional[Hospital] = None):
    """Create an upcoming appointment at the front of the user's list.

    The hospital picked on the search page supplies the name and
    street address; without one the booking is recorded against a placeholder.
    """
    record = repo.add(
        doctor=doctor,
        specialty=specialty,
        hospital=hospital.name if hospital else DEFAULT_HOSPITAL,
        location=_hospital_location(hospital),
        date=date,
        time=time,
        notes=notes,
        status=Appointment.STATUS_UPCOMING,
    )
    logger.info("Appointment %s booked with %s on %s", field_value(record, 'id'), doctor, as_day(date))
    return record


def _hospital_location(hospital: Optional[Hospital]) -> str:
    return hospital.address if hospital else ''


def cancel_appointment(repo: RecordRepository, record) -> tuple[Any, bool]:
    """Cancel an upcoming appointment.

    Returns ``(record, changed)``.  Cancelling an already cancelled
    appointment is a no-op; a completed one cannot be cancelled.
    """
    current = field_value(record, 'status')
    if current == Appointment.STATUS_CANCELLED:
        return record, False
    if current == Appointment.STATUS_COMPLETED:
        raise ConflictError('Completed appointments cannot be cancelled')
    record = repo.update(record, status=Appointment.STATUS_CANCELLED)
    logger.info("Appointment %s cancelled", field_value(record, 'id'))
    return record, True


def appointments_on(repo: RecordRepository, day) -> list[Any]:
    return repo.list(appointment_filter(date=day))


def appointment_days(repo: RecordRepository, year: int, month: int) -> dict[str, list[str]]:
    """Map each day of the month that has appointments to its statuses.

    Used for calendar tile markers; statuses are listed once each in
    the order they are first seen.
    """
    first = datetime.date(year, month, 1)
    last = datetime.date(year, month, calendar.monthrange(year, month)[1])
    days: dict[str, list[str]] = {}
    for record in repo.list():
        day = as_day(field_value(record, 'date'))
        if day is None or not (first.isoformat() <= day <= last.isoformat()):
            continue
        statuses = days.setdefault(day, [])
        status = field_value(record, 'status')
        if status not in statuses:
            statuses.append(status)
    return dict(sorted(days.items()))


def serialize_appointment(record) -> dict:
    return {
        'id': field_value(record, 'id'),
        'doctor': field_value(record, 'doctor'),
        'specialty': field_value(record, 'specialty'),
        'hospital': field_value(record, 'hospital'),
        'location': field_value(record, 'location') or '',
        'date': as_day(field_value(record, 'date')),
        'time': field_value(record, 'time'),
        'status': field_value(record, 'status'),
        'notes': field_value(record, 'notes') or '',
    }
