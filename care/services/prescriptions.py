from __future__ import annotations

import datetime
from typing import Any

from care.filters import RecordFilter, as_day, field_value
from care.models import Prescription
from care.repositories import ModelRepository, RecordRepository

SEARCH_FIELDS = ('doctor_name', 'specialty')


def prescription_repository(user) -> ModelRepository:
    return ModelRepository(Prescription, owner=user)


def prescription_filter(*, q: str = '', status: Any = None, specialty: Any = None) -> RecordFilter:
    # ``status`` is the active tab, ``specialty`` the drop-down
    return RecordFilter(query=q, text_fields=SEARCH_FIELDS,
                        selectors={'status': status, 'specialty': specialty})


def add_prescription(repo: RecordRepository, *, medications: list[dict], **fields):
    meds = [
        {
            'name': m['name'],
            'dosage': m['dosage'],
            'frequency': m.get('frequency', ''),
            'duration': m.get('duration', ''),
        }
        for m in medications
    ]
    fields.setdefault('status', 'active')
    return repo.add(medications=meds, **fields)


def summarize(records: list[Any], *, today: datetime.date | None = None) -> dict:
    """Active, completed and this-month counters above the prescription list."""
    this_month = (today or datetime.date.today()).strftime('%Y-%m')
    return {
        'total': len(records),
        'active': sum(1 for r in records if field_value(r, 'status') == 'active'),
        'completed': sum(1 for r in records if field_value(r, 'status') == 'completed'),
        'thisMonth': sum(1 for r in records if (as_day(field_value(r, 'date')) or '').startswith(this_month)),
    }


def serialize_prescription(record) -> dict:
    return {
        'id': field_value(record, 'id'),
        'doctorName': field_value(record, 'doctor_name'),
        'specialty': field_value(record, 'specialty'),
        'hospital': field_value(record, 'hospital') or '',
        'date': as_day(field_value(record, 'date')),
        'medications': list(field_value(record, 'medications') or []),
        'instructions': field_value(record, 'instructions') or '',
        'status': field_value(record, 'status'),
    }
