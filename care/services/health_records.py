"""Vital-sign style health records and their summary counters."""
from __future__ import annotations

import datetime
from typing import Any

from care.filters import RecordFilter, as_day, field_value
from care.models import HealthRecord
from care.repositories import ModelRepository, RecordRepository

SEARCH_FIELDS = ('type',)


def health_record_repository(user) -> ModelRepository:
    return ModelRepository(HealthRecord, owner=user)


def health_record_filter(*, q: str = '', status: Any = None) -> RecordFilter:
    return RecordFilter(query=q, text_fields=SEARCH_FIELDS, selectors={'status': status})


def add_health_record(repo: RecordRepository, **fields):
    fields.setdefault('date', datetime.date.today())
    fields.setdefault('status', 'normal')
    fields.setdefault('trend', 'stable')
    return repo.add(**fields)


def summarize(records: list[Any], *, today: datetime.date | None = None) -> dict:
    """Counters shown above the health record list."""
    today = today or datetime.date.today()
    this_month = today.strftime('%Y-%m')
    return {
        'total': len(records),
        'normal': sum(1 for r in records if field_value(r, 'status') == 'normal'),
        'thisMonth': sum(1 for r in records if (as_day(field_value(r, 'date')) or '').startswith(this_month)),
        'improving': sum(1 for r in records if field_value(r, 'trend') == 'improving'),
    }


def serialize_health_record(record) -> dict:
    return {
        'id': field_value(record, 'id'),
        'type': field_value(record, 'type'),
        'value': field_value(record, 'value'),
        'unit': field_value(record, 'unit') or '',
        'date': as_day(field_value(record, 'date')),
        'status': field_value(record, 'status'),
        'trend': field_value(record, 'trend'),
        'notes': field_value(record, 'notes') or '',
    }
