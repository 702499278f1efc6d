"""Lab report uploads.

Uploaded files are checked against ``UPLOAD_MAX_MB`` and
``ALLOWED_UPLOAD_TYPES`` before anything is stored.  New reports start
as ``pending`` until a clinician reviews them.
"""
from __future__ import annotations

import datetime
import logging
from typing import Any

from django.conf import settings
from django.db import transaction

from care.filters import RecordFilter, as_day, field_value
from care.models import LabReport
from care.repositories import ModelRepository, RecordRepository

logger = logging.getLogger(__name__)

SEARCH_FIELDS = ('name', 'type', 'doctor', 'hospital')
REPORT_TYPES = [
    'Blood Analysis',
    'Cardiology',
    'Radiology',
    'Laboratory',
    'Pathology',
    'Microbiology',
    'Biochemistry',
    'Hematology',
]


def lab_report_repository(user) -> ModelRepository:
    return ModelRepository(LabReport, owner=user)


def lab_report_filter(*, q: str = '', status: Any = None, type: Any = None) -> RecordFilter:
    return RecordFilter(query=q, text_fields=SEARCH_FIELDS, selectors={'status': status, 'type': type})


def format_size(num_bytes: int) -> str:
    return f"{(num_bytes or 0) / 1024 / 1024:.1f} MB"


def check_upload(f) -> list[str]:
    """Return the reasons ``f`` cannot be accepted (empty when it can)."""
    errors = []
    size_mb = (f.size or 0) / (1024 * 1024)
    if size_mb > settings.UPLOAD_MAX_MB:
        errors.append(f'File is larger than {settings.UPLOAD_MAX_MB} MB')
    ctype = getattr(f, 'content_type', '') or ''
    if not any(ctype.startswith(prefix) for prefix in settings.ALLOWED_UPLOAD_TYPES):
        errors.append('Unsupported file type')
    return errors


@transaction.atomic
def upload_lab_report(repo: RecordRepository, *, file, name: str, type: str,
                      hospital: str = '', doctor: str = '', description: str = ''):
    record = repo.add(
        name=name,
        type=type,
        date=datetime.date.today(),
        hospital=hospital,
        doctor=doctor,
        description=description,
        status='pending',
        file=file,
        file_name=getattr(file, 'name', '') or '',
        size=format_size(getattr(file, 'size', 0)),
    )
    logger.info("Lab report %s uploaded (%s)", field_value(record, 'id'), field_value(record, 'size'))
    return record


def summarize(records: list[Any]) -> dict:
    return {
        'total': len(records),
        **{s: sum(1 for r in records if field_value(r, 'status') == s) for s in ('normal', 'abnormal', 'pending')},
    }


def delete_lab_report(repo: RecordRepository, record) -> None:
    stored = field_value(record, 'file')
    repo.remove(record)
    # remove the stored file once the row is gone
    if stored and hasattr(stored, 'delete'):
        stored.delete(save=False)


def serialize_lab_report(record, request=None) -> dict:
    stored = field_value(record, 'file')
    url = None
    if stored and getattr(stored, 'name', None):
        url = stored.url
        if request is not None:
            url = request.build_absolute_uri(url)
    return {
        'id': field_value(record, 'id'),
        'name': field_value(record, 'name'),
        'type': field_value(record, 'type'),
        'date': as_day(field_value(record, 'date')),
        'hospital': field_value(record, 'hospital') or '',
        'doctor': field_value(record, 'doctor') or '',
        'status': field_value(record, 'status'),
        'file': field_value(record, 'file_name') or '',
        'fileUrl': url,
        'size': field_value(record, 'size') or '',
        'description': field_value(record, 'description') or '',
    }
