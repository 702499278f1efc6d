"""
Search and filter predicates shared by every portal list.

A :class:`RecordFilter` combines three kinds of predicate, all of which
must hold for a record to be kept:

* a free-text query matched case-insensitively as a substring of any of
  the configured text fields;
* exact-match selectors (``status``, ``specialty`` ...), each of which is
  skipped when its value is a wildcard such as ``"all"``;
* an optional calendar day compared with a date field.

The same filter can be applied to plain Python sequences (records as
dicts or objects) or translated into an ORM query, so list views give
identical results whichever repository backs them.
"""
from __future__ import annotations

import datetime
from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping, Optional, Sequence

from django.db.models import Q, QuerySet

ALL = 'all'


def is_wildcard(value: Any) -> bool:
    """True for selector values that mean "do not filter on this field".

    Accepts ``None``, the empty string, ``"all"`` in any case and the
    drop-down labels the front-end uses ("All Specialties", "All States",
    "All Types").
    """
    if value is None:
        return True
    text = str(value).strip()
    if not text:
        return True
    lowered = text.lower()
    return lowered == ALL or lowered.startswith('all ')


def field_value(record: Any, name: str) -> Any:
    if isinstance(record, Mapping):
        return record.get(name)
    return getattr(record, name, None)


def as_day(value: Any) -> Optional[str]:
    """Normalise a date, datetime or ``YYYY-MM-DD...`` string to ``YYYY-MM-DD``."""
    if value is None or value == '':
        return None
    if isinstance(value, datetime.datetime):
        return value.date().isoformat()
    if isinstance(value, datetime.date):
        return value.isoformat()
    return str(value)[:10]


@dataclass(frozen=True)
class RecordFilter:
    query: str = ''
    text_fields: Sequence[str] = ()
    selectors: Mapping[str, Any] = field(default_factory=dict)
    date_field: str = 'date'
    date: Any = None

    @property
    def needle(self) -> str:
        return (self.query or '').strip().lower()

    @property
    def active_selectors(self) -> dict[str, Any]:
        return {k: v for k, v in self.selectors.items() if not is_wildcard(v)}

    @property
    def day(self) -> Optional[str]:
        return as_day(self.date)

    def matches(self, record: Any) -> bool:
        needle = self.needle
        if needle and self.text_fields:
            if not any(needle in str(field_value(record, f) or '').lower() for f in self.text_fields):
                return False
        for name, wanted in self.active_selectors.items():
            if field_value(record, name) != wanted:
                return False
        day = self.day
        if day is not None and as_day(field_value(record, self.date_field)) != day:
            return False
        return True

    def apply(self, records: Iterable[Any]) -> list[Any]:
        """Return the matching records as a new list, in source order."""
        return [r for r in records if self.matches(r)]

    def apply_queryset(self, qs: QuerySet) -> QuerySet:
        needle = self.needle
        if needle and self.text_fields:
            cond = Q()
            for f in self.text_fields:
                cond |= Q(**{f'{f}__icontains': needle})
            qs = qs.filter(cond)
        active = self.active_selectors
        if active:
            qs = qs.filter(**active)
        day = self.day
        if day is not None:
            qs = qs.filter(**{self.date_field: day})
        return qs


def paginate(items: Sequence[Any] | QuerySet, page: Optional[int],
             page_size: Optional[int]) -> tuple[list[Any], dict]:
    """Slice one page out of ``items``; querysets are sliced before they are fetched."""
    total = items.count() if isinstance(items, QuerySet) else len(items)
    if page and page_size:
        start = (page - 1) * page_size
        items = items[start:start + page_size]
    return list(items), {'total': total, 'page': page or 1, 'pageSize': page_size or total}


def list_payload(items: list[dict], pagination: dict, *, noun: str, searching: bool) -> dict:
    """Wrap a filtered list for the client, flagging the empty state.

    The empty state follows the filtered total, so a page past the end
    of a non-empty list is not reported as an empty list.
    """
    payload: dict[str, Any] = {'ok': True, 'data': items, 'pagination': pagination}
    if not pagination['total']:
        payload['empty'] = True
        payload['message'] = f'No {noun} found'
        payload['hint'] = (
            'Try adjusting your search terms.' if searching
            else f'Add your first {noun.rstrip("s")} to get started.'
        )
    return payload
