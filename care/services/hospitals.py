"""Hospital search with drop-down filters, tabs and per-user marks."""
from __future__ import annotations

from typing import Any, Optional

from django.db import IntegrityError, transaction
from django.db.models import QuerySet

from care.filters import RecordFilter, is_wildcard
from care.models import Hospital, HospitalMark
from care.repositories import ModelRepository

SEARCH_FIELDS = ('name', 'city')
TABS = ('all', 'available', 'unavailable', HospitalMark.LIKED, HospitalMark.INTERESTED)

SPECIALTIES = ['All Specialties', 'Cardiology', 'Neurology', 'Orthopedics', 'Dermatology',
               'Oncology', 'Pediatrics', 'Multi-Specialty']
STATES = ['All States', 'New York', 'California', 'Texas', 'Florida', 'Illinois', 'Pennsylvania']
CARD_TYPES = ['All Types', 'General', 'Specialized', 'Emergency', 'Rehabilitation']


def hospital_repository() -> ModelRepository:
    return ModelRepository(Hospital, owner=None)


def hospital_filter(*, q: str = '', specialty: Any = None, state: Any = None,
                    card_type: Any = None) -> RecordFilter:
    return RecordFilter(
        query=q,
        text_fields=SEARCH_FIELDS,
        selectors={
            'specialty': specialty,
            'state': state,
            'card_type': card_type,
        },
    )


def marked_ids(user, kind: str) -> set[int]:
    return set(HospitalMark.objects.filter(user=user, kind=kind).values_list('hospital_id', flat=True))


def filtered_hospitals(*, q: str = '', specialty: Any = None, state: Any = None,
                       card_type: Any = None) -> QuerySet:
    """The catalogue after the search box and the three drop-downs."""
    flt = hospital_filter(q=q, specialty=specialty, state=state, card_type=card_type)
    return flt.apply_queryset(hospital_repository().queryset())


def search_hospitals(user, *, q: str = '', specialty: Any = None, state: Any = None,
                     card_type: Any = None, tab: Optional[str] = None) -> QuerySet:
    """Apply the search box, the three drop-downs and the active tab."""
    qs = filtered_hospitals(q=q, specialty=specialty, state=state, card_type=card_type)
    tab = None if is_wildcard(tab) else tab
    if tab in (Hospital.AVAILABLE, Hospital.UNAVAILABLE):
        qs = qs.filter(availability=tab)
    elif tab in (HospitalMark.LIKED, HospitalMark.INTERESTED):
        qs = qs.filter(marks__user=user, marks__kind=tab).distinct()
    return qs


def catalogue_counts(filtered: QuerySet) -> dict[str, int]:
    """All/available/unavailable counters over the filtered catalogue."""
    return {
        'all': filtered.count(),
        'available': filtered.filter(availability=Hospital.AVAILABLE).count(),
        'unavailable': filtered.filter(availability=Hospital.UNAVAILABLE).count(),
    }


def mark_counts(user) -> dict[str, int]:
    """Liked/interested counters; these ignore the search."""
    return {
        'liked': HospitalMark.objects.filter(user=user, kind=HospitalMark.LIKED).count(),
        'interested': HospitalMark.objects.filter(user=user, kind=HospitalMark.INTERESTED).count(),
    }


def toggle_mark(user, hospital: Hospital, kind: str) -> bool:
    """Flip ``kind`` for ``hospital``; return True when it is now set."""
    with transaction.atomic():
        deleted, _ = HospitalMark.objects.filter(user=user, hospital=hospital, kind=kind).delete()
        if deleted:
            return False
        try:
            with transaction.atomic():
                HospitalMark.objects.create(user=user, hospital=hospital, kind=kind)
        except IntegrityError:
            # a concurrent request set it first
            pass
    return True


def serialize_hospital(h: Hospital, *, liked: set[int] | None = None, interested: set[int] | None = None) -> dict:
    return {
        'id': h.id,
        'name': h.name,
        'specialty': h.specialty,
        'state': h.state,
        'city': h.city,
        'address': h.address,
        'rating': float(h.rating),
        'reviews': h.reviews,
        'availability': h.availability,
        'cardType': h.card_type,
        'phone': h.phone,
        'email': h.email,
        'website': h.website,
        'coordinates': {'lat': h.latitude, 'lng': h.longitude},
        'description': h.description,
        'facilities': list(h.facilities or []),
        'doctors': list(h.doctors or []),
        'liked': h.id in (liked or set()),
        'interested': h.id in (interested or set()),
    }
