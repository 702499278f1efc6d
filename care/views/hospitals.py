"""
Hospital search endpoints.

``GET /api/hospitals`` applies the search box (name or city), the
specialty/state/type drop-downs and the active tab.  The all/available/
unavailable counters follow the search and drop-downs and are cached per
combination; the liked/interested counters are per user and always
computed.
"""
from __future__ import annotations

from django.conf import settings
from django.core.cache import cache
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from care.filters import paginate
from care.models import HospitalMark
from care.repositories import get_or_404
from care.serializers.records import HospitalSearchQuerySerializer
from care.services.audit import try_log_action
from care.services.hospitals import (
    CARD_TYPES,
    SPECIALTIES,
    STATES,
    TABS,
    catalogue_counts,
    filtered_hospitals,
    hospital_repository,
    mark_counts,
    marked_ids,
    search_hospitals,
    serialize_hospital,
    toggle_mark,
)


def _counts(user, vd: dict) -> dict:
    """Tab counters; the catalogue part is cached per search and drop-down combination."""
    ck = (f"hospitals:counts:q={(vd['q'] or '').strip().lower()}:s={vd['specialty'] or ''}"
          f":st={vd['state'] or ''}:t={vd['cardType'] or ''}")
    cached = cache.get(ck)
    if cached is None:
        cached = catalogue_counts(filtered_hospitals(
            q=vd['q'], specialty=vd['specialty'], state=vd['state'], card_type=vd['cardType'],
        ))
        cache.set(ck, cached, settings.PORTAL_CACHE_SECONDS)
    return {**cached, **mark_counts(user)}


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def list_hospitals(request):
    q = HospitalSearchQuerySerializer(data=request.query_params)
    q.is_valid(raise_exception=True)
    vd = q.validated_data
    hospitals = search_hospitals(
        request.user,
        q=vd['q'],
        specialty=vd['specialty'],
        state=vd['state'],
        card_type=vd['cardType'],
        tab=vd['tab'],
    )
    items, pagination = paginate(hospitals, vd.get('page'), vd.get('pageSize'))
    liked = marked_ids(request.user, HospitalMark.LIKED)
    interested = marked_ids(request.user, HospitalMark.INTERESTED)
    payload = {
        'ok': True,
        'data': [serialize_hospital(h, liked=liked, interested=interested) for h in items],
        'pagination': pagination,
        'tabs': _counts(request.user, vd),
        'filters': {
            'specialties': SPECIALTIES,
            'states': STATES,
            'cardTypes': CARD_TYPES,
            'tabs': list(TABS),
        },
    }
    if not pagination['total']:
        payload['empty'] = True
        payload['message'] = 'No hospitals found'
        payload['hint'] = 'Try adjusting your search or filters.'
    return Response(payload)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def hospital_detail(request, pk: int):
    hospital = get_or_404(hospital_repository(), pk, 'hospital')
    return Response({'ok': True, 'data': serialize_hospital(
        hospital,
        liked=marked_ids(request.user, HospitalMark.LIKED),
        interested=marked_ids(request.user, HospitalMark.INTERESTED),
    )})


def _toggle(request, pk: int, kind: str, on_message: str, off_message: str):
    hospital = get_or_404(hospital_repository(), pk, 'hospital')
    marked = toggle_mark(request.user, hospital, kind)
    try_log_action(user=request.user, action=f'hospital_{kind}', object_type='hospital', object_id=hospital.id,
                   detail={'marked': marked})
    return Response({'ok': True, kind: marked, 'message': on_message if marked else off_message})


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def like_hospital(request, pk: int):
    return _toggle(request, pk, HospitalMark.LIKED, 'Added to liked hospitals', 'Removed from liked hospitals')


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def mark_interested(request, pk: int):
    return _toggle(request, pk, HospitalMark.INTERESTED,
                   'Marked as interested', 'Removed from interested hospitals')
