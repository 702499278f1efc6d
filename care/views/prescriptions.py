from __future__ import annotations

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from care.filters import is_wildcard, list_payload, paginate
from care.repositories import get_or_404
from care.serializers.records import PrescriptionCreateSerializer, PrescriptionListQuerySerializer
from care.services.audit import try_log_action
from care.services.prescriptions import (
    add_prescription,
    prescription_filter,
    prescription_repository,
    serialize_prescription,
    summarize,
)
from care.services.sharing import download_payload, prescription_message, share_payload


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def list_prescriptions(request):
    """``status`` is the active tab; ``specialty`` the drop-down.

    The summary counters cover every prescription, whatever the filters.
    """
    q = PrescriptionListQuerySerializer(data=request.query_params)
    q.is_valid(raise_exception=True)
    vd = q.validated_data
    repo = prescription_repository(request.user)
    records = repo.list(
        prescription_filter(q=vd['q'], status=vd['status'], specialty=vd['specialty'])
    )
    items, pagination = paginate(records, vd.get('page'), vd.get('pageSize'))
    searching = bool(vd['q'] or vd['status'] != 'all' or not is_wildcard(vd['specialty']))
    payload = list_payload([serialize_prescription(p) for p in items], pagination,
                           noun='prescriptions', searching=searching)
    payload['summary'] = summarize(repo.list())
    return Response(payload)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def create_prescription(request):
    s = PrescriptionCreateSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    vd = s.validated_data
    record = add_prescription(
        prescription_repository(request.user),
        medications=vd['medications'],
        doctor_name=vd['doctorName'],
        specialty=vd['specialty'],
        hospital=vd.get('hospital') or '',
        date=vd['date'],
        instructions=vd['instructions'],
        status=vd['status'],
    )
    try_log_action(user=request.user, action='prescription_create', object_type='prescription',
                   object_id=record.id)
    return Response({'ok': True, 'message': 'Prescription added', 'data': serialize_prescription(record)},
                    status=status.HTTP_201_CREATED)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def share_prescription(request, pk: int):
    record = get_or_404(prescription_repository(request.user), pk, 'prescription')
    return Response(share_payload(prescription_message(record), 'Sharing prescription...'))


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def download_prescription(request, pk: int):
    get_or_404(prescription_repository(request.user), pk, 'prescription')
    return Response(download_payload('Downloading prescription...'))
