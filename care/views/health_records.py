from __future__ import annotations

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from care.filters import list_payload, paginate
from care.repositories import get_or_404
from care.serializers.records import HealthRecordCreateSerializer, HealthRecordListQuerySerializer
from care.services.audit import try_log_action
from care.services.health_records import (
    add_health_record,
    health_record_filter,
    health_record_repository,
    serialize_health_record,
    summarize,
)
from care.services.sharing import download_payload, health_record_message, share_payload


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def list_health_records(request):
    """Filtered records plus the summary counters over all of the user's records."""
    q = HealthRecordListQuerySerializer(data=request.query_params)
    q.is_valid(raise_exception=True)
    vd = q.validated_data
    repo = health_record_repository(request.user)
    records = repo.list(health_record_filter(q=vd['q'], status=vd['status']))
    items, pagination = paginate(records, vd.get('page'), vd.get('pageSize'))
    payload = list_payload([serialize_health_record(r) for r in items], pagination,
                           noun='health records', searching=bool(vd['q'] or vd['status'] != 'all'))
    payload['summary'] = summarize(repo.list())
    return Response(payload)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def create_health_record(request):
    s = HealthRecordCreateSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    fields = {k: v for k, v in s.validated_data.items() if v is not None}
    record = add_health_record(health_record_repository(request.user), **fields)
    try_log_action(user=request.user, action='health_record_create', object_type='health_record',
                   object_id=record.id)
    return Response({'ok': True, 'message': 'Health record added', 'data': serialize_health_record(record)},
                    status=status.HTTP_201_CREATED)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def share_health_record(request, pk: int):
    record = get_or_404(health_record_repository(request.user), pk, 'health record')
    return Response(share_payload(health_record_message(record), 'Sharing health record...'))


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def download_health_record(request, pk: int):
    get_or_404(health_record_repository(request.user), pk, 'health record')
    return Response(download_payload('Downloading health record...'))
