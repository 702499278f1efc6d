"""
Lab report views.

Uploads arrive as multipart forms.  The file is checked for size and
type before the report is stored; the new report is listed first and
stays ``pending`` until reviewed.
"""
from __future__ import annotations

from rest_framework import status
from rest_framework.decorators import api_view, parser_classes, permission_classes, throttle_classes
from rest_framework.parsers import FormParser, MultiPartParser
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.throttling import ScopedRateThrottle

from care.filters import is_wildcard, list_payload, paginate
from care.repositories import get_or_404
from care.serializers.records import LabReportListQuerySerializer, LabReportUploadSerializer
from care.services.audit import try_log_action
from care.services.lab_reports import (
    REPORT_TYPES,
    delete_lab_report,
    lab_report_filter,
    lab_report_repository,
    serialize_lab_report,
    summarize,
    upload_lab_report,
)
from care.services.sharing import download_payload, lab_report_message, share_payload


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def list_lab_reports(request):
    q = LabReportListQuerySerializer(data=request.query_params)
    q.is_valid(raise_exception=True)
    vd = q.validated_data
    repo = lab_report_repository(request.user)
    records = repo.list(
        lab_report_filter(q=vd['q'], status=vd['status'], type=vd['type'])
    )
    items, pagination = paginate(records, vd.get('page'), vd.get('pageSize'))
    searching = bool(vd['q'] or vd['status'] != 'all' or not is_wildcard(vd['type']))
    payload = list_payload([serialize_lab_report(r, request) for r in items], pagination,
                           noun='lab reports', searching=searching)
    payload['types'] = REPORT_TYPES
    payload['summary'] = summarize(repo.list())
    return Response(payload)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
@parser_classes([MultiPartParser, FormParser])
@throttle_classes([ScopedRateThrottle])
def upload(request):
    s = LabReportUploadSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    vd = s.validated_data
    report = upload_lab_report(
        lab_report_repository(request.user),
        file=vd['file'],
        name=vd['name'],
        type=vd['type'],
        hospital=vd['hospital'],
        doctor=vd['doctor'],
        description=vd['description'],
    )
    try_log_action(user=request.user, action='lab_report_upload', object_type='lab_report', object_id=report.id,
                   detail={'size': report.size})
    return Response({'ok': True, 'message': 'Report uploaded successfully!',
                     'data': serialize_lab_report(report, request)}, status=status.HTTP_201_CREATED)

upload.cls.throttle_scope = 'upload'


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def delete(request, pk: int):
    repo = lab_report_repository(request.user)
    report = get_or_404(repo, pk, 'lab report')
    report_id = report.id
    delete_lab_report(repo, report)
    try_log_action(user=request.user, action='lab_report_delete', object_type='lab_report', object_id=report_id)
    return Response({'ok': True, 'id': report_id, 'message': 'Report deleted successfully'})


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def share_lab_report(request, pk: int):
    report = get_or_404(lab_report_repository(request.user), pk, 'lab report')
    return Response(share_payload(lab_report_message(report)))


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def download_lab_report(request, pk: int):
    report = get_or_404(lab_report_repository(request.user), pk, 'lab report')
    data = serialize_lab_report(report, request)
    return Response(download_payload(f"Downloading {report.name}...", data['fileUrl']))
