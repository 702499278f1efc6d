"""
Patient dashboard endpoint.

Returns the appointment and record counters shown on the home screen,
the three most recently booked appointments and the quick actions.
"""
from __future__ import annotations

from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from care.services.accounts import serialize_user
from care.services.dashboard import dashboard_payload


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def dashboard(request):
    payload = dashboard_payload(request.user)
    payload['user'] = serialize_user(request.user)
    return Response(payload)
