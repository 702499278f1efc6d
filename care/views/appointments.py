"""
Appointment views.

The list supports the search box, the status selector and the
calendar's day filter together; every condition must hold.  Booking
runs the modal form's validation and puts the new appointment at the
top of the list.  Cancelling is idempotent.
"""
from __future__ import annotations

from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework import status

from care.filters import list_payload, paginate
from care.repositories import get_or_404
from care.serializers.records import (
    AppointmentCalendarQuerySerializer,
    AppointmentCreateSerializer,
    AppointmentListQuerySerializer,
)
from care.services.appointments import (
    appointment_days,
    appointment_filter,
    appointment_repository,
    book_appointment,
    cancel_appointment,
    serialize_appointment,
)
from care.services.audit import try_log_action


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def list_appointments(request):
    """Query params: ``q``, ``status`` (or ``all``), ``date`` (YYYY-MM-DD), ``page``, ``pageSize``."""
    q = AppointmentListQuerySerializer(data=request.query_params)
    q.is_valid(raise_exception=True)
    vd = q.validated_data
    repo = appointment_repository(request.user)
    records = repo.list(appointment_filter(q=vd['q'], status=vd['status'], date=vd.get('date')))
    items, pagination = paginate(records, vd.get('page'), vd.get('pageSize'))
    return Response(list_payload(
        [serialize_appointment(a) for a in items], pagination,
        noun='appointments', searching=bool(vd['q'] or vd['status'] != 'all' or vd.get('date')),
    ))


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def appointment_calendar(request):
    """Days of ``month`` (YYYY-MM) that carry appointments, with their statuses."""
    q = AppointmentCalendarQuerySerializer(data=request.query_params)
    q.is_valid(raise_exception=True)
    year, month = (int(part) for part in q.validated_data['month'].split('-'))
    days = appointment_days(appointment_repository(request.user), year, month)
    return Response({'ok': True, 'month': q.validated_data['month'], 'days': days})


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def book(request):
    s = AppointmentCreateSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    vd = s.validated_data
    appt = book_appointment(
        appointment_repository(request.user),
        doctor=vd['doctor'],
        specialty=vd['specialty'],
        date=vd['date'],
        time=vd['time'],
        notes=vd['notes'],
        hospital=vd.get('hospitalId'),
    )
    try_log_action(user=request.user, action='appointment_book', object_type='appointment', object_id=appt.id)
    return Response({'ok': True, 'message': 'Appointment booked successfully!', 'data': serialize_appointment(appt)},
                    status=status.HTTP_201_CREATED)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def cancel(request, pk: int):
    repo = appointment_repository(request.user)
    appt = get_or_404(repo, pk, 'appointment')
    appt, changed = cancel_appointment(repo, appt)
    if changed:
        try_log_action(user=request.user, action='appointment_cancel', object_type='appointment', object_id=appt.id)
    return Response({'ok': True, 'changed': changed, 'message': 'Appointment cancelled',
                     'data': serialize_appointment(appt)})
