from __future__ import annotations

from care.models import Appointment, HealthRecord, LabReport, Prescription
from care.services.appointments import serialize_appointment

QUICK_ACTIONS = [
    {'title': 'Book Appointment', 'route': '/hospitals'},
    {'title': 'View Records', 'route': '/health-records'},
    {'title': 'Prescriptions', 'route': '/prescriptions'},
    {'title': 'Lab Reports', 'route': '/lab-reports'},
]

RECENT_APPOINTMENTS = 3


def dashboard_stats(user) -> dict:
    appts = Appointment.objects.filter(user=user)
    return {
        'totalAppointments': appts.count(),
        'upcomingAppointments': appts.filter(status=Appointment.STATUS_UPCOMING).count(),
        'completedAppointments': appts.filter(status=Appointment.STATUS_COMPLETED).count(),
        'totalPrescriptions': Prescription.objects.filter(user=user).count(),
        'totalLabReports': LabReport.objects.filter(user=user).count(),
    }


def profile_stats(user) -> dict:
    return {
        'appointments': Appointment.objects.filter(user=user).count(),
        'prescriptions': Prescription.objects.filter(user=user).count(),
        'labReports': LabReport.objects.filter(user=user).count(),
        'healthRecords': HealthRecord.objects.filter(user=user).count(),
    }


def dashboard_payload(user) -> dict:
    recent = Appointment.objects.filter(user=user).order_by('-created_at', '-id')[:RECENT_APPOINTMENTS]
    return {
        'ok': True,
        'stats': dashboard_stats(user),
        'recentAppointments': [serialize_appointment(a) for a in recent],
        'quickActions': QUICK_ACTIONS,
    }
