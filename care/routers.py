"""
URL mappings for the patient portal API.

Paths match the front-end's API calls.  Trailing slashes are omitted
(``APPEND_SLASH`` is off).
"""
from django.urls import path, include

from .views import appointments
from .views import health
from .views import health_records
from .views import hospitals
from .views import lab_reports
from .views import prescriptions
from .views.dashboard import dashboard
from .views.profile import profile, profile_update
from .auth_views import register_view, login_view, jwt_refresh_view, jwt_logout_view


urlpatterns = [
    path('metrics', include('django_prometheus.urls')),
    path('healthz', health.healthz, name='healthz'),
    path('api/test', health.api_test, name='api_test'),
    # Authentication
    path('api/auth/register', register_view, name='register'),
    path('api/auth/login', login_view, name='login'),
    path('api/auth/refresh', jwt_refresh_view, name='jwt_refresh'),
    path('api/auth/logout', jwt_logout_view, name='jwt_logout'),
    # Profile and dashboard
    path('api/profile', profile, name='profile'),
    path('api/profile/update', profile_update, name='profile_update'),
    path('api/dashboard', dashboard, name='dashboard'),
    # Hospitals
    path('api/hospitals', hospitals.list_hospitals, name='hospitals'),
    path('api/hospitals/<int:pk>', hospitals.hospital_detail, name='hospital_detail'),
    path('api/hospitals/<int:pk>/like', hospitals.like_hospital, name='hospital_like'),
    path('api/hospitals/<int:pk>/interest', hospitals.mark_interested, name='hospital_interest'),
    # Appointments
    path('api/appointments', appointments.list_appointments, name='appointments'),
    path('api/appointments/calendar', appointments.appointment_calendar, name='appointment_calendar'),
    path('api/appointments/book', appointments.book, name='appointment_book'),
    path('api/appointments/<int:pk>/cancel', appointments.cancel, name='appointment_cancel'),
    # Health records
    path('api/health-records', health_records.list_health_records, name='health_records'),
    path('api/health-records/create', health_records.create_health_record, name='health_record_create'),
    path('api/health-records/<int:pk>/share', health_records.share_health_record, name='health_record_share'),
    path('api/health-records/<int:pk>/download', health_records.download_health_record, name='health_record_download'),
    # Prescriptions
    path('api/prescriptions', prescriptions.list_prescriptions, name='prescriptions'),
    path('api/prescriptions/create', prescriptions.create_prescription, name='prescription_create'),
    path('api/prescriptions/<int:pk>/share', prescriptions.share_prescription, name='prescription_share'),
    path('api/prescriptions/<int:pk>/download', prescriptions.download_prescription, name='prescription_download'),
    # Lab reports
    path('api/lab-reports', lab_reports.list_lab_reports, name='lab_reports'),
    path('api/lab-reports/upload', lab_reports.upload, name='lab_report_upload'),
    path('api/lab-reports/<int:pk>/delete', lab_reports.delete, name='lab_report_delete'),
    path('api/lab-reports/<int:pk>/share', lab_reports.share_lab_report, name='lab_report_share'),
    path('api/lab-reports/<int:pk>/download', lab_reports.download_lab_report, name='lab_report_download'),
]
