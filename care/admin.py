"""
Django admin registrations for the portal models.

Staff can browse the hospital catalogue and inspect patients' records
through ``/admin/``.
"""

from django.contrib import admin

from .models import (
    User,
    Hospital,
    HospitalMark,
    Appointment,
    HealthRecord,
    Prescription,
    LabReport,
    AuditEvent,
)


@admin.register(User)
class UserAdmin(admin.ModelAdmin):
    list_display = ('email', 'first_name', 'last_name', 'city', 'state', 'is_staff')
    list_filter = ('state', 'is_staff')
    search_fields = ('email', 'first_name', 'last_name', 'phone')


@admin.register(Hospital)
class HospitalAdmin(admin.ModelAdmin):
    list_display = ('id', 'name', 'specialty', 'city', 'state', 'availability', 'card_type', 'rating')
    list_filter = ('availability', 'card_type', 'state', 'specialty')
    search_fields = ('name', 'city')


@admin.register(HospitalMark)
class HospitalMarkAdmin(admin.ModelAdmin):
    list_display = ('user', 'hospital', 'kind', 'created_at')
    list_filter = ('kind',)
    search_fields = ('user__email', 'hospital__name')


@admin.register(Appointment)
class AppointmentAdmin(admin.ModelAdmin):
    list_display = ('id', 'user', 'doctor', 'specialty', 'date', 'time', 'status')
    list_filter = ('status', 'specialty')
    search_fields = ('doctor', 'hospital', 'user__email')


@admin.register(HealthRecord)
class HealthRecordAdmin(admin.ModelAdmin):
    list_display = ('id', 'user', 'type', 'value', 'unit', 'date', 'status', 'trend')
    list_filter = ('status', 'trend')
    search_fields = ('type', 'user__email')


@admin.register(Prescription)
class PrescriptionAdmin(admin.ModelAdmin):
    list_display = ('id', 'user', 'doctor_name', 'specialty', 'date', 'status')
    list_filter = ('status', 'specialty')
    search_fields = ('doctor_name', 'user__email')


@admin.register(LabReport)
class LabReportAdmin(admin.ModelAdmin):
    list_display = ('id', 'user', 'name', 'type', 'date', 'status', 'size')
    list_filter = ('status', 'type')
    search_fields = ('name', 'doctor', 'hospital', 'user__email')


@admin.register(AuditEvent)
class AuditEventAdmin(admin.ModelAdmin):
    list_display = ('id', 'user', 'action', 'object_type', 'object_id', 'created_at')
    list_filter = ('action', 'object_type')
    search_fields = ('user__email', 'action')
