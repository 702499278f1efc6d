from rest_framework import serializers

from care.filters import ALL, is_wildcard
from care.models import Appointment, HealthRecord, Hospital, LabReport, Prescription
from care.services.hospitals import TABS
from care.services.lab_reports import check_upload

from .fields import CleanCharField, required_messages, text


def _choice_values(choices) -> list[str]:
    return [value for value, _ in choices]


# ---------------------------------------------------------------------------
# List queries
# ---------------------------------------------------------------------------

class RecordListQuerySerializer(serializers.Serializer):
    """Search box, status selector, optional day and paging."""
    status_choices: list[str] = []

    q = serializers.CharField(max_length=100, required=False, allow_blank=True, default='')
    status = serializers.CharField(max_length=32, required=False, allow_blank=True, default=ALL)
    page = serializers.IntegerField(min_value=1, required=False)
    pageSize = serializers.IntegerField(min_value=1, max_value=200, required=False)

    def validate_status(self, v):
        if is_wildcard(v):
            return ALL
        if v not in self.status_choices:
            raise serializers.ValidationError(f'"{v}" is not a valid status')
        return v


class AppointmentListQuerySerializer(RecordListQuerySerializer):
    status_choices = _choice_values(Appointment.STATUS_CHOICES)
    date = serializers.DateField(required=False, allow_null=True)


class AppointmentCalendarQuerySerializer(serializers.Serializer):
    month = serializers.RegexField(r'^\d{4}-(0[1-9]|1[0-2])$', error_messages={
        'invalid': 'Use the YYYY-MM format',
        **required_messages('Month'),
    })


class HealthRecordListQuerySerializer(RecordListQuerySerializer):
    status_choices = _choice_values(HealthRecord.STATUS_CHOICES)


class PrescriptionListQuerySerializer(RecordListQuerySerializer):
    status_choices = _choice_values(Prescription.STATUS_CHOICES)
    specialty = serializers.CharField(max_length=100, required=False, allow_blank=True, default=ALL)


class LabReportListQuerySerializer(RecordListQuerySerializer):
    status_choices = _choice_values(LabReport.STATUS_CHOICES)
    type = serializers.CharField(max_length=100, required=False, allow_blank=True, default=ALL)


class HospitalSearchQuerySerializer(serializers.Serializer):
    q = serializers.CharField(max_length=100, required=False, allow_blank=True, default='')
    specialty = serializers.CharField(max_length=100, required=False, allow_blank=True, default='')
    state = serializers.CharField(max_length=100, required=False, allow_blank=True, default='')
    cardType = serializers.CharField(max_length=32, required=False, allow_blank=True, default='')
    tab = serializers.ChoiceField(choices=list(TABS), required=False, default=ALL)
    page = serializers.IntegerField(min_value=1, required=False)
    pageSize = serializers.IntegerField(min_value=1, max_value=200, required=False)


# ---------------------------------------------------------------------------
# Create forms
# ---------------------------------------------------------------------------

class AppointmentCreateSerializer(serializers.Serializer):
    doctor = text('Doctor')
    specialty = text('Specialty', max_length=100)
    date = serializers.DateField(error_messages=required_messages('Date'))
    time = text('Time', max_length=20)
    notes = CleanCharField(required=False, allow_blank=True, default='')
    hospitalId = serializers.IntegerField(required=False, allow_null=True)

    def validate_hospitalId(self, v):
        if v is None:
            return None
        hospital = Hospital.objects.filter(pk=v).first()
        if hospital is None:
            raise serializers.ValidationError('Hospital not found')
        if hospital.availability != Hospital.AVAILABLE:
            raise serializers.ValidationError('This hospital is not accepting appointments')
        return hospital


class HealthRecordCreateSerializer(serializers.Serializer):
    type = text('Record type', max_length=100)
    value = text('Value', max_length=50)
    unit = text('Unit', required=False, max_length=20)
    date = serializers.DateField(required=False)
    status = serializers.ChoiceField(choices=HealthRecord.STATUS_CHOICES, required=False, default='normal')
    trend = serializers.ChoiceField(choices=HealthRecord.TREND_CHOICES, required=False, default='stable')
    notes = CleanCharField(required=False, allow_blank=True, default='')


class MedicationSerializer(serializers.Serializer):
    name = text('Medication name', max_length=100)
    dosage = text('Dosage', max_length=50)
    frequency = text('Frequency', required=False, max_length=100)
    duration = text('Duration', required=False, max_length=50)


class PrescriptionCreateSerializer(serializers.Serializer):
    doctorName = text('Doctor name')
    specialty = text('Specialty', max_length=100)
    hospital = text('Hospital', required=False)
    date = serializers.DateField(error_messages=required_messages('Date'))
    medications = MedicationSerializer(many=True, allow_empty=False, error_messages={
        'empty': 'Add at least one medication',
        **required_messages('Medications'),
    })
    instructions = CleanCharField(required=False, allow_blank=True, default='')
    status = serializers.ChoiceField(choices=Prescription.STATUS_CHOICES, required=False, default='active')


class LabReportUploadSerializer(serializers.Serializer):
    file = serializers.FileField(error_messages={
        'required': 'Please select a file to upload',
        'empty': 'The selected file is empty',
        'invalid': 'Please select a file to upload',
    })
    name = text('Report name')
    type = text('Report type', max_length=100)
    hospital = text('Hospital', required=False)
    doctor = text('Doctor', required=False)
    description = CleanCharField(required=False, allow_blank=True, default='')

    def validate_file(self, f):
        problems = check_upload(f)
        if problems:
            raise serializers.ValidationError(problems)
        return f
