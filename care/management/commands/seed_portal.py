"""
Management command to load the demo hospital catalogue and, for one
account, a starter set of appointments, health records, prescriptions
and lab reports.

Running it again changes nothing: hospitals are matched by name and a
user's records are only created while that user has none of the kind.
"""
import datetime
from decimal import Decimal

from django.core.cache import cache
from django.core.management.base import BaseCommand, CommandError
from django.db import transaction

from care.models import Appointment, HealthRecord, Hospital, LabReport, Prescription, User

HOSPITALS = [
    {
        'name': 'City General Hospital',
        'specialty': 'Multi-Specialty',
        'state': 'New York',
        'city': 'New York',
        'address': '123 Medical Center Dr',
        'rating': Decimal('4.5'),
        'reviews': 1247,
        'availability': Hospital.AVAILABLE,
        'card_type': 'General',
        'phone': '+1 (555) 123-4567',
        'email': 'info@citygeneral.com',
        'website': 'https://citygeneral.com',
        'latitude': 40.7128,
        'longitude': -74.0060,
        'description': 'A leading multi-specialty hospital providing comprehensive healthcare services.',
        'facilities': ['Emergency Care', 'ICU', 'Laboratory', 'Radiology', 'Pharmacy'],
        'doctors': [
            {'name': 'Dr. Sarah Johnson', 'specialty': 'Cardiology', 'available': True},
            {'name': 'Dr. Michael Chen', 'specialty': 'Neurology', 'available': True},
            {'name': 'Dr. Emily Davis', 'specialty': 'Orthopedics', 'available': False},
        ],
    },
    {
        'name': 'Metro Medical Center',
        'specialty': 'Cardiology',
        'state': 'California',
        'city': 'Los Angeles',
        'address': '456 Health Plaza',
        'rating': Decimal('4.8'),
        'reviews': 892,
        'availability': Hospital.AVAILABLE,
        'card_type': 'Specialized',
        'phone': '+1 (555) 987-6543',
        'email': 'contact@metromedical.com',
        'website': 'https://metromedical.com',
        'latitude': 34.0522,
        'longitude': -118.2437,
        'description': 'Specialized cardiac care center with state-of-the-art facilities.',
        'facilities': ['Cardiac ICU', 'Cath Lab', 'Echo Lab', 'Cardiac Rehab'],
        'doctors': [
            {'name': 'Dr. Robert Wilson', 'specialty': 'Cardiology', 'available': True},
            {'name': 'Dr. Lisa Thompson', 'specialty': 'Cardiac Surgery', 'available': True},
        ],
    },
    {
        'name': 'Regional Health Clinic',
        'specialty': 'Orthopedics',
        'state': 'Texas',
        'city': 'Houston',
        'address': '789 Wellness Blvd',
        'rating': Decimal('4.2'),
        'reviews': 567,
        'availability': Hospital.UNAVAILABLE,
        'card_type': 'Specialized',
        'phone': '+1 (555) 456-7890',
        'email': 'info@regionalhealth.com',
        'website': 'https://regionalhealth.com',
        'latitude': 29.7604,
        'longitude': -95.3698,
        'description': 'Specialized orthopedic care with advanced surgical techniques.',
        'facilities': ['Orthopedic Surgery', 'Physical Therapy', 'Sports Medicine'],
        'doctors': [
            {'name': 'Dr. James Brown', 'specialty': 'Orthopedics', 'available': False},
            {'name': 'Dr. Maria Garcia', 'specialty': 'Sports Medicine', 'available': False},
        ],
    },
    {
        'name': 'Community Medical Center',
        'specialty': 'Multi-Specialty',
        'state': 'Florida',
        'city': 'Miami',
        'address': '321 Care Street',
        'rating': Decimal('4.6'),
        'reviews': 734,
        'availability': Hospital.AVAILABLE,
        'card_type': 'General',
        'phone': '+1 (555) 321-0987',
        'email': 'hello@communitymedical.com',
        'website': 'https://communitymedical.com',
        'latitude': 25.7617,
        'longitude': -80.1918,
        'description': 'Community-focused healthcare with personalized patient care.',
        'facilities': ['Primary Care', 'Pediatrics', "Women's Health", 'Dental'],
        'doctors': [
            {'name': 'Dr. David Lee', 'specialty': 'Family Medicine', 'available': True},
            {'name': 'Dr. Jennifer White', 'specialty': 'Pediatrics', 'available': True},
        ],
    },
]

# oldest first so the newest-first listing matches the demo order
APPOINTMENTS = [
    ('Dr. Robert Wilson', 'Cardiology', 'City General Hospital', '2024-01-20', '11:30 AM', 'upcoming',
     'ECG and stress test', '123 Medical Center Dr, New York, NY'),
    ('Dr. Emily Davis', 'Orthopedics', 'Regional Health Clinic', '2024-01-08', '9:15 AM', 'completed',
     'Knee pain consultation', '789 Wellness Blvd, Houston, TX'),
    ('Dr. Michael Chen', 'Dermatology', 'Metro Medical Center', '2024-01-10', '2:30 PM', 'completed',
     'Annual skin check-up', '456 Health Plaza, Los Angeles, CA'),
    ('Dr. Sarah Johnson', 'Cardiology', 'City General Hospital', '2024-01-15', '10:00 AM', 'upcoming',
     'Follow-up consultation for heart condition', '123 Medical Center Dr, New York, NY'),
]

HEALTH_RECORDS = [
    ('Temperature', '98.6', '°F', '2024-01-05', 'normal', 'stable', 'Normal body temperature'),
    ('Weight', '70', 'kg', '2024-01-08', 'normal', 'decreasing', 'Lost 2kg this month - good progress'),
    ('Blood Sugar', '95', 'mg/dL', '2024-01-10', 'normal', 'improving', 'Fasting glucose - improved from last reading'),
    ('Heart Rate', '72', 'bpm', '2024-01-15', 'normal', 'stable', 'Resting heart rate - good'),
    ('Blood Pressure', '120/80', 'mmHg', '2024-01-15', 'normal', 'stable', 'Regular checkup - within normal range'),
]

PRESCRIPTIONS = [
    {
        'doctor_name': 'Dr. Emily Rodriguez',
        'specialty': 'Pediatrics',
        'date': '2024-01-05',
        'medications': [
            {'name': 'Amoxicillin', 'dosage': '250mg', 'frequency': 'Three times daily', 'duration': '10 days'},
        ],
        'instructions': 'Take on empty stomach. Complete full course.',
        'status': 'active',
        'hospital': "Children's Medical Center",
    },
    {
        'doctor_name': 'Dr. Michael Chen',
        'specialty': 'Dermatology',
        'date': '2024-01-10',
        'medications': [
            {'name': 'Cetirizine', 'dosage': '10mg', 'frequency': 'Once daily', 'duration': '7 days'},
            {'name': 'Hydrocortisone cream', 'dosage': '1%', 'frequency': 'Apply twice daily', 'duration': '14 days'},
        ],
        'instructions': 'Apply cream to affected areas. Take tablet at night.',
        'status': 'completed',
        'hospital': 'Skin Care Clinic',
    },
    {
        'doctor_name': 'Dr. Sarah Johnson',
        'specialty': 'Cardiology',
        'date': '2024-01-15',
        'medications': [
            {'name': 'Aspirin', 'dosage': '100mg', 'frequency': 'Once daily', 'duration': '30 days'},
            {'name': 'Metformin', 'dosage': '500mg', 'frequency': 'Twice daily', 'duration': '90 days'},
        ],
        'instructions': 'Take with food. Avoid alcohol.',
        'status': 'active',
        'hospital': 'City General Hospital',
    },
]

LAB_REPORTS = [
    ('Urine Analysis', 'Laboratory', '2024-01-03', 'Community Medical Center', 'Dr. David Lee', 'normal',
     'urine_analysis.pdf', '1.5 MB', 'Routine urine analysis and culture'),
    ('X-Ray Report', 'Radiology', '2024-01-05', 'Regional Health Clinic', 'Dr. Emily Davis', 'normal',
     'xray_report.pdf', '3.2 MB', 'Chest X-ray for respiratory assessment'),
    ('ECG Report', 'Cardiology', '2024-01-08', 'Metro Medical Center', 'Dr. Robert Wilson', 'abnormal',
     'ecg_report.pdf', '1.8 MB', 'Electrocardiogram showing irregular heartbeat'),
    ('Blood Test Report', 'Blood Analysis', '2024-01-10', 'City General Hospital', 'Dr. Sarah Johnson', 'normal',
     'blood_test_report.pdf', '2.4 MB', 'Complete blood count and metabolic panel'),
]


def _day(value: str) -> datetime.date:
    return datetime.date.fromisoformat(value)


class Command(BaseCommand):
    help = 'Load the demo hospital catalogue and starter records for one account'

    def add_arguments(self, parser):
        parser.add_argument('--email', help='account that receives the starter records')

    @transaction.atomic
    def handle(self, *args, **options):
        created = self.create_hospitals()
        self.stdout.write(f'Hospitals: {created} created, {len(HOSPITALS) - created} already present')

        email = options.get('email')
        if email:
            user = User.objects.filter(email__iexact=email.strip()).first()
            if user is None:
                raise CommandError(f'No account with email {email}')
            self.create_appointments(user)
            self.create_health_records(user)
            self.create_prescriptions(user)
            self.create_lab_reports(user)

        cache.clear()
        self.stdout.write(self.style.SUCCESS('Demo data ready'))

    def create_hospitals(self) -> int:
        created = 0
        for data in HOSPITALS:
            _, was_created = Hospital.objects.get_or_create(name=data['name'], defaults=data)
            created += int(was_created)
        return created

    def create_appointments(self, user):
        if Appointment.objects.filter(user=user).exists():
            self.stdout.write('Appointments: already present')
            return
        for doctor, specialty, hospital, date, time, status, notes, location in APPOINTMENTS:
            Appointment.objects.create(
                user=user, doctor=doctor, specialty=specialty, hospital=hospital,
                date=_day(date), time=time, status=status, notes=notes, location=location,
            )
        self.stdout.write(f'Appointments: {len(APPOINTMENTS)} created')

    def create_health_records(self, user):
        if HealthRecord.objects.filter(user=user).exists():
            self.stdout.write('Health records: already present')
            return
        for type_, value, unit, date, status, trend, notes in HEALTH_RECORDS:
            HealthRecord.objects.create(
                user=user, type=type_, value=value, unit=unit, date=_day(date),
                status=status, trend=trend, notes=notes,
            )
        self.stdout.write(f'Health records: {len(HEALTH_RECORDS)} created')

    def create_prescriptions(self, user):
        if Prescription.objects.filter(user=user).exists():
            self.stdout.write('Prescriptions: already present')
            return
        for data in PRESCRIPTIONS:
            Prescription.objects.create(user=user, **{**data, 'date': _day(data['date'])})
        self.stdout.write(f'Prescriptions: {len(PRESCRIPTIONS)} created')

    def create_lab_reports(self, user):
        if LabReport.objects.filter(user=user).exists():
            self.stdout.write('Lab reports: already present')
            return
        for name, type_, date, hospital, doctor, status, file_name, size, description in LAB_REPORTS:
            LabReport.objects.create(
                user=user, name=name, type=type_, date=_day(date), hospital=hospital, doctor=doctor,
                status=status, file_name=file_name, size=size, description=description,
            )
        self.stdout.write(f'Lab reports: {len(LAB_REPORTS)} created')
