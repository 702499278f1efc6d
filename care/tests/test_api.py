"""
Integration tests for the patient portal API.

These exercise the record pages end to end: listing with search and
filters, the booking and upload forms (including their field errors),
cancellation, hospital marks and share links.  The tests use Django
REST Framework's APIClient within the APITestCase base class.

To run the tests:

```
pytest -q care/tests
```
"""
import datetime
import shutil
import tempfile

from django.core.cache import cache
from django.core.files.uploadedfile import SimpleUploadedFile
from django.test import override_settings
from rest_framework import status
from rest_framework.test import APIClient, APITestCase

from care.models import Appointment, HealthRecord, Hospital, HospitalMark, LabReport, Prescription, User


class PortalAPITestCase(APITestCase):
    def setUp(self) -> None:
        cache.clear()
        self.user = User.objects.create_user(
            username='jane@example.com', email='jane@example.com', password='Str0ngPass!',
            first_name='Jane', last_name='Doe',
        )
        self.other = User.objects.create_user(
            username='john@example.com', email='john@example.com', password='Str0ngPass!',
        )
        self.client = self.authenticate(self.user)

    def authenticate(self, user: User) -> APIClient:
        """Return an authenticated APIClient for the given user."""
        client = APIClient()
        client.force_authenticate(user=user)
        return client


class AppointmentAPITests(PortalAPITestCase):
    def setUp(self) -> None:
        super().setUp()
        self.hospital = Hospital.objects.create(
            name='City General Hospital', specialty='Multi-Specialty', state='New York', city='New York',
            address='123 Medical Center Dr', availability=Hospital.AVAILABLE,
        )
        self.closed = Hospital.objects.create(
            name='Regional Health Clinic', specialty='Orthopedics', state='Texas', city='Houston',
            availability=Hospital.UNAVAILABLE,
        )
        Appointment.objects.create(user=self.user, doctor='Dr. Michael Chen', specialty='Dermatology',
                                   hospital='Metro Medical Center', date=datetime.date(2024, 1, 10),
                                   time='2:30 PM', status=Appointment.STATUS_COMPLETED)
        Appointment.objects.create(user=self.user, doctor='Dr. Sarah Johnson', specialty='Cardiology',
                                   hospital='City General Hospital', date=datetime.date(2024, 1, 15),
                                   time='10:00 AM', status=Appointment.STATUS_UPCOMING)
        Appointment.objects.create(user=self.other, doctor='Dr. Sarah Johnson', specialty='Cardiology',
                                   hospital='City General Hospital', date=datetime.date(2024, 1, 15),
                                   time='11:00 AM', status=Appointment.STATUS_UPCOMING)

    def test_list_is_newest_first_and_owner_scoped(self):
        response = self.client.get('/api/appointments')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        doctors = [a['doctor'] for a in response.data['data']]
        self.assertEqual(doctors, ['Dr. Sarah Johnson', 'Dr. Michael Chen'])
        self.assertEqual(response.data['pagination']['total'], 2)

    def test_list_filters_combine(self):
        response = self.client.get('/api/appointments', {'status': 'completed'})
        self.assertEqual([a['doctor'] for a in response.data['data']], ['Dr. Michael Chen'])
        response = self.client.get('/api/appointments', {'q': 'CARDIO', 'date': '2024-01-15'})
        self.assertEqual([a['time'] for a in response.data['data']], ['10:00 AM'])
        response = self.client.get('/api/appointments', {'q': 'cardio', 'status': 'completed'})
        self.assertEqual(response.data['data'], [])
        self.assertTrue(response.data['empty'])
        self.assertEqual(response.data['message'], 'No appointments found')

    def test_unknown_status_is_rejected(self):
        response = self.client.get('/api/appointments', {'status': 'postponed'})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('status', response.data['error']['fields'])

    def test_booking_requires_fields(self):
        response = self.client.post('/api/appointments/book', {'notes': 'hello'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        error = response.data['error']
        self.assertEqual(error['code'], 'validation_error')
        self.assertEqual(error['message'], 'Please fix the errors in the form')
        for field in ('doctor', 'specialty', 'date', 'time'):
            self.assertIn(field, error['fields'])
        self.assertEqual(Appointment.objects.filter(user=self.user).count(), 2)

    def test_booking_puts_new_appointment_first(self):
        response = self.client.post('/api/appointments/book', {
            'doctor': 'Dr. Lisa Thompson', 'specialty': 'Cardiac Surgery', 'date': '2024-01-25',
            'time': '09:00', 'hospitalId': self.hospital.id, 'notes': '<b>bring</b> results',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        data = response.data['data']
        self.assertEqual(data['status'], 'upcoming')
        self.assertEqual(data['hospital'], 'City General Hospital')
        self.assertEqual(data['location'], '123 Medical Center Dr')
        self.assertEqual(data['notes'], 'bring results')
        listing = self.client.get('/api/appointments')
        self.assertEqual(listing.data['data'][0]['id'], data['id'])

    def test_booking_at_unavailable_hospital(self):
        response = self.client.post('/api/appointments/book', {
            'doctor': 'Dr. James Brown', 'specialty': 'Orthopedics', 'date': '2024-01-25',
            'time': '09:00', 'hospitalId': self.closed.id,
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('hospitalId', response.data['error']['fields'])

    def test_cancel_twice(self):
        appt = Appointment.objects.get(user=self.user, status=Appointment.STATUS_UPCOMING)
        first = self.client.post(f'/api/appointments/{appt.id}/cancel')
        self.assertEqual(first.status_code, status.HTTP_200_OK)
        self.assertTrue(first.data['changed'])
        second = self.client.post(f'/api/appointments/{appt.id}/cancel')
        self.assertEqual(second.status_code, status.HTTP_200_OK)
        self.assertFalse(second.data['changed'])
        appt.refresh_from_db()
        self.assertEqual(appt.status, Appointment.STATUS_CANCELLED)

    def test_cancel_completed_conflicts(self):
        appt = Appointment.objects.get(user=self.user, status=Appointment.STATUS_COMPLETED)
        response = self.client.post(f'/api/appointments/{appt.id}/cancel')
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(response.data['error']['code'], 'conflict')

    def test_cannot_cancel_someone_elses_appointment(self):
        appt = Appointment.objects.get(user=self.other)
        response = self.client.post(f'/api/appointments/{appt.id}/cancel')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        appt.refresh_from_db()
        self.assertEqual(appt.status, Appointment.STATUS_UPCOMING)

    def test_calendar(self):
        response = self.client.get('/api/appointments/calendar', {'month': '2024-01'})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['days'], {'2024-01-10': ['completed'], '2024-01-15': ['upcoming']})
        bad = self.client.get('/api/appointments/calendar', {'month': '2024-13'})
        self.assertEqual(bad.status_code, status.HTTP_400_BAD_REQUEST)


class HospitalAPITests(PortalAPITestCase):
    def setUp(self) -> None:
        super().setUp()
        self.city = Hospital.objects.create(name='City General Hospital', specialty='Multi-Specialty',
                                            state='New York', city='New York', card_type='General',
                                            availability=Hospital.AVAILABLE)
        self.metro = Hospital.objects.create(name='Metro Medical Center', specialty='Cardiology',
                                             state='California', city='Los Angeles', card_type='Specialized',
                                             availability=Hospital.AVAILABLE)
        self.regional = Hospital.objects.create(name='Regional Health Clinic', specialty='Orthopedics',
                                                state='Texas', city='Houston', card_type='Specialized',
                                                availability=Hospital.UNAVAILABLE)

    def names(self, response):
        return [h['name'] for h in response.data['data']]

    def test_search_and_drop_downs(self):
        response = self.client.get('/api/hospitals', {'q': 'houston'})
        self.assertEqual(self.names(response), ['Regional Health Clinic'])
        response = self.client.get('/api/hospitals', {'specialty': 'All Specialties', 'state': 'All States',
                                                      'cardType': 'Specialized'})
        self.assertEqual(self.names(response), ['Metro Medical Center', 'Regional Health Clinic'])
        response = self.client.get('/api/hospitals', {'cardType': 'Specialized', 'tab': 'available'})
        self.assertEqual(self.names(response), ['Metro Medical Center'])
        self.assertIn('All States', response.data['filters']['states'])

    def test_tab_counts_follow_search_and_drop_downs(self):
        self.client.post(f'/api/hospitals/{self.city.id}/like')
        response = self.client.get('/api/hospitals', {'q': 'houston'})
        self.assertEqual(response.data['tabs'], {'all': 1, 'available': 0, 'unavailable': 1,
                                                 'liked': 1, 'interested': 0})
        response = self.client.get('/api/hospitals', {'cardType': 'Specialized', 'tab': 'available'})
        self.assertEqual(response.data['tabs']['all'], 2)
        self.assertEqual(response.data['tabs']['available'], 1)
        response = self.client.get('/api/hospitals')
        self.assertEqual(response.data['tabs']['all'], 3)

    def test_like_toggle_and_tabs(self):
        on = self.client.post(f'/api/hospitals/{self.metro.id}/like')
        self.assertEqual(on.status_code, status.HTTP_200_OK)
        self.assertTrue(on.data['liked'])
        response = self.client.get('/api/hospitals', {'tab': 'liked'})
        self.assertEqual(self.names(response), ['Metro Medical Center'])
        self.assertTrue(response.data['data'][0]['liked'])
        self.assertEqual(response.data['tabs'], {'all': 3, 'available': 2, 'unavailable': 1,
                                                 'liked': 1, 'interested': 0})
        off = self.client.post(f'/api/hospitals/{self.metro.id}/like')
        self.assertFalse(off.data['liked'])
        self.assertFalse(HospitalMark.objects.filter(user=self.user).exists())

    def test_marks_are_per_user(self):
        self.client.post(f'/api/hospitals/{self.city.id}/interest')
        other = self.authenticate(self.other).get('/api/hospitals', {'tab': 'interested'})
        self.assertEqual(other.data['data'], [])
        mine = self.client.get('/api/hospitals', {'tab': 'interested'})
        self.assertEqual(self.names(mine), ['City General Hospital'])

    def test_detail_and_missing(self):
        response = self.client.get(f'/api/hospitals/{self.city.id}')
        self.assertEqual(response.data['data']['name'], 'City General Hospital')
        missing = self.client.get('/api/hospitals/9999')
        self.assertEqual(missing.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(missing.data['ok'], False)


class RecordAPITests(PortalAPITestCase):
    def test_health_records_with_summary(self):
        today = datetime.date.today()
        HealthRecord.objects.create(user=self.user, type='Heart Rate', value='72', unit='bpm', date=today)
        HealthRecord.objects.create(user=self.user, type='Blood Sugar', value='140', unit='mg/dL',
                                    date=datetime.date(2020, 1, 1), status='high', trend='improving')
        response = self.client.get('/api/health-records', {'status': 'high'})
        self.assertEqual([r['type'] for r in response.data['data']], ['Blood Sugar'])
        self.assertEqual(response.data['summary'], {'total': 2, 'normal': 1, 'thisMonth': 1, 'improving': 1})

    def test_create_health_record(self):
        response = self.client.post('/api/health-records/create',
                                    {'type': 'Weight', 'value': '70', 'unit': 'kg'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['data']['status'], 'normal')
        bad = self.client.post('/api/health-records/create', {'type': ''}, format='json')
        self.assertEqual(set(bad.data['error']['fields']), {'type', 'value'})

    def test_prescriptions_create_filter_share(self):
        response = self.client.post('/api/prescriptions/create', {
            'doctorName': 'Dr. Sarah Johnson', 'specialty': 'Cardiology', 'date': '2024-01-15',
            'medications': [{'name': 'Aspirin', 'dosage': '100mg', 'frequency': 'Once daily'}],
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        pk = response.data['data']['id']
        listing = self.client.get('/api/prescriptions', {'status': 'active', 'specialty': 'Cardiology'})
        self.assertEqual([p['id'] for p in listing.data['data']], [pk])
        share = self.client.get(f'/api/prescriptions/{pk}/share')
        self.assertEqual(share.data['text'], 'Prescription from Dr. Sarah Johnson - 2024-01-15')
        self.assertTrue(share.data['url'].startswith('https://wa.me/?text=Prescription%20from%20Dr.'))
        self.assertEqual(share.data['message'], 'Sharing prescription...')
        download = self.client.get(f'/api/prescriptions/{pk}/download')
        self.assertEqual(download.data, {'ok': True, 'message': 'Downloading prescription...', 'url': None})

    def test_prescription_summary_ignores_filters(self):
        this_month = datetime.date.today()
        Prescription.objects.create(user=self.user, doctor_name='Dr. Sarah Johnson', specialty='Cardiology',
                                    date=this_month, medications=[], status='active')
        Prescription.objects.create(user=self.user, doctor_name='Dr. Michael Chen', specialty='Dermatology',
                                    date=datetime.date(2020, 1, 10), medications=[], status='completed')
        Prescription.objects.create(user=self.other, doctor_name='Dr. Emily Davis', specialty='Neurology',
                                    date=this_month, medications=[], status='active')
        response = self.client.get('/api/prescriptions', {'status': 'completed'})
        self.assertEqual([p['doctorName'] for p in response.data['data']], ['Dr. Michael Chen'])
        self.assertEqual(response.data['summary'], {'total': 2, 'active': 1, 'completed': 1, 'thisMonth': 1})

    def test_page_past_the_end(self):
        HealthRecord.objects.create(user=self.user, type='Heart Rate', value='72', unit='bpm',
                                    date=datetime.date.today())
        response = self.client.get('/api/health-records', {'page': 3, 'pageSize': 10})
        self.assertEqual(response.data['data'], [])
        self.assertEqual(response.data['pagination']['total'], 1)
        self.assertNotIn('hint', response.data)

    def test_prescription_needs_medication(self):
        response = self.client.post('/api/prescriptions/create', {
            'doctorName': 'Dr. Sarah Johnson', 'specialty': 'Cardiology', 'date': '2024-01-15',
            'medications': [],
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('medications', response.data['error']['fields'])
        self.assertFalse(Prescription.objects.exists())


class LabReportAPITests(PortalAPITestCase):
    def setUp(self) -> None:
        super().setUp()
        self.media = tempfile.mkdtemp()
        self.override = override_settings(MEDIA_ROOT=self.media)
        self.override.enable()

    def tearDown(self) -> None:
        self.override.disable()
        shutil.rmtree(self.media, ignore_errors=True)
        super().tearDown()

    def test_upload_without_file(self):
        response = self.client.post('/api/lab-reports/upload',
                                    {'name': 'Blood Test', 'type': 'Blood Analysis'}, format='multipart')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error']['fields']['file'], ['Please select a file to upload'])
        self.assertFalse(LabReport.objects.exists())

    def test_upload_rejects_unsupported_type(self):
        f = SimpleUploadedFile('notes.txt', b'plain text', content_type='text/plain')
        response = self.client.post('/api/lab-reports/upload',
                                    {'file': f, 'name': 'Notes', 'type': 'Laboratory'}, format='multipart')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('file', response.data['error']['fields'])

    def test_list_summary_counts_statuses(self):
        for name, report_status in (('Complete Blood Count', 'normal'), ('Lipid Panel', 'abnormal'),
                                    ('ECG Report', 'normal'), ('Chest X-Ray', 'pending')):
            LabReport.objects.create(user=self.user, name=name, type='Laboratory',
                                     date=datetime.date(2024, 1, 8), status=report_status)
        LabReport.objects.create(user=self.other, name='MRI Scan', type='Radiology',
                                 date=datetime.date(2024, 1, 8), status='abnormal')
        response = self.client.get('/api/lab-reports', {'status': 'pending'})
        self.assertEqual([r['name'] for r in response.data['data']], ['Chest X-Ray'])
        self.assertEqual(response.data['summary'], {'total': 4, 'normal': 2, 'abnormal': 1, 'pending': 1})

    def test_upload_list_share_delete(self):
        f = SimpleUploadedFile('ecg.pdf', b'%PDF-1.4 test', content_type='application/pdf')
        response = self.client.post('/api/lab-reports/upload', {
            'file': f, 'name': 'ECG Report', 'type': 'Cardiology',
            'hospital': 'Metro Medical Center', 'doctor': 'Dr. Robert Wilson',
        }, format='multipart')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        data = response.data['data']
        self.assertEqual(data['status'], 'pending')
        self.assertEqual(data['file'], 'ecg.pdf')
        self.assertEqual(data['size'], '0.0 MB')

        listing = self.client.get('/api/lab-reports', {'q': 'wilson', 'type': 'Cardiology'})
        self.assertEqual([r['id'] for r in listing.data['data']], [data['id']])

        share = self.client.get(f"/api/lab-reports/{data['id']}/share")
        self.assertIn('Lab Report: ECG Report', share.data['text'])
        self.assertIn('%0A', share.data['url'])

        download = self.client.get(f"/api/lab-reports/{data['id']}/download")
        self.assertEqual(download.data['message'], 'Downloading ECG Report...')
        self.assertEqual(download.data['url'], data['fileUrl'])

        gone = self.client.post(f"/api/lab-reports/{data['id']}/delete")
        self.assertEqual(gone.status_code, status.HTTP_200_OK)
        self.assertFalse(LabReport.objects.exists())
        self.assertEqual(self.client.get('/api/lab-reports').data['data'], [])
