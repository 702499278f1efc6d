import pytest
from django.urls import reverse
from rest_framework.test import APIClient

from care.models import Appointment, AuditEvent, User

PASSWORD = 'Str0ngPass!'

pytestmark = pytest.mark.django_db

SIGNUP = {
    'email': 'New.Patient@Example.com',
    'password': PASSWORD,
    'confirmPassword': PASSWORD,
    'firstName': 'New',
    'lastName': 'Patient',
    'phone': '+1 555 000 1111',
    'address': '1 Main St',
    'city': 'Springfield',
    'state': 'Illinois',
    'zipCode': '62701',
}


def login(client, email, password):
    return client.post(reverse('login'), {'email': email, 'password': password}, format='json')


def test_login_rejects_malformed_email_without_issuing_token():
    r = login(APIClient(), 'foo@bar', PASSWORD)
    assert r.status_code == 400
    assert r.data['error']['fields']['email'] == ['Email is invalid']
    assert 'token' not in r.data


def test_login_reports_each_missing_field():
    r = APIClient().post(reverse('login'), {}, format='json')
    assert r.status_code == 400
    assert r.data['error']['fields'] == {'email': ['Email is required'], 'password': ['Password is required']}


def test_login_short_password():
    r = login(APIClient(), 'jane@example.com', '12345')
    assert r.data['error']['fields']['password'] == ['Password must be at least 6 characters']


def test_login_wrong_password(patient):
    r = login(APIClient(), 'jane@example.com', 'Wrong-pass-1')
    assert r.status_code == 400
    assert r.data == {'ok': False, 'error': {'code': 'invalid_credentials', 'message': 'Invalid email or password'}}
    assert AuditEvent.objects.filter(action='login', detail__result='fail').exists()


def test_login_returns_jwt_and_legacy_token(patient):
    r = login(APIClient(), 'JANE@example.com ', PASSWORD)
    assert r.status_code == 200
    assert r.data['jwt_access'] and r.data['jwt_refresh'] and r.data['token']
    assert r.data['user']['email'] == 'jane@example.com'
    assert r.data['message'] == 'Welcome back!'


def test_token_and_bearer_both_authenticate(patient):
    r = login(APIClient(), 'jane@example.com', PASSWORD)
    c = APIClient()
    c.credentials(HTTP_AUTHORIZATION=f"Token {r.data['token']}")
    assert c.get('/api/profile').status_code == 200
    c.credentials(HTTP_AUTHORIZATION=f"Bearer {r.data['jwt_access']}")
    assert c.get('/api/profile').status_code == 200


def test_register_collects_every_error():
    r = APIClient().post(reverse('register'), {
        'email': 'nope', 'password': 'abc', 'confirmPassword': 'abd',
    }, format='json')
    assert r.status_code == 400
    fields = r.data['error']['fields']
    assert fields['email'] == ['Email is invalid']
    assert 'Password must be at least 6 characters' in fields['password']
    assert fields['confirmPassword'] == ['Passwords do not match']
    for name in ('firstName', 'lastName', 'phone', 'address', 'city', 'state', 'zipCode'):
        assert name in fields
    assert 'location' not in fields
    assert not User.objects.exists()


def test_register_creates_account_and_logs_in():
    r = APIClient().post(reverse('register'), SIGNUP, format='json')
    assert r.status_code == 201
    assert r.data['token']
    user = User.objects.get()
    assert user.email == 'new.patient@example.com'
    assert user.username == user.email
    assert user.zip_code == '62701'
    assert login(APIClient(), 'new.patient@example.com', PASSWORD).status_code == 200


@pytest.mark.parametrize('password', ['abcdef', '123456', 'qwerty'])
def test_register_accepts_any_six_character_password(password):
    r = APIClient().post(reverse('register'), {**SIGNUP, 'password': password, 'confirmPassword': password},
                         format='json')
    assert r.status_code == 201
    assert login(APIClient(), 'new.patient@example.com', password).status_code == 200


def test_register_duplicate_email(patient):
    r = APIClient().post(reverse('register'), {**SIGNUP, 'email': 'Jane@Example.com'}, format='json')
    assert r.status_code == 400
    assert r.data['error']['fields']['email'] == ['An account with this email already exists']


def test_logout_blacklists_refresh_token(patient):
    r = login(APIClient(), 'jane@example.com', PASSWORD)
    c = APIClient()
    c.credentials(HTTP_AUTHORIZATION=f"Bearer {r.data['jwt_access']}")
    out = c.post(reverse('jwt_logout'), {'refresh': r.data['jwt_refresh']}, format='json')
    assert out.status_code == 200
    assert out.data['blacklisted'] == 1
    again = APIClient().post(reverse('jwt_refresh'), {'refresh': r.data['jwt_refresh']}, format='json')
    assert again.status_code == 401


@pytest.mark.parametrize('path', [
    '/api/profile', '/api/dashboard', '/api/appointments', '/api/hospitals',
    '/api/health-records', '/api/prescriptions', '/api/lab-reports',
])
def test_pages_require_authentication(path):
    r = APIClient().get(path)
    assert r.status_code == 401
    assert r.data['ok'] is False


def test_connectivity_greeting_and_health():
    c = APIClient()
    r = c.get('/api/test')
    assert r.status_code == 200
    assert r.json() == {'message': 'Hello from the patient portal server! Your back-end is connected.'}
    assert c.get('/healthz').json() == {'ok': True, 'db': True}


def test_profile_update(api_client, patient):
    r = api_client.post('/api/profile/update', {'name': 'Janet Smith', 'city': 'Boston'}, format='json')
    assert r.status_code == 200
    patient.refresh_from_db()
    assert (patient.first_name, patient.last_name, patient.city) == ('Janet', 'Smith', 'Boston')
    assert r.data['user']['name'] == 'Janet Smith'


def test_profile_email_must_be_unique(api_client, patient):
    User.objects.create_user(username='taken@example.com', email='taken@example.com', password=PASSWORD)
    r = api_client.post('/api/profile/update', {'email': 'taken@example.com'}, format='json')
    assert r.status_code == 400
    assert 'email' in r.data['error']['fields']


def test_dashboard_stats(api_client, patient, hospitals):
    for status in ('upcoming', 'upcoming', 'completed', 'cancelled'):
        Appointment.objects.create(user=patient, doctor='Dr. Sarah Johnson', specialty='Cardiology',
                                   date='2024-01-15', time='10:00 AM', status=status)
    r = api_client.get('/api/dashboard')
    assert r.status_code == 200
    assert r.data['stats']['totalAppointments'] == 4
    assert r.data['stats']['upcomingAppointments'] == 2
    assert r.data['stats']['completedAppointments'] == 1
    assert len(r.data['recentAppointments']) == 3
    profile = api_client.get('/api/profile')
    assert profile.data['stats']['appointments'] == 4
