import pytest
from django.core.cache import cache
from rest_framework.test import APIClient

from care.models import Hospital, User

PASSWORD = 'Str0ngPass!'


@pytest.fixture(autouse=True)
def _clear_cache():
    # throttle counters and cached catalogue counts live in the cache
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def patient(db):
    return User.objects.create_user(
        username='jane@example.com', email='jane@example.com', password=PASSWORD,
        first_name='Jane', last_name='Doe',
    )


@pytest.fixture
def api_client(patient):
    c = APIClient()
    c.force_authenticate(user=patient)
    return c


@pytest.fixture
def hospitals(db):
    return [
        Hospital.objects.create(name='City General Hospital', specialty='Multi-Specialty', state='New York',
                                city='New York', address='123 Medical Center Dr', card_type='General',
                                availability=Hospital.AVAILABLE, rating='4.5', reviews=1247),
        Hospital.objects.create(name='Metro Medical Center', specialty='Cardiology', state='California',
                                city='Los Angeles', address='456 Health Plaza', card_type='Specialized',
                                availability=Hospital.AVAILABLE, rating='4.8', reviews=892),
        Hospital.objects.create(name='Regional Health Clinic', specialty='Orthopedics', state='Texas',
                                city='Houston', address='789 Wellness Blvd', card_type='Specialized',
                                availability=Hospital.UNAVAILABLE, rating='4.2', reviews=567),
    ]
