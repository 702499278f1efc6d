"""Account creation, token issuing and profile mapping."""
from __future__ import annotations

import logging
import time

from django.conf import settings
from django.contrib.auth import get_user_model
from django.db import transaction
from rest_framework.authtoken.models import Token
from rest_framework_simplejwt.tokens import RefreshToken

logger = logging.getLogger(__name__)

User = get_user_model()

# serializer field -> model field
PROFILE_FIELDS = {
    'firstName': 'first_name',
    'lastName': 'last_name',
    'email': 'email',
    'phone': 'phone',
    'address': 'address',
    'city': 'city',
    'state': 'state',
    'zipCode': 'zip_code',
    'location': 'location',
    'dateOfBirth': 'date_of_birth',
    'emergencyContact': 'emergency_contact',
}


def simulated_delay() -> None:
    delay_ms = getattr(settings, 'AUTH_SIMULATED_DELAY_MS', 0)
    if delay_ms > 0:
        time.sleep(delay_ms / 1000)


def normalize_email(email: str) -> str:
    return (email or '').strip().lower()


@transaction.atomic
def register_user(data: dict) -> User:
    email = normalize_email(data['email'])
    user = User.objects.create_user(username=email, email=email, password=data['password'])
    for key, attr in PROFILE_FIELDS.items():
        if key != 'email' and key in data:
            setattr(user, attr, data[key])
    user.save()
    logger.info("Registered portal user %s", user.pk)
    return user


def update_profile(user: User, data: dict) -> User:
    changed = []
    if 'name' in data and 'firstName' not in data and 'lastName' not in data:
        first, _, last = data['name'].strip().partition(' ')
        data = {**data, 'firstName': first, 'lastName': last}
    for key, attr in PROFILE_FIELDS.items():
        if key in data:
            value = normalize_email(data[key]) if key == 'email' else data[key]
            setattr(user, attr, value)
            changed.append(attr)
            if key == 'email':
                user.username = value
                changed.append('username')
    if changed:
        user.save(update_fields=changed)
    return user


def issue_tokens(user: User) -> dict:
    """Login response: legacy DRF token plus a JWT pair."""
    token_obj, _ = Token.objects.get_or_create(user=user)
    refresh = RefreshToken.for_user(user)
    return {
        'ok': True,
        'token': token_obj.key,
        'jwt_access': str(refresh.access_token),
        'jwt_refresh': str(refresh),
        'user': serialize_user(user),
    }


def serialize_user(user: User) -> dict:
    return {
        'id': user.id,
        'email': user.email,
        'name': user.get_full_name() or user.email,
        'firstName': user.first_name,
        'lastName': user.last_name,
        'phone': user.phone,
        'address': user.address,
        'city': user.city,
        'state': user.state,
        'zipCode': user.zip_code,
        'location': user.location,
        'dateOfBirth': user.date_of_birth.isoformat() if user.date_of_birth else None,
        'emergencyContact': user.emergency_contact,
        'createdAt': user.date_joined.isoformat() if user.date_joined else None,
    }
