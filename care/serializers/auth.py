import re

from django.contrib.auth import get_user_model
from rest_framework import serializers

from .fields import CleanCharField, required_messages, text

User = get_user_model()

EMAIL_PATTERN = re.compile(r'\S+@\S+\.\S+')
MIN_PASSWORD_LENGTH = 6


def check_email_format(v: str) -> str:
    v = (v or '').strip()
    if not EMAIL_PATTERN.search(v):
        raise serializers.ValidationError('Email is invalid')
    return v


class LoginSerializer(serializers.Serializer):
    email = serializers.CharField(error_messages=required_messages('Email'))
    password = serializers.CharField(trim_whitespace=False, error_messages=required_messages('Password'))

    def validate_email(self, v):
        return check_email_format(v)

    def validate_password(self, v):
        if len(v) < MIN_PASSWORD_LENGTH:
            raise serializers.ValidationError(f'Password must be at least {MIN_PASSWORD_LENGTH} characters')
        return v


class RegisterSerializer(LoginSerializer):
    """Sign-up form.  Every field is checked so all errors come back together."""
    confirmPassword = serializers.CharField(
        trim_whitespace=False, allow_blank=True, required=False, default='',
    )
    firstName = text('First name', max_length=150)
    lastName = text('Last name', max_length=150)
    phone = text('Phone number', max_length=32)
    address = text('Address')
    city = text('City', max_length=100)
    state = text('State', max_length=100)
    zipCode = text('ZIP code', max_length=20)
    location = text('Location', required=False)

    def validate_email(self, v):
        v = check_email_format(v)
        if User.objects.filter(email__iexact=v).exists():
            raise serializers.ValidationError('An account with this email already exists')
        return v

    def validate_confirmPassword(self, v):
        if v != self.initial_data.get('password'):
            raise serializers.ValidationError('Passwords do not match')
        return v


class ProfileUpdateSerializer(serializers.Serializer):
    name = CleanCharField(max_length=300, required=False)
    firstName = CleanCharField(max_length=150, required=False, allow_blank=True)
    lastName = CleanCharField(max_length=150, required=False, allow_blank=True)
    email = serializers.CharField(required=False)
    phone = CleanCharField(max_length=32, required=False, allow_blank=True)
    address = CleanCharField(max_length=255, required=False, allow_blank=True)
    city = CleanCharField(max_length=100, required=False, allow_blank=True)
    state = CleanCharField(max_length=100, required=False, allow_blank=True)
    zipCode = CleanCharField(max_length=20, required=False, allow_blank=True)
    location = CleanCharField(max_length=255, required=False, allow_blank=True)
    dateOfBirth = serializers.DateField(required=False, allow_null=True)
    emergencyContact = CleanCharField(max_length=255, required=False, allow_blank=True)

    def validate_email(self, v):
        v = check_email_format(v)
        user = self.context.get('user')
        others = User.objects.filter(email__iexact=v)
        if user is not None:
            others = others.exclude(pk=user.pk)
        if others.exists():
            raise serializers.ValidationError('An account with this email already exists')
        return v
