"""
Database models for the patient portal.

Each portal page is backed by one flat record type owned by the
signed-in user: appointments, health records, prescriptions and lab
reports.  Hospitals form a shared catalogue that users can mark as
liked or interesting.  Field names follow the front-end's mock records
so that the JSON mapping stays a straight rename.
"""
from __future__ import annotations

import datetime
import os
import uuid

from django.contrib.auth.models import AbstractUser
from django.db import models


class User(AbstractUser):
    """Portal account.  The email address is the login name.

    ``username`` is kept (Django's auth machinery relies on it) and is
    always set to the lower-cased email on registration.
    """
    email = models.EmailField(unique=True)
    phone = models.CharField(max_length=32, blank=True)
    address = models.CharField(max_length=255, blank=True)
    city = models.CharField(max_length=100, blank=True)
    state = models.CharField(max_length=100, blank=True)
    zip_code = models.CharField(max_length=20, blank=True)
    # Free text, e.g. "40.7128, -74.0060" captured by the browser
    location = models.CharField(max_length=255, blank=True)
    date_of_birth = models.DateField(null=True, blank=True)
    emergency_contact = models.CharField(max_length=255, blank=True)

    def __str__(self) -> str:
        return self.email or self.username


class Hospital(models.Model):
    """A hospital listed in the search page."""
    AVAILABLE = 'available'
    UNAVAILABLE = 'unavailable'
    AVAILABILITY_CHOICES = [
        (AVAILABLE, 'Available'),
        (UNAVAILABLE, 'Unavailable'),
    ]
    CARD_TYPE_CHOICES = [
        ('General', 'General'),
        ('Specialized', 'Specialized'),
        ('Emergency', 'Emergency'),
        ('Rehabilitation', 'Rehabilitation'),
    ]

    name = models.CharField(max_length=255)
    specialty = models.CharField(max_length=100, db_index=True)
    state = models.CharField(max_length=100, db_index=True)
    city = models.CharField(max_length=100)
    address = models.CharField(max_length=255, blank=True)
    rating = models.DecimalField(max_digits=2, decimal_places=1, default=0)
    reviews = models.PositiveIntegerField(default=0)
    availability = models.CharField(
        max_length=16, choices=AVAILABILITY_CHOICES, default=AVAILABLE, db_index=True
    )
    card_type = models.CharField(max_length=32, choices=CARD_TYPE_CHOICES, default='General')
    phone = models.CharField(max_length=32, blank=True)
    email = models.EmailField(blank=True)
    website = models.URLField(blank=True)
    latitude = models.FloatField(null=True, blank=True)
    longitude = models.FloatField(null=True, blank=True)
    description = models.TextField(blank=True)
    facilities = models.JSONField(default=list, blank=True)
    # [{"name": "Dr. ...", "specialty": "...", "available": true}, ...]
    doctors = models.JSONField(default=list, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['id']

    def __str__(self) -> str:
        return f"{self.name} ({self.city})"


class HospitalMark(models.Model):
    """A user's 'liked' or 'interested' flag on a hospital."""
    LIKED = 'liked'
    INTERESTED = 'interested'
    KIND_CHOICES = [
        (LIKED, 'Liked'),
        (INTERESTED, 'Interested'),
    ]
    user = models.ForeignKey(User, on_delete=models.CASCADE, related_name='hospital_marks')
    hospital = models.ForeignKey(Hospital, on_delete=models.CASCADE, related_name='marks')
    kind = models.CharField(max_length=16, choices=KIND_CHOICES)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        unique_together = [('user', 'hospital', 'kind')]

    def __str__(self) -> str:
        return f"{self.user_id} {self.kind} {self.hospital_id}"


class OwnedRecord(models.Model):
    """Common columns of the per-user portal records.

    Records are listed newest first, which is the order a freshly
    submitted form prepends to.
    """
    user = models.ForeignKey(User, on_delete=models.CASCADE, related_name='+')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True
        ordering = ['-created_at', '-id']


class Appointment(OwnedRecord):
    STATUS_UPCOMING = 'upcoming'
    STATUS_COMPLETED = 'completed'
    STATUS_CANCELLED = 'cancelled'
    STATUS_CHOICES = [
        (STATUS_UPCOMING, 'Upcoming'),
        (STATUS_COMPLETED, 'Completed'),
        (STATUS_CANCELLED, 'Cancelled'),
    ]

    doctor = models.CharField(max_length=255)
    specialty = models.CharField(max_length=100)
    hospital = models.CharField(max_length=255, default='Selected Hospital')
    location = models.CharField(max_length=255, blank=True)
    date = models.DateField(db_index=True)
    # Display time as entered, e.g. "10:00 AM"
    time = models.CharField(max_length=20)
    status = models.CharField(max_length=16, choices=STATUS_CHOICES, default=STATUS_UPCOMING, db_index=True)
    notes = models.TextField(blank=True)

    class Meta(OwnedRecord.Meta):
        indexes = [models.Index(fields=['user', 'date'], name='care_appt_user_date_idx')]

    def __str__(self) -> str:
        return f"{self.doctor} on {self.date} {self.time} ({self.status})"


class HealthRecord(OwnedRecord):
    STATUS_CHOICES = [
        ('normal', 'Normal'),
        ('elevated', 'Elevated'),
        ('high', 'High'),
        ('low', 'Low'),
    ]
    TREND_CHOICES = [
        ('stable', 'Stable'),
        ('improving', 'Improving'),
        ('decreasing', 'Decreasing'),
    ]

    type = models.CharField(max_length=100)
    value = models.CharField(max_length=50)
    unit = models.CharField(max_length=20, blank=True)
    date = models.DateField(default=datetime.date.today)
    status = models.CharField(max_length=16, choices=STATUS_CHOICES, default='normal', db_index=True)
    trend = models.CharField(max_length=16, choices=TREND_CHOICES, default='stable')
    notes = models.TextField(blank=True)

    def __str__(self) -> str:
        return f"{self.type}: {self.value} {self.unit}"


class Prescription(OwnedRecord):
    STATUS_CHOICES = [
        ('active', 'Active'),
        ('completed', 'Completed'),
        ('expired', 'Expired'),
    ]

    doctor_name = models.CharField(max_length=255)
    specialty = models.CharField(max_length=100)
    hospital = models.CharField(max_length=255, blank=True)
    date = models.DateField()
    # [{"name", "dosage", "frequency", "duration"}, ...]
    medications = models.JSONField(default=list)
    instructions = models.TextField(blank=True)
    status = models.CharField(max_length=16, choices=STATUS_CHOICES, default='active', db_index=True)

    def __str__(self) -> str:
        return f"Prescription from {self.doctor_name} - {self.date}"


def _lab_report_upload(instance, filename: str) -> str:
    ext = os.path.splitext(filename)[1]
    return f"lab-reports/{datetime.date.today().strftime('%Y/%m')}/{uuid.uuid4().hex}{ext}"


class LabReport(OwnedRecord):
    STATUS_CHOICES = [
        ('normal', 'Normal'),
        ('abnormal', 'Abnormal'),
        ('pending', 'Pending'),
    ]

    name = models.CharField(max_length=255)
    type = models.CharField(max_length=100)
    date = models.DateField(default=datetime.date.today)
    hospital = models.CharField(max_length=255, blank=True)
    doctor = models.CharField(max_length=255, blank=True)
    status = models.CharField(max_length=16, choices=STATUS_CHOICES, default='pending', db_index=True)
    file = models.FileField(upload_to=_lab_report_upload, max_length=512, blank=True)
    file_name = models.CharField(max_length=255, blank=True)
    size = models.CharField(max_length=32, blank=True)
    description = models.TextField(blank=True)

    def __str__(self) -> str:
        return f"{self.name} ({self.status})"


class AuditEvent(models.Model):
    user = models.ForeignKey(User, on_delete=models.SET_NULL, null=True, blank=True)
    action = models.CharField(max_length=64)
    object_type = models.CharField(max_length=64, blank=True, null=True)
    object_id = models.BigIntegerField(blank=True, null=True)
    detail = models.JSONField(default=dict, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        indexes = [
            models.Index(fields=['action', 'created_at'], name='care_audit_action_idx'),
            models.Index(fields=['object_type', 'object_id', 'created_at'], name='care_audit_object_idx'),
        ]

    def __str__(self):
        return f"{self.action}:{self.user_id}@{self.created_at:%F %T}"
