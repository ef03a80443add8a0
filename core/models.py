"""
Database models for the blood bank backend.

The data model is small: users tagged by role and inventory
transactions recorded by organisations.  Available stock is never
stored; it is always derived from the transactions (see
:mod:`core.services.analytics`).
"""
from __future__ import annotations

from django.contrib.auth.models import AbstractUser
from django.core.validators import MinValueValidator
from django.db import models


# Fixed order used by every per-group report.
BLOOD_GROUPS = ['O+', 'O-', 'AB+', 'AB-', 'A+', 'A-', 'B+', 'B-']
BLOOD_GROUP_CHOICES = [(g, g) for g in BLOOD_GROUPS]


class User(AbstractUser):
    """Custom user model with a role and role specific profile fields.

    Roles mirror the front-end roles: 'admin', 'organisation', 'donar'
    and 'hospital'.  The donor role keeps the client's spelling so that
    stored values and JSON payloads agree.  ``username`` always holds
    the email address; login is by email.
    """
    ROLE_ADMIN = 'admin'
    ROLE_ORGANISATION = 'organisation'
    ROLE_DONOR = 'donar'
    ROLE_HOSPITAL = 'hospital'
    ROLE_CHOICES = [
        (ROLE_ADMIN, 'Admin'),
        (ROLE_ORGANISATION, 'Organisation'),
        (ROLE_DONOR, 'Donor'),
        (ROLE_HOSPITAL, 'Hospital'),
    ]
    role = models.CharField(max_length=20, choices=ROLE_CHOICES, default=ROLE_DONOR, db_index=True)
    email = models.EmailField(unique=True)
    name = models.CharField(max_length=255, blank=True)
    organisation_name = models.CharField(max_length=255, blank=True)
    hospital_name = models.CharField(max_length=255, blank=True)
    website = models.CharField(max_length=255, blank=True)
    address = models.CharField(max_length=500)
    phone = models.CharField(max_length=32)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    @property
    def display_name(self) -> str:
        if self.role == self.ROLE_ORGANISATION:
            return self.organisation_name or self.email
        if self.role == self.ROLE_HOSPITAL:
            return self.hospital_name or self.email
        return self.name or self.email

    def __str__(self) -> str:
        return f"{self.email} ({self.role})"


class Inventory(models.Model):
    """One donation ("in") or usage ("out") of a blood group.

    Rows are owned by the organisation that recorded them.  ``donor``
    is set for donations and ``hospital`` for usages; ``email`` keeps
    the address the row was recorded against.
    """
    TYPE_IN = 'in'
    TYPE_OUT = 'out'
    TYPE_CHOICES = [(TYPE_IN, 'in'), (TYPE_OUT, 'out')]

    inventory_type = models.CharField(max_length=3, choices=TYPE_CHOICES)
    blood_group = models.CharField(max_length=3, choices=BLOOD_GROUP_CHOICES)
    quantity = models.PositiveIntegerField(validators=[MinValueValidator(0)])
    email = models.EmailField()
    organisation = models.ForeignKey(User, on_delete=models.CASCADE, related_name='organisation_inventory')
    donor = models.ForeignKey(
        User, null=True, blank=True, on_delete=models.SET_NULL, related_name='donations'
    )
    hospital = models.ForeignKey(
        User, null=True, blank=True, on_delete=models.SET_NULL, related_name='consumptions'
    )
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name_plural = 'Inventory'
        indexes = [
            models.Index(fields=['organisation', 'inventory_type', 'blood_group'], name='core_invent_organis_5b1f0e_idx'),
            models.Index(fields=['organisation', 'created_at'], name='core_invent_organis_8c2d4a_idx'),
        ]

    def __str__(self) -> str:
        return f"{self.inventory_type} {self.quantity} of {self.blood_group} (org={self.organisation_id})"


class OperationLog(models.Model):
    ACTION_CHOICES = (
        ("login", "login"),
        ("register", "register"),
        ("logout", "logout"),
        ("inventory_create", "inventory_create"),
        ("user_delete", "user_delete"),
    )
    user = models.ForeignKey(User, null=True, blank=True, on_delete=models.SET_NULL)
    action = models.CharField(max_length=64, choices=ACTION_CHOICES)
    object_type = models.CharField(max_length=64, blank=True, null=True)
    object_id = models.CharField(max_length=64, blank=True, null=True)
    detail = models.JSONField(blank=True, null=True)
    ip = models.GenericIPAddressField(blank=True, null=True)
    status = models.CharField(max_length=16, default="success")
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        indexes = [
            models.Index(fields=["action", "created_at"], name="core_operat_action_3e7f21_idx"),
        ]

    def __str__(self):
        return f"{self.action}:{self.user_id}@{self.created_at:%F %T}"
