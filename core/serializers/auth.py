import html

import bleach
from django.contrib.auth.password_validation import validate_password
from django.core.exceptions import ValidationError as DjangoValidationError
from rest_framework import serializers

from core.models import User


def _clean(v):
    # all markup is dropped; names are plain text, so entities are unescaped again
    return html.unescape(bleach.clean((v or '').strip(), tags=set(), strip=True))


class LoginSerializer(serializers.Serializer):
    email = serializers.EmailField()
    password = serializers.CharField()
    role = serializers.ChoiceField(choices=[r for r, _ in User.ROLE_CHOICES])

    def validate_email(self, v):
        return v.strip().lower()

    def validate_password(self, v):
        if not v:
            raise serializers.ValidationError('Password is required')
        return v


class RegisterSerializer(serializers.Serializer):
    role = serializers.ChoiceField(choices=[r for r, _ in User.ROLE_CHOICES])
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True)
    name = serializers.CharField(required=False, allow_blank=True, max_length=255)
    organisationName = serializers.CharField(required=False, allow_blank=True, max_length=255)
    hospitalName = serializers.CharField(required=False, allow_blank=True, max_length=255)
    website = serializers.CharField(required=False, allow_blank=True, max_length=255)
    address = serializers.CharField(max_length=500)
    phone = serializers.CharField(max_length=32)

    def validate_email(self, v):
        return v.strip().lower()

    def validate_name(self, v):
        return _clean(v)

    def validate_organisationName(self, v):
        return _clean(v)

    def validate_hospitalName(self, v):
        return _clean(v)

    def validate_website(self, v):
        return _clean(v)

    def validate_address(self, v):
        v = _clean(v)
        if not v:
            raise serializers.ValidationError('Address is required')
        return v

    def validate_phone(self, v):
        v = _clean(v)
        if not v:
            raise serializers.ValidationError('Phone is required')
        return v

    def validate(self, data):
        role = data['role']
        # each role carries its own display name field
        required = {
            User.ROLE_ADMIN: 'name',
            User.ROLE_DONOR: 'name',
            User.ROLE_ORGANISATION: 'organisationName',
            User.ROLE_HOSPITAL: 'hospitalName',
        }[role]
        if not data.get(required):
            raise serializers.ValidationError({required: f'{required} is required for role {role}'})
        try:
            validate_password(data['password'])
        except DjangoValidationError as e:
            raise serializers.ValidationError({'password': e.messages})
        return data
