"""
Custom permission classes for role based access control.
"""
from rest_framework.permissions import BasePermission

from .models import User


def _has_role(request, *roles) -> bool:
    user = getattr(request, "user", None)
    return bool(user and user.is_authenticated and getattr(user, "role", None) in roles)


class IsAdminRole(BasePermission):
    """Allow access only to users with the admin role."""
    message = "Only admins can access this resource"

    def has_permission(self, request, view) -> bool:  # type: ignore[override]
        return _has_role(request, User.ROLE_ADMIN)


class IsOrganisation(BasePermission):
    """Allow access only to organisations (inventory owners)."""
    message = "Only organisations can access this resource"

    def has_permission(self, request, view) -> bool:  # type: ignore[override]
        return _has_role(request, User.ROLE_ORGANISATION)


class IsDonor(BasePermission):
    message = "Only donors can access this resource"

    def has_permission(self, request, view) -> bool:  # type: ignore[override]
        return _has_role(request, User.ROLE_DONOR)


class IsHospital(BasePermission):
    message = "Only hospitals can access this resource"

    def has_permission(self, request, view) -> bool:  # type: ignore[override]
        return _has_role(request, User.ROLE_HOSPITAL)


class IsOrganisationOrHospital(BasePermission):
    """Organisations see their own stock; hospitals see what they received."""
    message = "Only organisations and hospitals can access this resource"

    def has_permission(self, request, view) -> bool:  # type: ignore[override]
        return _has_role(request, User.ROLE_ORGANISATION, User.ROLE_HOSPITAL)
