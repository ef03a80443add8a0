"""
Bearer token authentication.

This module defines a subclass of simplejwt's ``JWTAuthentication``
so that settings and the WebSocket middleware share one stable import
path for token verification.  Keeping it apart from any view
definitions avoids circular imports when Django REST framework loads
authentication classes during initialization.
"""
from __future__ import annotations

from rest_framework_simplejwt.authentication import JWTAuthentication


class BearerAuthentication(JWTAuthentication):
    """Validate ``Authorization: Bearer <access token>`` headers.

    On success ``request.user`` is the caller; analytics and inventory
    endpoints take the organisation identity from it.
    """

    www_authenticate_realm = 'bloodbank'

    def user_for_token(self, raw_token: str):
        """Return the active user for a raw access token string."""
        validated = self.get_validated_token(raw_token)
        return self.get_user(validated)
