"""Core application for the blood bank backend.

This package contains models, serializers, views and route registrations
implementing the API contract expected by the front-end application.
"""
