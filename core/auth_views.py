"""
Authentication views.

This module defines the register/login endpoints used by the front-end
together with the current-user, token refresh and logout endpoints.
By isolating these views from the authentication class (see
``core.authentication``) we prevent circular imports when Django REST
framework initialises authentication classes.
"""
from __future__ import annotations

import logging

from django.contrib.auth import authenticate
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.serializers import TokenRefreshSerializer
from rest_framework_simplejwt.tokens import RefreshToken
from rest_framework_simplejwt.token_blacklist.models import BlacklistedToken, OutstandingToken
from rest_framework.decorators import api_view, permission_classes, throttle_classes
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response

from core.throttling import LoginRateThrottle, RegisterRateThrottle
from core.serializers.auth import LoginSerializer, RegisterSerializer
from core.services.audit import log_action
from core.services.users import create_user, format_user

from .models import User

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------
# Register
# ---------------------------------------------------------------------
@api_view(['POST'])
@permission_classes([AllowAny])
@throttle_classes([RegisterRateThrottle])
def register_view(request):
    s = RegisterSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    vd = s.validated_data

    if User.objects.filter(email=vd['email']).exists():
        return Response({'success': False, 'message': 'User Already exists'}, status=200)

    user = create_user(**vd)
    log_action(user=user, action='register', object_type='user', object_id=user.id,
               detail={'role': user.role}, request=request)
    logger.info("Registered %s user %s", user.role, user.id)
    return Response({
        'success': True,
        'message': 'User Registered Successfully',
        'user': format_user(user),
    }, status=201)


# ---------------------------------------------------------------------
# Email/password login (role must match)
# ---------------------------------------------------------------------
@api_view(['POST'])
@permission_classes([AllowAny])
@throttle_classes([LoginRateThrottle])
def login_view(request):
    """
    Login with email, password and the role the client is signing in as.
    Returns a bearer access token in ``token`` and a refresh token.
    """
    s = LoginSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    vd = s.validated_data

    existing = User.objects.filter(email=vd['email']).first()
    if not existing:
        return Response({'success': False, 'message': 'Invalid Credentials'}, status=404)
    if existing.role != vd['role']:
        return Response({'success': False, 'message': 'Role does not match'}, status=400)

    user = authenticate(request, username=existing.username, password=vd['password'])
    if not user:
        log_action(user=existing, action='login', object_type='user', object_id=existing.id,
                   detail={'result': 'fail'}, request=request, status='fail')
        return Response({'success': False, 'message': 'Invalid Credentials'}, status=400)

    log_action(user=user, action='login', object_type='user', object_id=user.id,
               detail={'result': 'ok'}, request=request)

    refresh = RefreshToken.for_user(user)
    return Response({
        'success': True,
        'message': 'Login Successfully',
        'token': str(refresh.access_token),
        'refresh': str(refresh),
        'user': format_user(user),
    }, status=200)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def current_user_view(request):
    return Response({
        'success': True,
        'message': 'User Fetched Successfully',
        'user': format_user(request.user),
    })


# ---------------------------------------------------------------------
# JWT: refresh & logout
# ---------------------------------------------------------------------
@api_view(['POST'])
@permission_classes([AllowAny])
def refresh_view(request):
    """Return a new access token from a refresh token."""
    s = TokenRefreshSerializer(data=request.data)
    try:
        s.is_valid(raise_exception=True)
    except TokenError as e:
        return Response({'success': False, 'message': str(e)}, status=401)
    data = dict(s.validated_data)
    payload = {'success': True, 'message': 'Token refreshed', 'token': data['access']}
    if 'refresh' in data:
        payload['refresh'] = data['refresh']
    return Response(payload)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def logout_view(request):
    """Blacklist the given refresh token, or all of the caller's tokens."""
    refresh = request.data.get('refresh')
    count = 0
    if refresh:
        try:
            token = RefreshToken(refresh)
        except TokenError as e:
            return Response({'success': False, 'message': str(e)}, status=400)
        if str(token.get('user_id')) != str(request.user.id):
            return Response({'success': False, 'message': 'Token does not belong to caller'}, status=400)
        token.blacklist()
        count = 1
    else:
        for outstanding in OutstandingToken.objects.filter(user=request.user):
            _, created = BlacklistedToken.objects.get_or_create(token=outstanding)
            count += int(created)
    log_action(user=request.user, action='logout', object_type='user', object_id=request.user.id,
               detail={'blacklisted': count}, request=request)
    return Response({'success': True, 'message': 'Logged out', 'blacklisted': count})
