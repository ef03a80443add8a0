"""
Inventory endpoints.

Organisations record donations ("in") and usages ("out") and list
their own stock history.  Donors and hospitals can see which
organisations they have dealt with.
"""
from __future__ import annotations

import logging

from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from core.models import User
from core.permissions import IsDonor, IsHospital, IsOrganisation, IsOrganisationOrHospital
from core.serializers.inventory import InventoryCreateSerializer, InventoryFilterSerializer
from core.services.audit import log_action
from core.services.inventory import (
    create_inventory,
    donors_for_organisation,
    filtered_inventory,
    format_donation,
    format_inventory,
    hospitals_for_organisation,
    organisation_inventory,
    organisations_for_donor,
    organisations_for_hospital,
    recent_donations,
    recent_inventory,
)
from core.services.realtime import broadcast_inventory_change
from core.services.users import format_user

logger = logging.getLogger(__name__)


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsOrganisation])
def create_inventory_view(request):
    """Record a donation or usage for the calling organisation.

    ``email`` names the donor (``in``) or hospital (``out``).  Usages
    larger than the available quantity of the group are rejected.
    """
    s = InventoryCreateSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    item = create_inventory(request.user, **s.validated_data)
    log_action(user=request.user, action='inventory_create', object_type='inventory', object_id=item.id,
               detail={'type': item.inventory_type, 'bloodGroup': item.blood_group, 'quantity': item.quantity},
               request=request)
    broadcast_inventory_change(item)
    logger.info("Org %s recorded %s %s x%s", request.user.id, item.inventory_type, item.blood_group, item.quantity)
    return Response({
        'success': True,
        'message': 'New Blood Record Added',
        'inventory': format_inventory(item),
    }, status=201)


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsOrganisation])
def get_inventory(request):
    items = organisation_inventory(request.user)
    return Response({
        'success': True,
        'message': 'Get all records successfully',
        'inventory': [format_inventory(i) for i in items],
    })


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsOrganisation])
def get_recent_inventory(request):
    return Response({
        'success': True,
        'message': 'Recent Inventory Data',
        'inventory': [format_inventory(i) for i in recent_inventory(request.user)],
        'donations': [format_donation(i) for i in recent_donations(request.user)],
    })


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsOrganisationOrHospital])
def get_inventory_hospital(request):
    """Filtered inventory.  Hospitals only ever see their own usages."""
    raw = request.data.get('filters') or {}
    if not isinstance(raw, dict):
        raw = {}
    s = InventoryFilterSerializer(data=raw)
    s.is_valid(raise_exception=True)
    filters = dict(s.validated_data)
    if request.user.role == User.ROLE_HOSPITAL:
        filters['hospital'] = request.user.id
    else:
        filters['organisation'] = request.user.id
    items = filtered_inventory(filters)
    return Response({
        'success': True,
        'message': 'Get hospital consumer records successfully',
        'inventory': [format_inventory(i) for i in items],
    })


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsOrganisation])
def get_donars(request):
    donors = donors_for_organisation(request.user)
    return Response({
        'success': True,
        'message': 'Donar Record Fetched Successfully',
        'donars': [format_user(d) for d in donors],
    })


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsOrganisation])
def get_hospitals(request):
    return Response({
        'success': True,
        'message': 'Hospitals Data Fetched Successfully',
        'hospitals': hospitals_for_organisation(request.user),
    })


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsDonor])
def get_organisation(request):
    orgs = organisations_for_donor(request.user)
    return Response({
        'success': True,
        'message': 'Org Data Fetched Successfully',
        'organisations': [format_user(o) for o in orgs],
    })


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsHospital])
def get_organisation_for_hospital(request):
    orgs = organisations_for_hospital(request.user)
    return Response({
        'success': True,
        'message': 'Hospital Org Data Fetched Successfully',
        'organisations': [format_user(o) for o in orgs],
    })
