from typing import Dict, List, Optional

from django.conf import settings
from django.db import transaction
from django.db.models import Count, Max, Q, Sum
from rest_framework.exceptions import ValidationError

from core.models import Inventory, User
from core.services.users import format_user


def format_inventory(item: Inventory) -> dict:
    return {
        '_id': item.id,
        'inventoryType': item.inventory_type,
        'bloodGroup': item.blood_group,
        'quantity': item.quantity,
        'email': item.email,
        'organisation': format_user(item.organisation),
        'donar': format_user(item.donor),
        'hospital': format_user(item.hospital),
        'createdAt': item.created_at.isoformat(),
        'updatedAt': item.updated_at.isoformat(),
    }


def format_donation(item: Inventory) -> dict:
    """Shape read by the dashboard's "recent donations" table."""
    return {
        'donorName': item.donor.display_name if item.donor else item.email,
        'bloodGroup': item.blood_group,
        'quantity': item.quantity,
        'donationDate': item.created_at.isoformat(),
    }


def _with_related(qs):
    return qs.select_related('organisation', 'donor', 'hospital')


def available_quantity(organisation: User, blood_group: str) -> int:
    totals = Inventory.objects.filter(organisation=organisation, blood_group=blood_group).aggregate(
        total_in=Sum('quantity', filter=Q(inventory_type=Inventory.TYPE_IN)),
        total_out=Sum('quantity', filter=Q(inventory_type=Inventory.TYPE_OUT)),
    )
    return (totals['total_in'] or 0) - (totals['total_out'] or 0)


def create_inventory(organisation: User, *, email: str, inventoryType: str, bloodGroup: str,
                     quantity: int) -> Inventory:
    """Record a donation or usage for ``organisation``.

    ``email`` must belong to a donor for ``in`` rows and to a hospital for
    ``out`` rows.  Usages may not exceed what is currently available.
    """
    expected_role = User.ROLE_DONOR if inventoryType == Inventory.TYPE_IN else User.ROLE_HOSPITAL
    counterpart = User.objects.filter(email=email).first()
    if not counterpart:
        raise ValidationError({'email': f'No user registered with {email}'})
    if counterpart.role != expected_role:
        raise ValidationError({'email': f'{email} is not a {expected_role} account'})

    with transaction.atomic():
        if inventoryType == Inventory.TYPE_OUT:
            available = available_quantity(organisation, bloodGroup)
            if available < quantity:
                raise ValidationError(f'Only {available}ML of {bloodGroup.upper()} is available')
        return Inventory.objects.create(
            organisation=organisation,
            inventory_type=inventoryType,
            blood_group=bloodGroup,
            quantity=quantity,
            email=email,
            donor=counterpart if inventoryType == Inventory.TYPE_IN else None,
            hospital=counterpart if inventoryType == Inventory.TYPE_OUT else None,
        )


def organisation_inventory(organisation: User, limit: Optional[int] = None):
    qs = _with_related(Inventory.objects.filter(organisation=organisation)).order_by('-created_at', '-id')
    return qs[:limit] if limit else qs


def recent_inventory(organisation: User) -> List[Inventory]:
    return list(organisation_inventory(organisation, settings.RECENT_INVENTORY_LIMIT))


def recent_donations(organisation: User) -> List[Inventory]:
    qs = organisation_inventory(organisation).filter(inventory_type=Inventory.TYPE_IN)
    return list(qs[:settings.RECENT_INVENTORY_LIMIT])


# filter key -> model lookup
FILTER_FIELDS: Dict[str, str] = {
    'inventoryType': 'inventory_type',
    'bloodGroup': 'blood_group',
    'hospital': 'hospital_id',
    'organisation': 'organisation_id',
    'donar': 'donor_id',
}


def filtered_inventory(filters: dict):
    lookups = {FILTER_FIELDS[k]: v for k, v in filters.items() if k in FILTER_FIELDS}
    return _with_related(Inventory.objects.filter(**lookups)).order_by('-created_at', '-id')


def donors_for_organisation(organisation: User):
    return User.objects.filter(
        role=User.ROLE_DONOR,
        donations__organisation=organisation,
    ).distinct().order_by('id')


def hospitals_for_organisation(organisation: User) -> List[dict]:
    """Hospitals served by ``organisation`` with usage counts."""
    qs = (
        User.objects.filter(role=User.ROLE_HOSPITAL, consumptions__organisation=organisation)
        .annotate(
            total_requests=Count('consumptions', filter=Q(consumptions__organisation=organisation)),
            last_request=Max('consumptions__created_at', filter=Q(consumptions__organisation=organisation)),
        )
        .order_by('id')
    )
    data = []
    for hospital in qs:
        row = format_user(hospital)
        row['totalRequests'] = hospital.total_requests
        row['lastRequest'] = hospital.last_request.isoformat() if hospital.last_request else None
        data.append(row)
    return data


def organisations_for_donor(donor: User):
    return User.objects.filter(
        role=User.ROLE_ORGANISATION,
        organisation_inventory__donor=donor,
    ).distinct().order_by('id')


def organisations_for_hospital(hospital: User):
    return User.objects.filter(
        role=User.ROLE_ORGANISATION,
        organisation_inventory__hospital=hospital,
    ).distinct().order_by('id')
