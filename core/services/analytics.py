"""
Aggregation analytics over inventory transactions.

Everything here is a read-only projection of the ``Inventory`` table
for a single organisation, recomputed on every call.  Available blood
is ``in`` minus ``out`` and is allowed to go negative.
"""
from __future__ import annotations

from typing import Dict, List

from django.conf import settings
from django.db.models import Count, Q, Sum

from core.models import BLOOD_GROUPS, Inventory, User
from core.services.inventory import format_inventory


def _scoped(organisation: User):
    return Inventory.objects.filter(organisation=organisation)


def group_totals(organisation: User) -> Dict[tuple[str, str], int]:
    """Sum of quantity keyed by ``(blood_group, inventory_type)``."""
    rows = (
        _scoped(organisation)
        .values('blood_group', 'inventory_type')
        .annotate(total=Sum('quantity'))
        .order_by()
    )
    return {(r['blood_group'], r['inventory_type']): r['total'] or 0 for r in rows}


def blood_group_breakdown(organisation: User) -> List[dict]:
    """Per-group in/out/available, one record per group in fixed order.

    Groups without rows report zeros.  The ``availabeBlood`` key keeps
    the spelling the dashboard client reads.
    """
    totals = group_totals(organisation)
    data = []
    for group in BLOOD_GROUPS:
        total_in = totals.get((group, Inventory.TYPE_IN), 0)
        total_out = totals.get((group, Inventory.TYPE_OUT), 0)
        data.append({
            'bloodGroup': group,
            'totalIn': total_in,
            'totalOut': total_out,
            'availabeBlood': total_in - total_out,
        })
    return data


def organisation_stats(organisation: User, *, recent_limit: int | None = None) -> dict:
    """Totals, distinct donor/hospital counts and the latest transactions."""
    limit = settings.RECENT_TRANSACTIONS_LIMIT if recent_limit is None else recent_limit
    qs = _scoped(organisation)
    # counted by recorded email so rows of deleted accounts still count
    agg = qs.aggregate(
        total_in=Sum('quantity', filter=Q(inventory_type=Inventory.TYPE_IN)),
        total_out=Sum('quantity', filter=Q(inventory_type=Inventory.TYPE_OUT)),
        donors=Count('email', distinct=True, filter=Q(inventory_type=Inventory.TYPE_IN)),
        hospitals=Count('email', distinct=True, filter=Q(inventory_type=Inventory.TYPE_OUT)),
    )
    recent = (
        qs.select_related('donor', 'hospital', 'organisation')
        .order_by('-created_at', '-id')[:limit]
    )
    total_in = agg['total_in'] or 0
    total_out = agg['total_out'] or 0
    return {
        'totalDonations': total_in,
        'totalUsed': total_out,
        'totalAvailable': total_in - total_out,
        'totalDonors': agg['donors'] or 0,
        'totalHospitals': agg['hospitals'] or 0,
        'recentTransactions': [format_inventory(item) for item in recent],
    }
