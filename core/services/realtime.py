import logging

from asgiref.sync import async_to_sync
from channels.layers import get_channel_layer
from django.utils import timezone

from core.models import Inventory

logger = logging.getLogger(__name__)


def organisation_group(organisation_id) -> str:
    return f"inventory.org.{organisation_id}"


def broadcast_inventory_change(item: Inventory) -> None:
    """Tell the owning organisation's dashboards to refetch analytics."""
    channel_layer = get_channel_layer()
    if channel_layer is None:
        return
    event = {
        "type": "inventory.changed",
        "organisation": item.organisation_id,
        "bloodGroup": item.blood_group,
        "inventoryType": item.inventory_type,
        "quantity": item.quantity,
        "ts": timezone.now().isoformat(),
    }
    async_to_sync(channel_layer.group_send)(organisation_group(item.organisation_id), event)
    logger.debug("Broadcast inventory change to org %s", item.organisation_id)
