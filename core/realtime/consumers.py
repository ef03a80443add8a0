import json
from channels.generic.websocket import AsyncWebsocketConsumer

from core.models import User
from core.services.realtime import organisation_group


class InventoryUpdatesConsumer(AsyncWebsocketConsumer):
    """Pushes ``inventory.changed`` events to an organisation's dashboards."""

    async def connect(self):
        user = self.scope.get("user")
        if not user or not getattr(user, "is_authenticated", False):
            await self.close(code=4001)
            return
        if user.role != User.ROLE_ORGANISATION:
            await self.close(code=4003)
            return
        self.group_name = organisation_group(user.id)
        await self.channel_layer.group_add(self.group_name, self.channel_name)
        await self.accept()
        await self.send(json.dumps({"type": "welcome", "message": "connected"}))

    async def disconnect(self, close_code):
        if hasattr(self, "group_name"):
            await self.channel_layer.group_discard(self.group_name, self.channel_name)

    async def inventory_changed(self, event):
        # event: {"type": "inventory.changed", "organisation": id, "bloodGroup": ..., ...}
        await self.send(json.dumps(event))
