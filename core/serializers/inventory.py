from rest_framework import serializers

from core.models import BLOOD_GROUPS, Inventory


class InventoryCreateSerializer(serializers.Serializer):
    email = serializers.EmailField()
    inventoryType = serializers.ChoiceField(choices=[Inventory.TYPE_IN, Inventory.TYPE_OUT])
    bloodGroup = serializers.ChoiceField(choices=BLOOD_GROUPS)
    quantity = serializers.IntegerField(min_value=1)

    def validate_email(self, v):
        return v.strip().lower()


class InventoryFilterSerializer(serializers.Serializer):
    """Whitelisted filters accepted by ``get-inventory-hospital``."""
    inventoryType = serializers.ChoiceField(choices=[Inventory.TYPE_IN, Inventory.TYPE_OUT], required=False)
    bloodGroup = serializers.ChoiceField(choices=BLOOD_GROUPS, required=False)
    hospital = serializers.IntegerField(min_value=1, required=False)
    organisation = serializers.IntegerField(min_value=1, required=False)
    donar = serializers.IntegerField(min_value=1, required=False)
