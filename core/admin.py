"""
Django admin registrations for the core models.

Superusers can inspect users, inventory rows and the audit trail via
the ``/admin/`` URL.
"""

from django.contrib import admin

from .models import Inventory, OperationLog, User


@admin.register(User)
class UserAdmin(admin.ModelAdmin):
    list_display = ('email', 'role', 'display_name', 'is_staff', 'is_superuser', 'created_at')
    list_filter = ('role', 'is_staff')
    search_fields = ('email', 'name', 'organisation_name', 'hospital_name')


@admin.register(Inventory)
class InventoryAdmin(admin.ModelAdmin):
    list_display = ('id', 'organisation', 'inventory_type', 'blood_group', 'quantity', 'email', 'created_at')
    list_filter = ('inventory_type', 'blood_group')
    search_fields = ('email', 'organisation__email', 'organisation__organisation_name')
    raw_id_fields = ('organisation', 'donor', 'hospital')


@admin.register(OperationLog)
class OperationLogAdmin(admin.ModelAdmin):
    list_display = ('id', 'action', 'user', 'object_type', 'object_id', 'status', 'ip', 'created_at')
    list_filter = ('action', 'status')
    search_fields = ('user__email', 'object_id')
