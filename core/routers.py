"""
URL mappings for the blood bank API.

Paths mirror the ones the React client calls, including the
misspelled ``get-orgnaisation`` aliases and ``donar-list``.  Trailing
slashes are deliberately omitted.
"""
from django.urls import path, include

from .auth_views import current_user_view, login_view, logout_view, refresh_view, register_view
from .views import admin_users, analytics, health, inventory

urlpatterns = [
    path('metrics', include('django_prometheus.urls')),
    path('healthz', health.healthz, name='healthz'),

    # Authentication
    path('api/v1/auth/register', register_view, name='register'),
    path('api/v1/auth/login', login_view, name='login'),
    path('api/v1/auth/current-user', current_user_view, name='current-user'),
    path('api/v1/auth/refresh', refresh_view, name='refresh'),
    path('api/v1/auth/logout', logout_view, name='logout'),

    # Inventory
    path('api/v1/inventory/create-inventory', inventory.create_inventory_view, name='create-inventory'),
    path('api/v1/inventory/get-inventory', inventory.get_inventory, name='get-inventory'),
    path('api/v1/inventory/get-recent-inventory', inventory.get_recent_inventory, name='get-recent-inventory'),
    path('api/v1/inventory/get-inventory-hospital', inventory.get_inventory_hospital,
         name='get-inventory-hospital'),
    path('api/v1/inventory/get-donars', inventory.get_donars, name='get-donars'),
    path('api/v1/inventory/get-hospitals', inventory.get_hospitals, name='get-hospitals'),
    path('api/v1/inventory/get-organisation', inventory.get_organisation, name='get-organisation'),
    path('api/v1/inventory/get-organisation-for-hospital', inventory.get_organisation_for_hospital,
         name='get-organisation-for-hospital'),
    path('api/v1/inventory/get-orgnaisation', inventory.get_organisation),
    path('api/v1/inventory/get-orgnaisation-for-hospital', inventory.get_organisation_for_hospital),

    # Admin
    path('api/v1/admin/donor-list', admin_users.donar_list, name='donor-list'),
    path('api/v1/admin/donar-list', admin_users.donar_list),
    path('api/v1/admin/hospital-list', admin_users.hospital_list, name='hospital-list'),
    path('api/v1/admin/org-list', admin_users.org_list, name='org-list'),
    path('api/v1/admin/delete-donar/<int:pk>', admin_users.delete_donar, name='delete-donar'),
    path('api/v1/admin/delete-hospital/<int:pk>', admin_users.delete_hospital, name='delete-hospital'),
    path('api/v1/admin/delete-organization/<int:pk>', admin_users.delete_organisation,
         name='delete-organization'),

    # Analytics
    path('api/v1/analytics/bloodGroups-data', analytics.blood_groups_data, name='bloodgroups-data'),
    path('api/v1/analytics/stats', analytics.stats, name='stats'),
]
