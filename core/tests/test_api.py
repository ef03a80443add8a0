"""
Integration tests for the blood bank API.

These tests exercise inventory recording, the donor/hospital/organisation
listings, admin user management and role based access control.  The
tests use Django REST Framework's APIClient within the APITestCase base
class.

To run the tests:

```
pytest -q core/tests
```
"""
from unittest import mock

from django.core.cache import cache
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from ..models import Inventory, OperationLog, User
from .conftest import make_user


class InventoryAPITests(APITestCase):
    def setUp(self) -> None:
        cache.clear()
        self.org = make_user(User.ROLE_ORGANISATION, 'org@example.com')
        self.other_org = make_user(User.ROLE_ORGANISATION, 'other-org@example.com')
        self.donor = make_user(User.ROLE_DONOR, 'donor@example.com')
        self.hospital = make_user(User.ROLE_HOSPITAL, 'hospital@example.com')
        self.admin = make_user(User.ROLE_ADMIN, 'admin@example.com')

    def as_user(self, user):
        self.client.force_authenticate(user)

    def create(self, **body):
        return self.client.post(reverse('create-inventory'), body, format='json')

    def donate(self, group='O+', quantity=100, org=None):
        return Inventory.objects.create(
            organisation=org or self.org, inventory_type='in', blood_group=group, quantity=quantity,
            email=self.donor.email, donor=self.donor,
        )

    def test_organisation_records_donation(self):
        self.as_user(self.org)
        with mock.patch('core.views.inventory.broadcast_inventory_change') as broadcast:
            r = self.create(email='donor@example.com', inventoryType='in', bloodGroup='A+', quantity=250)
        self.assertEqual(r.status_code, status.HTTP_201_CREATED)
        self.assertTrue(r.data['success'])
        item = Inventory.objects.get(pk=r.data['inventory']['_id'])
        self.assertEqual(item.organisation, self.org)
        self.assertEqual(item.donor, self.donor)
        self.assertIsNone(item.hospital)
        broadcast.assert_called_once_with(item)
        self.assertTrue(OperationLog.objects.filter(action='inventory_create', user=self.org).exists())

    def test_usage_within_availability_links_hospital(self):
        self.donate('B+', 300)
        self.as_user(self.org)
        r = self.create(email='hospital@example.com', inventoryType='out', bloodGroup='B+', quantity=120)
        self.assertEqual(r.status_code, status.HTTP_201_CREATED)
        self.assertEqual(r.data['inventory']['hospital']['_id'], self.hospital.id)

    def test_usage_over_availability_is_rejected(self):
        self.donate('O-', 100)
        self.donate('O-', 500, org=self.other_org)
        self.as_user(self.org)
        r = self.create(email='hospital@example.com', inventoryType='out', bloodGroup='O-', quantity=150)
        self.assertEqual(r.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(r.data['success'])
        self.assertEqual(r.data['message'], 'Only 100ML of O- is available')
        self.assertEqual(Inventory.objects.filter(organisation=self.org, inventory_type='out').count(), 0)

    def test_counterpart_role_must_match_type(self):
        self.as_user(self.org)
        r = self.create(email='hospital@example.com', inventoryType='in', bloodGroup='A+', quantity=10)
        self.assertEqual(r.status_code, status.HTTP_400_BAD_REQUEST)
        r = self.create(email='nobody@example.com', inventoryType='in', bloodGroup='A+', quantity=10)
        self.assertEqual(r.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('email', r.data['error'])

    def test_invalid_body_is_rejected(self):
        self.as_user(self.org)
        r = self.create(email='donor@example.com', inventoryType='in', bloodGroup='C+', quantity=0)
        self.assertEqual(r.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('bloodGroup', r.data['error'])
        self.assertIn('quantity', r.data['error'])

    def test_only_organisations_create_inventory(self):
        for user in (self.donor, self.hospital, self.admin):
            self.as_user(user)
            r = self.create(email='donor@example.com', inventoryType='in', bloodGroup='A+', quantity=10)
            self.assertEqual(r.status_code, status.HTTP_403_FORBIDDEN)

    def test_unauthenticated_request_is_401(self):
        r = self.client.get(reverse('get-inventory'))
        self.assertEqual(r.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertFalse(r.data['success'])

    def test_get_inventory_lists_own_rows_only(self):
        self.donate('A+', 10)
        self.donate('A-', 20)
        self.donate('B+', 30, org=self.other_org)
        self.as_user(self.org)
        r = self.client.get(reverse('get-inventory'))
        self.assertEqual(r.status_code, status.HTTP_200_OK)
        self.assertEqual(len(r.data['inventory']), 2)
        self.assertEqual(r.data['inventory'][0]['bloodGroup'], 'A-')

    def test_recent_inventory_returns_three(self):
        for q in (1, 2, 3, 4):
            self.donate('O+', q)
        self.as_user(self.org)
        r = self.client.get(reverse('get-recent-inventory'))
        self.assertEqual(r.status_code, status.HTTP_200_OK)
        self.assertEqual([i['quantity'] for i in r.data['inventory']], [4, 3, 2])
        self.assertEqual(len(r.data['donations']), 3)

    def test_hospital_filter_is_scoped_to_caller(self):
        self.donate('O+', 500)
        Inventory.objects.create(organisation=self.org, inventory_type='out', blood_group='O+', quantity=5,
                                 email=self.hospital.email, hospital=self.hospital)
        other_hospital = make_user(User.ROLE_HOSPITAL, 'other-hospital@example.com')
        Inventory.objects.create(organisation=self.org, inventory_type='out', blood_group='O+', quantity=7,
                                 email=other_hospital.email, hospital=other_hospital)
        self.as_user(self.hospital)
        r = self.client.post(reverse('get-inventory-hospital'),
                             {'filters': {'inventoryType': 'out', 'hospital': other_hospital.id}}, format='json')
        self.assertEqual(r.status_code, status.HTTP_200_OK)
        self.assertEqual([i['quantity'] for i in r.data['inventory']], [5])

    def test_organisation_filter(self):
        self.donate('O+', 500)
        self.donate('A+', 50)
        self.as_user(self.org)
        r = self.client.post(reverse('get-inventory-hospital'), {'filters': {'bloodGroup': 'A+'}}, format='json')
        self.assertEqual([i['quantity'] for i in r.data['inventory']], [50])

    def test_donor_and_hospital_listings(self):
        self.donate('O+', 500)
        self.donate('O-', 100)
        Inventory.objects.create(organisation=self.org, inventory_type='out', blood_group='O+', quantity=5,
                                 email=self.hospital.email, hospital=self.hospital)
        Inventory.objects.create(organisation=self.org, inventory_type='out', blood_group='O+', quantity=6,
                                 email=self.hospital.email, hospital=self.hospital)
        self.as_user(self.org)
        r = self.client.get(reverse('get-donars'))
        self.assertEqual([d['_id'] for d in r.data['donars']], [self.donor.id])
        r = self.client.get(reverse('get-hospitals'))
        self.assertEqual(len(r.data['hospitals']), 1)
        self.assertEqual(r.data['hospitals'][0]['totalRequests'], 2)
        self.assertIsNotNone(r.data['hospitals'][0]['lastRequest'])

    def test_organisation_listings_for_donor_and_hospital(self):
        self.donate('O+', 500)
        Inventory.objects.create(organisation=self.other_org, inventory_type='out', blood_group='O+', quantity=5,
                                 email=self.hospital.email, hospital=self.hospital)
        self.as_user(self.donor)
        r = self.client.get(reverse('get-organisation'))
        self.assertEqual([o['_id'] for o in r.data['organisations']], [self.org.id])
        r = self.client.get('/api/v1/inventory/get-orgnaisation')
        self.assertEqual(r.status_code, status.HTTP_200_OK)
        self.as_user(self.hospital)
        r = self.client.get(reverse('get-organisation-for-hospital'))
        self.assertEqual([o['_id'] for o in r.data['organisations']], [self.other_org.id])
        self.assertEqual(self.client.get(reverse('get-organisation')).status_code, status.HTTP_403_FORBIDDEN)


class AdminAPITests(APITestCase):
    def setUp(self) -> None:
        cache.clear()
        self.admin = make_user(User.ROLE_ADMIN, 'admin@example.com')
        self.org = make_user(User.ROLE_ORGANISATION, 'org@example.com')
        self.donor = make_user(User.ROLE_DONOR, 'donor@example.com')
        self.hospital = make_user(User.ROLE_HOSPITAL, 'hospital@example.com')
        self.client.force_authenticate(self.admin)

    def test_lists(self):
        r = self.client.get(reverse('donor-list'))
        self.assertEqual([u['email'] for u in r.data['donarData']], ['donor@example.com'])
        r = self.client.get('/api/v1/admin/donar-list')
        self.assertEqual(len(r.data['donarData']), 1)
        r = self.client.get(reverse('hospital-list'))
        self.assertEqual(r.data['hospitalData'][0]['_id'], self.hospital.id)
        r = self.client.get(reverse('org-list'))
        self.assertEqual(r.data['orgData'][0]['organisationName'], 'org')

    def test_delete_donor_keeps_inventory_rows(self):
        item = Inventory.objects.create(organisation=self.org, inventory_type='in', blood_group='O+',
                                        quantity=10, email=self.donor.email, donor=self.donor)
        r = self.client.delete(reverse('delete-donar', args=[self.donor.id]))
        self.assertEqual(r.status_code, status.HTTP_200_OK)
        self.assertFalse(User.objects.filter(pk=self.donor.id).exists())
        item.refresh_from_db()
        self.assertIsNone(item.donor)
        self.assertTrue(OperationLog.objects.filter(action='user_delete', object_id=str(self.donor.id)).exists())

    def test_deleting_donor_and_hospital_keeps_stats(self):
        Inventory.objects.create(organisation=self.org, inventory_type='in', blood_group='O+',
                                 quantity=10, email=self.donor.email, donor=self.donor)
        Inventory.objects.create(organisation=self.org, inventory_type='out', blood_group='O+',
                                 quantity=4, email=self.hospital.email, hospital=self.hospital)
        self.client.delete(reverse('delete-donar', args=[self.donor.id]))
        self.client.delete(reverse('delete-hospital', args=[self.hospital.id]))
        self.client.force_authenticate(self.org)
        data = self.client.get(reverse('stats')).data['data']
        self.assertEqual(data['totalDonations'], 10)
        self.assertEqual(data['totalUsed'], 4)
        self.assertEqual(data['totalDonors'], 1)
        self.assertEqual(data['totalHospitals'], 1)

    def test_delete_organisation_removes_its_inventory(self):
        Inventory.objects.create(organisation=self.org, inventory_type='in', blood_group='O+',
                                 quantity=10, email=self.donor.email, donor=self.donor)
        r = self.client.delete(reverse('delete-organization', args=[self.org.id]))
        self.assertEqual(r.status_code, status.HTTP_200_OK)
        self.assertEqual(Inventory.objects.count(), 0)

    def test_delete_checks_role(self):
        r = self.client.delete(reverse('delete-hospital', args=[self.donor.id]))
        self.assertEqual(r.status_code, status.HTTP_404_NOT_FOUND)
        self.assertFalse(r.data['success'])
        self.assertTrue(User.objects.filter(pk=self.donor.id).exists())

    def test_non_admin_is_forbidden(self):
        self.client.force_authenticate(self.org)
        self.assertEqual(self.client.get(reverse('donor-list')).status_code, status.HTTP_403_FORBIDDEN)
        r = self.client.delete(reverse('delete-donar', args=[self.donor.id]))
        self.assertEqual(r.status_code, status.HTTP_403_FORBIDDEN)
