"""
Management command to populate the database with test data.
"""
import random
from datetime import timedelta

from django.core.management.base import BaseCommand
from django.contrib.auth.hashers import make_password
from django.db import transaction
from django.utils import timezone

from core.models import BLOOD_GROUPS, Inventory, User
from core.services.inventory import available_quantity


class Command(BaseCommand):
    help = 'Populate database with test users and inventory transactions'

    def add_arguments(self, parser):
        parser.add_argument('--transactions', type=int, default=60)
        parser.add_argument('--seed', type=int, default=None)

    def handle(self, *args, **options):
        if options['seed'] is not None:
            random.seed(options['seed'])
        self.stdout.write('Creating test data...')

        with transaction.atomic():
            orgs = self.create_users(User.ROLE_ORGANISATION, 2, 'organisation_name', 'Blood Bank')
            donors = self.create_users(User.ROLE_DONOR, 8, 'name', 'Donor')
            hospitals = self.create_users(User.ROLE_HOSPITAL, 3, 'hospital_name', 'Hospital')
            self.create_inventory(orgs, donors, hospitals, options['transactions'])

        self.stdout.write(self.style.SUCCESS('Test data created.'))

    def create_users(self, role, count, name_field, label):
        users = []
        for i in range(1, count + 1):
            email = f'{role}{i}@bloodbank.test'
            user, created = User.objects.get_or_create(
                email=email,
                defaults={
                    'username': email,
                    'role': role,
                    'password': make_password('Bl00d-bank!'),
                    name_field: f'{label} {i}',
                    'address': f'{i} Main Street',
                    'phone': f'555{random.randint(1000000, 9999999)}',
                },
            )
            users.append(user)
            if created:
                self.stdout.write(f'Created {role}: {email}')
        return users

    def create_inventory(self, orgs, donors, hospitals, count):
        now = timezone.now()
        created = 0
        for _ in range(count):
            org = random.choice(orgs)
            group = random.choice(BLOOD_GROUPS)
            available = available_quantity(org, group)
            # usages only when there is stock to draw from
            if available > 0 and random.random() < 0.35:
                hospital = random.choice(hospitals)
                item = Inventory.objects.create(
                    organisation=org, inventory_type=Inventory.TYPE_OUT, blood_group=group,
                    quantity=random.randint(1, available), hospital=hospital, email=hospital.email,
                )
            else:
                donor = random.choice(donors)
                item = Inventory.objects.create(
                    organisation=org, inventory_type=Inventory.TYPE_IN, blood_group=group,
                    quantity=random.randint(50, 500), donor=donor, email=donor.email,
                )
            # spread rows over the last 30 days
            Inventory.objects.filter(pk=item.pk).update(
                created_at=now - timedelta(days=random.randint(0, 30), minutes=random.randint(0, 1440))
            )
            created += 1
        self.stdout.write(f'Created {created} inventory transactions')

