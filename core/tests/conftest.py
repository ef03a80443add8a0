import pytest
from django.core.cache import cache

from core.models import User

PASSWORD = 'Str0ng-Passw0rd!'


@pytest.fixture(autouse=True)
def _clear_throttle_cache():
    # throttling counters live in the cache
    cache.clear()
    yield
    cache.clear()


def make_user(role, email, **extra):
    names = {
        User.ROLE_ORGANISATION: {'organisation_name': email.split('@')[0]},
        User.ROLE_HOSPITAL: {'hospital_name': email.split('@')[0]},
    }.get(role, {'name': email.split('@')[0]})
    names.update(extra)
    return User.objects.create_user(
        username=email, email=email, password=PASSWORD, role=role,
        address='1 Main Street', phone='5550000', **names,
    )


@pytest.fixture
def organisation(db):
    return make_user(User.ROLE_ORGANISATION, 'org@example.com')


@pytest.fixture
def donor(db):
    return make_user(User.ROLE_DONOR, 'donor@example.com')


@pytest.fixture
def hospital(db):
    return make_user(User.ROLE_HOSPITAL, 'hospital@example.com')
