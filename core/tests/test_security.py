import pytest
from django.urls import reverse
from rest_framework.test import APIClient
from rest_framework_simplejwt.token_blacklist.models import BlacklistedToken

from core.models import OperationLog, User
from .conftest import PASSWORD, make_user

pytestmark = pytest.mark.django_db


def login(client, email, password=PASSWORD, role='donar'):
    return client.post(reverse('login'), {'email': email, 'password': password, 'role': role}, format='json')


def register_body(**overrides):
    body = {
        'role': 'organisation',
        'email': 'New.Org@Example.com',
        'password': PASSWORD,
        'organisationName': 'New <b>Org</b>',
        'address': '2 High Street',
        'phone': '5551234',
    }
    body.update(overrides)
    return body


def test_register_creates_user_and_sanitises_names():
    client = APIClient()
    r = client.post(reverse('register'), register_body(), format='json')
    assert r.status_code == 201
    assert r.data['success'] is True
    u = User.objects.get(email='new.org@example.com')
    assert u.role == 'organisation'
    assert u.organisation_name == 'New Org'
    assert u.check_password(PASSWORD)
    assert r.data['user']['_id'] == u.id
    assert 'password' not in r.data['user']


def test_register_keeps_plain_ampersands_and_strips_links():
    body = register_body(role='hospital', email='ab@example.com', organisationName='',
                         hospitalName='A & B <a href="http://x">Hospital</a><script>x</script>')
    r = APIClient().post(reverse('register'), body, format='json')
    assert r.status_code == 201
    name = User.objects.get(email='ab@example.com').hospital_name
    assert name.startswith('A & B Hospital')
    assert '<' not in name


def test_register_duplicate_email_is_reported_not_raised():
    make_user('donar', 'new.org@example.com')
    r = APIClient().post(reverse('register'), register_body(), format='json')
    assert r.status_code == 200
    assert r.data == {'success': False, 'message': 'User Already exists'}


def test_register_requires_role_name_field():
    r = APIClient().post(reverse('register'), register_body(role='hospital'), format='json')
    assert r.status_code == 400
    assert 'hospitalName' in r.data['error']


def test_register_rejects_weak_password():
    r = APIClient().post(reverse('register'), register_body(password='123'), format='json')
    assert r.status_code == 400
    assert 'password' in r.data['error']


def test_login_returns_bearer_token_usable_for_current_user():
    make_user('donar', 'donor@example.com')
    client = APIClient()
    r = login(client, 'donor@example.com')
    assert r.status_code == 200
    assert r.data['token'] and r.data['refresh']
    assert r.data['user']['role'] == 'donar'
    client.credentials(HTTP_AUTHORIZATION=f"Bearer {r.data['token']}")
    me = client.get(reverse('current-user'))
    assert me.status_code == 200
    assert me.data['user']['email'] == 'donor@example.com'
    assert OperationLog.objects.filter(action='login', status='success').count() == 1


def test_login_unknown_email_is_404():
    r = login(APIClient(), 'ghost@example.com')
    assert r.status_code == 404
    assert r.data['success'] is False


def test_login_role_mismatch_is_rejected():
    make_user('donar', 'donor@example.com')
    r = login(APIClient(), 'donor@example.com', role='admin')
    assert r.status_code == 400
    assert r.data['message'] == 'Role does not match'


def test_login_wrong_password_is_rejected_and_audited():
    make_user('hospital', 'hospital@example.com')
    r = login(APIClient(), 'hospital@example.com', password='wrong-password', role='hospital')
    assert r.status_code == 400
    assert 'token' not in r.data
    assert OperationLog.objects.filter(action='login', status='fail').exists()


def test_invalid_bearer_token_is_401():
    client = APIClient()
    client.credentials(HTTP_AUTHORIZATION='Bearer not-a-token')
    r = client.get(reverse('current-user'))
    assert r.status_code == 401
    assert r.data['success'] is False
    assert 'WWW-Authenticate' in r


def test_legacy_token_scheme_is_not_accepted():
    make_user('donar', 'donor@example.com')
    client = APIClient()
    token = login(client, 'donor@example.com').data['token']
    client.credentials(HTTP_AUTHORIZATION=f'Token {token}')
    assert client.get(reverse('current-user')).status_code == 401


def test_refresh_and_logout_blacklists_refresh_token():
    make_user('donar', 'donor@example.com')
    client = APIClient()
    data = login(client, 'donor@example.com').data
    r = client.post(reverse('refresh'), {'refresh': data['refresh']}, format='json')
    assert r.status_code == 200
    assert r.data['token']
    refresh = r.data.get('refresh', data['refresh'])

    client.credentials(HTTP_AUTHORIZATION=f"Bearer {r.data['token']}")
    r = client.post(reverse('logout'), {'refresh': refresh}, format='json')
    assert r.status_code == 200
    assert r.data['blacklisted'] == 1
    assert BlacklistedToken.objects.count() >= 1

    r = APIClient().post(reverse('refresh'), {'refresh': refresh}, format='json')
    assert r.status_code == 401


def test_logout_rejects_someone_elses_refresh_token():
    make_user('donar', 'donor@example.com')
    make_user('hospital', 'hospital@example.com')
    client = APIClient()
    other_refresh = login(client, 'hospital@example.com', role='hospital').data['refresh']
    token = login(client, 'donor@example.com').data['token']
    client.credentials(HTTP_AUTHORIZATION=f'Bearer {token}')
    r = client.post(reverse('logout'), {'refresh': other_refresh}, format='json')
    assert r.status_code == 400


def test_refresh_with_garbage_is_401():
    r = APIClient().post(reverse('refresh'), {'refresh': 'garbage'}, format='json')
    assert r.status_code == 401
    assert r.data['success'] is False


def test_healthz():
    r = APIClient().get(reverse('healthz'))
    assert r.status_code == 200
    assert r.json() == {'success': True, 'db': True}
