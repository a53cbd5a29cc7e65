"""
Tests for accounts app authentication.
"""
from datetime import timedelta

import pytest
from django.contrib.auth import get_user_model
from django.utils import timezone
from rest_framework.test import APIClient

from accounts.models import UserSession
from accounts.sessions import issue_token

User = get_user_model()


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def create_user():
    def _create_user(email="test@example.com", password="testpass123"):
        return User.objects.create_user(
            email=email,
            username=email,
            password=password
        )
    return _create_user


@pytest.fixture
def authenticated_client(api_client, create_user):
    user = create_user()
    token, _ = issue_token(user)
    api_client.credentials(HTTP_AUTHORIZATION=f'Bearer {token}')
    return api_client, user


@pytest.mark.django_db
class TestRegistration:

    def test_register_success(self, api_client):
        response = api_client.post('/api/users/register', {
            'email': 'newuser@example.com',
            'password': 'securepass123',
            'first_name': 'New',
            'last_name': 'User',
        })
        assert response.status_code == 201
        assert response.data['email'] == 'newuser@example.com'
        assert response.data['first_name'] == 'New'
        assert 'token' in response.data
        assert 'expires_at' in response.data
        assert User.objects.filter(email='newuser@example.com').exists()

    def test_register_token_is_usable(self, api_client):
        response = api_client.post('/api/users/register', {
            'email': 'newuser@example.com',
            'password': 'securepass123',
        })
        api_client.credentials(HTTP_AUTHORIZATION=f"Bearer {response.data['token']}")
        me = api_client.get('/api/users/me')
        assert me.status_code == 200
        assert me.data['user_id'] == response.data['user_id']

    def test_register_duplicate_email(self, api_client, create_user):
        user = create_user(email='duplicate@example.com')
        response = api_client.post('/api/users/register', {
            'email': user.email,
            'password': 'securepass123'
        })
        assert response.status_code == 409
        assert response.data['error_code'] == 'conflict'

    def test_register_duplicate_email_is_case_insensitive(self, api_client, create_user):
        create_user(email='duplicate@example.com')
        response = api_client.post('/api/users/register', {
            'email': 'Duplicate@Example.com',
            'password': 'securepass123'
        })
        assert response.status_code == 409

    def test_register_short_password(self, api_client):
        response = api_client.post('/api/users/register', {
            'email': 'test@example.com',
            'password': 'short'
        })
        assert response.status_code == 400
        assert response.data['error_code'] == 'validation_error'
        assert 'password' in response.data['errors']

    def test_register_invalid_email(self, api_client):
        response = api_client.post('/api/users/register', {
            'email': 'not-an-email',
            'password': 'securepass123'
        })
        assert response.status_code == 400


@pytest.mark.django_db
class TestLogin:

    def test_login_success(self, api_client, create_user):
        user = create_user()
        response = api_client.post('/api/users/login', {
            'email': user.email,
            'password': 'testpass123'
        })
        assert response.status_code == 200
        assert 'token' in response.data
        assert response.data['user_id'] == str(user.pk)
        assert 'expires_at' in response.data

    def test_login_records_last_login_and_session(self, api_client, create_user):
        user = create_user()
        api_client.post('/api/users/login', {
            'email': user.email,
            'password': 'testpass123'
        })
        user.refresh_from_db()
        assert user.last_login is not None
        assert UserSession.objects.filter(user=user).count() == 1

    def test_login_invalid_credentials(self, api_client, create_user):
        create_user()
        response = api_client.post('/api/users/login', {
            'email': 'test@example.com',
            'password': 'wrongpassword'
        })
        assert response.status_code == 401
        assert response.data['error_code'] == 'auth_error'
        assert response.data['message'] == 'Invalid credentials'

    def test_login_unknown_user(self, api_client):
        response = api_client.post('/api/users/login', {
            'email': 'nobody@example.com',
            'password': 'whatever123'
        })
        assert response.status_code == 401

    def test_login_missing_fields(self, api_client):
        response = api_client.post('/api/users/login', {
            'email': 'test@example.com'
        })
        assert response.status_code == 400


@pytest.mark.django_db
class TestSessions:

    def test_me_endpoint_authenticated(self, authenticated_client):
        client, user = authenticated_client
        response = client.get('/api/users/me')
        assert response.status_code == 200
        assert response.data['email'] == user.email

    def test_me_endpoint_unauthenticated(self, api_client):
        response = api_client.get('/api/users/me')
        assert response.status_code == 401
        assert response.data['error_code'] == 'auth_error'

    def test_update_profile(self, authenticated_client):
        client, user = authenticated_client
        response = client.put('/api/users/me', {'first_name': 'Ada', 'password': 'newpass1234'})
        assert response.status_code == 200
        assert response.data['first_name'] == 'Ada'
        user.refresh_from_db()
        assert user.check_password('newpass1234')

    def test_logout_revokes_token(self, authenticated_client):
        client, user = authenticated_client
        response = client.post('/api/users/logout')
        assert response.status_code == 200
        assert not UserSession.objects.filter(user=user).exists()

        response = client.get('/api/users/me')
        assert response.status_code == 401

    def test_expired_session_is_rejected(self, authenticated_client):
        client, user = authenticated_client
        UserSession.objects.filter(user=user).update(expires_at=timezone.now() - timedelta(minutes=1))
        response = client.get('/api/users/me')
        assert response.status_code == 401

    def test_invalid_token(self, api_client):
        api_client.credentials(HTTP_AUTHORIZATION='Bearer not-a-token')
        response = api_client.get('/api/users/me')
        assert response.status_code == 401
