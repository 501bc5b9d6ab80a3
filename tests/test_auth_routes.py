"""
Tests for login, registration and logout screens.
"""
from models.user import User


class TestRegister:

    def test_register_creates_account(self, app, client):
        response = client.post('/auth/register', data={
            'email': 'New@Example.com', 'password': 'secret123', 'confirm': 'secret123'})
        assert response.status_code == 302
        assert response.headers['Location'].endswith('/auth/login')
        with app.app_context():
            account = User.query.filter_by(email='new@example.com').first()
            assert account is not None
            assert account.check_password('secret123')

    def test_password_mismatch(self, app, client):
        response = client.post('/auth/register', data={
            'email': 'a@example.com', 'password': 'secret123', 'confirm': 'other123'})
        assert response.status_code == 200
        assert b'Passwords do not match' in response.data
        with app.app_context():
            assert User.query.count() == 0

    def test_duplicate_email(self, client, user):
        response = client.post('/auth/register', data={
            'email': user['email'], 'password': 'secret123', 'confirm': 'secret123'})
        assert response.status_code == 200
        assert b'Registration failed: User already registered' in response.data


class TestLogin:

    def test_login_redirects_to_dashboard(self, client, user):
        response = client.post('/auth/login', data=user)
        assert response.status_code == 302
        assert response.headers['Location'].endswith('/dashboard')

    def test_login_honours_next(self, client, user):
        response = client.post('/auth/login?next=/inventory/', data=user)
        assert response.headers['Location'].endswith('/inventory/')

    def test_login_ignores_external_next(self, client, user):
        response = client.post('/auth/login?next=//evil.example/', data=user)
        assert response.headers['Location'].endswith('/dashboard')

    def test_wrong_password(self, client, user):
        response = client.post('/auth/login', data={'email': user['email'], 'password': 'nope'})
        assert response.status_code == 200
        assert b'Login failed: Invalid login credentials' in response.data

    def test_login_page_skipped_when_signed_in(self, logged_in):
        response = logged_in.get('/auth/login')
        assert response.status_code == 302


class TestLogout:

    def test_logout_ends_session(self, logged_in):
        response = logged_in.post('/auth/logout')
        assert response.status_code == 302
        assert response.headers['Location'].endswith('/auth/login')
        response = logged_in.get('/inventory/')
        assert response.status_code == 302
        assert '/auth/login' in response.headers['Location']
