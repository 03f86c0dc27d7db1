"""Tests for authentication API routes."""

import unittest
from unittest.mock import MagicMock, patch

from fastapi.testclient import TestClient

from api.main import app
from api.dependencies import get_identity_verifier, get_user_repo
from api.security import get_session_token_issuer
from adapter.fake.identity_verifier import FakeIdentityVerifier
from adapter.fake.user_repository import FakeUserRepository
from adapter.token.jose_session_tokens import JoseSessionTokenIssuer
from domain.model.auth import IdentityClaims
from domain.model.errors import StoreUnavailableError
from services import auth_service

GOOGLE_CLAIMS = IdentityClaims(
    subject_id='fb-uid-1',
    email='ada@example.com',
    display_name='Ada Lovelace',
    photo_url='https://example.com/ada.png',
    email_verified=True,
    sign_in_provider='google.com',
)


class RouteTestCase(unittest.TestCase):

    def setUp(self):
        self.client = TestClient(app)
        self.repo = FakeUserRepository()
        self.identity = FakeIdentityVerifier()
        self.session_tokens = JoseSessionTokenIssuer('route-test-secret')
        app.dependency_overrides[get_user_repo] = lambda: self.repo
        app.dependency_overrides[get_identity_verifier] = lambda: self.identity
        app.dependency_overrides[get_session_token_issuer] = lambda: self.session_tokens

        patcher = patch.object(auth_service, 'BCRYPT_ROUNDS', 4)
        patcher.start()
        self.addCleanup(patcher.stop)

    def tearDown(self):
        app.dependency_overrides.clear()

    def register(self, email='bob@example.com', password='secret1', display_name='Bob'):
        return self.client.post('/auth/register', json={
            'email': email, 'password': password, 'displayName': display_name,
        })


class TestRegister(RouteTestCase):

    def test_register_success(self):
        response = self.register()

        self.assertEqual(response.status_code, 201)
        body = response.json()
        self.assertEqual(body['message'], 'User registered successfully')
        self.assertEqual(body['user']['email'], 'bob@example.com')
        self.assertEqual(body['user']['displayName'], 'Bob')
        self.assertEqual(body['user']['provider'], 'email')
        self.assertNotIn('password_hash', body['user'])
        self.assertNotIn('passwordHash', body['user'])
        self.assertEqual(self.session_tokens.verify(body['token']), body['user']['id'])

    def test_register_normalizes_email(self):
        response = self.register(email='Bob@Example.COM')
        self.assertEqual(response.json()['user']['email'], 'bob@example.com')

    def test_register_duplicate_email(self):
        self.register()
        response = self.register(display_name='Bob Again')

        self.assertEqual(response.status_code, 409)
        self.assertEqual(response.json()['detail'], 'Email already registered')

    def test_register_short_password(self):
        response = self.register(password='12345')

        self.assertEqual(response.status_code, 400)
        self.assertIn('at least 6 characters', response.json()['detail'])

    def test_register_requires_fields(self):
        response = self.client.post('/auth/register', json={})
        self.assertEqual(response.status_code, 422)

    def test_register_invalid_email(self):
        response = self.register(email='not-an-email')
        self.assertEqual(response.status_code, 422)


class TestLogin(RouteTestCase):

    def test_login_success(self):
        self.register()

        response = self.client.post('/auth/login', json={'email': 'bob@example.com', 'password': 'secret1'})

        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body['message'], 'Login successful')
        self.assertIsNotNone(body['user']['lastLogin'])
        self.assertEqual(self.session_tokens.verify(body['token']), body['user']['id'])

    def test_login_wrong_password(self):
        self.register()

        response = self.client.post('/auth/login', json={'email': 'bob@example.com', 'password': 'wrong!'})

        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json()['detail'], 'Invalid credentials')

    def test_login_unknown_email(self):
        response = self.client.post('/auth/login', json={'email': 'nobody@example.com', 'password': 'x'})
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json()['detail'], 'Invalid credentials')

    def test_login_requires_fields(self):
        response = self.client.post('/auth/login', json={})
        self.assertEqual(response.status_code, 422)


class TestFirebaseSync(RouteTestCase):

    def test_missing_id_token(self):
        response = self.client.post('/auth/firebase', json={})

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()['detail'], 'Firebase ID token required')

    def test_rejected_id_token(self):
        response = self.client.post('/auth/firebase', json={'idToken': 'bogus'})

        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json()['detail'], 'Firebase authentication failed')
        self.assertEqual(self.repo.store, {})

    def test_first_sync_provisions_user(self):
        self.identity.add_token('id-token', GOOGLE_CLAIMS)

        response = self.client.post('/auth/firebase', json={'idToken': 'id-token'})

        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body['message'], 'Firebase authentication successful')
        user = body['user']
        self.assertEqual(user['provider'], 'google')
        self.assertEqual(user['photoURL'], 'https://example.com/ada.png')
        self.assertTrue(user['emailVerified'])
        self.assertIsNotNone(user['lastLogin'])
        self.assertEqual(len(self.repo.store), 1)
        self.assertEqual(self.session_tokens.verify(body['token']), user['id'])

    def test_repeat_sync_reuses_user(self):
        self.identity.add_token('id-token', GOOGLE_CLAIMS)

        first = self.client.post('/auth/firebase', json={'idToken': 'id-token'}).json()
        second = self.client.post('/auth/firebase', json={'idToken': 'id-token'}).json()

        self.assertEqual(first['user']['id'], second['user']['id'])
        self.assertEqual(len(self.repo.store), 1)

    def test_email_taken_by_local_account(self):
        self.register(email='ada@example.com')
        self.identity.add_token('id-token', GOOGLE_CLAIMS)

        response = self.client.post('/auth/firebase', json={'idToken': 'id-token'})

        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json()['detail'], 'Firebase authentication failed')
        self.assertEqual(len(self.repo.store), 1)

    def test_emailless_identities_sync(self):
        self.identity.add_token('phone-1', IdentityClaims(subject_id='fb-phone-1', sign_in_provider='phone'))
        self.identity.add_token('phone-2', IdentityClaims(subject_id='fb-phone-2', sign_in_provider='phone'))

        first = self.client.post('/auth/firebase', json={'idToken': 'phone-1'})
        second = self.client.post('/auth/firebase', json={'idToken': 'phone-2'})

        self.assertEqual(first.status_code, 200)
        self.assertEqual(second.status_code, 200)
        self.assertIsNone(second.json()['user']['email'])
        self.assertEqual(len(self.repo.store), 2)


class TestAuthProfile(RouteTestCase):

    def test_profile_with_session_token(self):
        token = self.register().json()['token']

        response = self.client.get('/auth/profile', headers={'Authorization': f'Bearer {token}'})

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()['user']['email'], 'bob@example.com')

    def test_profile_with_firebase_token_provisions(self):
        self.identity.add_token('id-token', GOOGLE_CLAIMS)

        response = self.client.get('/auth/profile', headers={'Authorization': 'Bearer id-token'})

        self.assertEqual(response.status_code, 200)
        user = response.json()['user']
        self.assertEqual(user['displayName'], 'Ada Lovelace')
        # Plain authenticated requests do not stamp the login time
        self.assertIsNone(user['lastLogin'])

    def test_profile_without_token(self):
        response = self.client.get('/auth/profile')

        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json()['detail'], 'Not authenticated')
        self.assertEqual(response.headers['www-authenticate'], 'Bearer')

    @patch('api.dependencies.get_mongodb_client')
    def test_profile_without_token_does_not_touch_store(self, mock_get_client):
        del app.dependency_overrides[get_user_repo]
        mock_get_client.return_value = None

        response = self.client.get('/auth/profile')

        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json()['detail'], 'Not authenticated')
        mock_get_client.assert_not_called()

    def test_identity_colliding_with_local_email_gets_uniform_401(self):
        self.register(email='ada@example.com')
        self.identity.add_token('id-token', GOOGLE_CLAIMS)

        for path in ('/auth/profile', '/users/profile'):
            with self.subTest(path=path):
                response = self.client.get(path, headers={'Authorization': 'Bearer id-token'})

                self.assertEqual(response.status_code, 401)
                self.assertEqual(response.json()['detail'], 'Invalid authentication credentials')

    def test_profile_with_invalid_token_is_uniform(self):
        response = self.client.get('/auth/profile', headers={'Authorization': 'Bearer garbage'})

        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json()['detail'], 'Invalid authentication credentials')

    def test_inactive_user_gets_same_401(self):
        body = self.register().json()
        self.repo.get_by_id(body['user']['id']).is_active = False

        response = self.client.get('/auth/profile', headers={'Authorization': f"Bearer {body['token']}"})

        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json()['detail'], 'Invalid authentication credentials')

    def test_store_unavailable_is_503(self):
        token = self.register().json()['token']
        self.repo.get_by_id = MagicMock(side_effect=StoreUnavailableError("down"))

        response = self.client.get('/auth/profile', headers={'Authorization': f'Bearer {token}'})

        self.assertEqual(response.status_code, 503)
        self.assertEqual(response.json()['detail'], 'Database unavailable')


class TestMisc(RouteTestCase):

    def test_logout(self):
        response = self.client.post('/auth/logout')
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()['message'], 'Logout successful')

    def test_root(self):
        response = self.client.get('/')
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()['service'], 'Web App Template API')
        self.assertEqual(response.json()['status'], 'running')


if __name__ == '__main__':
    unittest.main()
