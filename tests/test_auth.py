import unittest
from datetime import timedelta
from unittest import mock

from tests.base import AppTestCase

from athenas import bcrypt
from athenas.auth import (
    StaticCredentialVerifier,
    generate_token,
    get_credential_verifier,
    set_credential_verifier,
    verify_token,
)


class CredentialVerifierTestCase(AppTestCase):
    def setUp(self):
        super().setUp()
        password_hash = bcrypt.generate_password_hash('s3cret').decode('utf-8')
        self.verifier = StaticCredentialVerifier('Owner', password_hash)

    def test_verify(self):
        self.assertTrue(self.verifier.verify('owner', 's3cret'))
        self.assertTrue(self.verifier.verify(' OWNER ', 's3cret'))
        self.assertFalse(self.verifier.verify('owner', 'S3cret'))
        self.assertFalse(self.verifier.verify('someone', 's3cret'))
        self.assertFalse(self.verifier.verify('', ''))

    def test_configured_verifier_uses_the_environment(self):
        self.assertTrue(get_credential_verifier().verify('admin', 'correct-horse'))

    def test_verifier_can_be_replaced(self):
        original = get_credential_verifier()
        self.addCleanup(set_credential_verifier, original)
        set_credential_verifier(self.verifier)
        self.assertIs(get_credential_verifier(), self.verifier)

        response = self.app.test_client().post('/api/auth/login', json={'username': 'owner', 'password': 's3cret'})
        self.assertEqual(response.status_code, 200)


class TokenTestCase(AppTestCase):
    def test_round_trip(self):
        self.assertEqual(verify_token(generate_token('admin')), {'username': 'admin', 'role': 'admin'})

    def test_missing_and_forged(self):
        self.assertIsNone(verify_token(None))
        self.assertIsNone(verify_token(''))
        with self.assertLogs(self.app.logger, level='WARNING'):
            self.assertIsNone(verify_token(generate_token('admin') + 'x'))

    def test_signed_with_another_key(self):
        token = generate_token('admin')
        with mock.patch.dict(self.app.config, {'SECRET_KEY': 'rotated'}):
            self.assertIsNone(verify_token(token))

    def test_expired(self):
        token = generate_token('admin')
        with mock.patch.dict(self.app.config, {'AUTH_TOKEN_MAX_AGE': timedelta(seconds=-1)}):
            self.assertIsNone(verify_token(token))


if __name__ == '__main__':
    unittest.main()
