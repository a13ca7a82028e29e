from datetime import timedelta
from unittest.mock import patch
from jose import jwt
from models.admin import AdminPrincipal
from services import auth_service
from utils.authz import is_allowed, WAITLIST_READ, ANALYTICS_READ, ANALYTICS_EXPORT, ADMINS_MANAGE
from utils.date_utils import utcnow
from utils.errors import Unauthorized, ValidationFailed, DuplicateRegistration, NotFound
from waitlist_testcase import WaitlistTestCase


class PolicyTest(WaitlistTestCase):

    def test_admin_role(self):
        self.assertTrue(is_allowed('admin', ANALYTICS_READ))
        self.assertTrue(is_allowed('admin', ANALYTICS_EXPORT))
        self.assertTrue(is_allowed('admin', WAITLIST_READ))
        self.assertFalse(is_allowed('admin', ADMINS_MANAGE))

    def test_super_admin_role(self):
        for action in (ANALYTICS_READ, ANALYTICS_EXPORT, WAITLIST_READ, ADMINS_MANAGE):
            self.assertTrue(is_allowed('super_admin', action))

    def test_unknown_role_denied(self):
        self.assertFalse(is_allowed('viewer', ANALYTICS_READ))
        self.assertFalse(is_allowed(None, ANALYTICS_READ))


class TokenTest(WaitlistTestCase):

    def test_round_trip(self):
        admin = self.add_admin()
        token = auth_service.create_access_token(admin)
        self.assertEqual(auth_service.decode_access_token(token), admin.id)

    def test_expired_token(self):
        admin = self.add_admin()
        past = utcnow() - timedelta(hours=48)
        with patch('services.auth_service.utcnow', return_value=past):
            token = auth_service.create_access_token(admin)
        self.assertIsNone(auth_service.decode_access_token(token))

    def test_wrong_secret(self):
        token = jwt.encode({'sub': '1'}, 'some-other-secret', algorithm='HS256')
        self.assertIsNone(auth_service.decode_access_token(token))

    def test_garbage_token(self):
        self.assertIsNone(auth_service.decode_access_token('not.a.token'))


class AuthenticateTest(WaitlistTestCase):

    def test_login_success_updates_last_login(self):
        admin = self.add_admin(email='boss@hireai.com', password='Correct-Horse-1')
        token, logged_in = auth_service.authenticate('Boss@HireAI.com', 'Correct-Horse-1')
        self.assertEqual(logged_in.id, admin.id)
        self.assertIsNotNone(logged_in.last_login_at)
        self.assertEqual(auth_service.decode_access_token(token), admin.id)

    def test_wrong_password_and_unknown_email_look_the_same(self):
        self.add_admin(email='boss@hireai.com', password='Correct-Horse-1')
        with self.assertRaises(Unauthorized) as wrong_password:
            auth_service.authenticate('boss@hireai.com', 'nope-nope-nope')
        with self.assertRaises(Unauthorized) as unknown:
            auth_service.authenticate('ghost@hireai.com', 'Correct-Horse-1')
        self.assertEqual(wrong_password.exception.message, unknown.exception.message)

    def test_deactivated_admin(self):
        self.add_admin(email='boss@hireai.com', password='Correct-Horse-1', is_active=False)
        with self.assertRaises(Unauthorized):
            auth_service.authenticate('boss@hireai.com', 'Correct-Horse-1')

    def test_missing_credentials(self):
        with self.assertRaises(ValidationFailed) as ctx:
            auth_service.authenticate('', None)
        self.assertEqual({e['field'] for e in ctx.exception.errors}, {'email', 'password'})

    def test_password_is_hashed(self):
        admin = self.add_admin(password='Correct-Horse-1')
        self.assertNotEqual(admin.password_hash, 'Correct-Horse-1')
        self.assertNotIn('password', str(admin.to_dict()).lower())


class AdminManagementTest(WaitlistTestCase):

    def test_create_admin(self):
        admin = auth_service.create_admin('New@HireAI.com', 'Sup3rSecret!', 'New Admin')
        self.assertEqual(admin.email, 'new@hireai.com')
        self.assertEqual(admin.role, 'admin')
        self.assertTrue(admin.check_password('Sup3rSecret!'))

    def test_create_admin_validation(self):
        with self.assertRaises(ValidationFailed) as ctx:
            auth_service.create_admin('bad', 'short', 'X', role='owner')
        self.assertEqual({e['field'] for e in ctx.exception.errors}, {'email', 'password', 'name', 'role'})

    def test_create_admin_duplicate(self):
        self.add_admin(email='taken@hireai.com')
        with self.assertRaises(DuplicateRegistration):
            auth_service.create_admin('taken@hireai.com', 'Sup3rSecret!', 'Someone')

    def test_toggle_status(self):
        boss = self.add_admin(email='boss@hireai.com', role='super_admin')
        other = self.add_admin(email='other@hireai.com')
        self.assertFalse(auth_service.toggle_admin_status(other.id, boss).is_active)
        self.assertTrue(auth_service.toggle_admin_status(other.id, boss).is_active)

    def test_cannot_deactivate_self(self):
        boss = self.add_admin(email='boss@hireai.com', role='super_admin')
        with self.assertRaises(ValidationFailed):
            auth_service.toggle_admin_status(boss.id, boss)
        with self.assertRaises(NotFound):
            auth_service.toggle_admin_status(9999, boss)

    def test_list_admins(self):
        self.add_admin(email='one@hireai.com')
        self.add_admin(email='two@hireai.com')
        self.assertEqual({a.email for a in auth_service.list_admins()}, {'one@hireai.com', 'two@hireai.com'})
        self.assertEqual(AdminPrincipal.query.count(), 2)
