"""
Tests for accounts, authentication backend and email verification
"""
from datetime import timedelta
from io import StringIO

from django.contrib.auth import authenticate, get_user_model
from django.core import mail
from django.core.management import call_command
from django.core.management.base import CommandError
from django.test import RequestFactory, TestCase
from django.utils import timezone

from apps.users import verification
from apps.users.models import EmailVerificationCode
from apps.users.tasks import purge_expired_verification_codes

User = get_user_model()


class UserManagerTestCase(TestCase):

    def test_create_user_with_phone_only(self):
        user = User.objects.create_user(phone='0555123456', password='testpass123', name='Phone User')
        self.assertIsNone(user.email)
        self.assertEqual(user.phone, '0555123456')
        self.assertTrue(user.check_password('testpass123'))

    def test_email_or_phone_required(self):
        with self.assertRaises(ValueError):
            User.objects.create_user(password='testpass123', name='Nobody')

    def test_blank_phone_is_stored_as_null(self):
        """Several email-only accounts must not collide on the phone column"""
        first = User.objects.create_user(email='a@test.com', phone='', password='testpass123', name='A')
        second = User.objects.create_user(email='b@test.com', phone='', password='testpass123', name='B')
        self.assertIsNone(first.phone)
        self.assertIsNone(second.phone)

    def test_create_superuser(self):
        user = User.objects.create_superuser(email='root@test.com', password='testpass123', name='Root')
        self.assertTrue(user.is_superuser)
        self.assertTrue(user.is_admin)

    def test_mark_email_as_verified_once(self):
        user = User.objects.create_user(email='user@test.com', password='testpass123', name='User')
        self.assertTrue(user.mark_email_as_verified())
        self.assertTrue(user.has_verified_email())
        self.assertFalse(user.mark_email_as_verified())


class EmailOrPhoneBackendTestCase(TestCase):

    def setUp(self):
        self.user = User.objects.create_user(
            email='user@test.com', phone='0555123456', password='testpass123', name='User'
        )

    def test_login_with_email(self):
        self.assertEqual(authenticate(username='USER@test.com', password='testpass123'), self.user)

    def test_login_with_phone(self):
        self.assertEqual(authenticate(username='0555123456', password='testpass123'), self.user)

    def test_wrong_password(self):
        self.assertIsNone(authenticate(username='user@test.com', password='wrongpass'))

    def test_unknown_account(self):
        self.assertIsNone(authenticate(username='missing@test.com', password='testpass123'))

    def test_inactive_user(self):
        self.user.is_active = False
        self.user.save()
        self.assertIsNone(authenticate(username='user@test.com', password='testpass123'))


class EmailVerificationTestCase(TestCase):

    def setUp(self):
        self.user = User.objects.create_user(email='user@test.com', password='testpass123', name='User')

    def test_send_verification_email(self):
        success, _ = verification.send_verification_email(self.user)

        self.assertTrue(success)
        self.assertEqual(len(mail.outbox), 1)
        code = EmailVerificationCode.objects.get(user=self.user)
        self.assertEqual(len(code.code), 6)
        self.assertIn(code.code, mail.outbox[0].body)
        self.assertIn('signature=', mail.outbox[0].body)

    def test_send_without_email(self):
        user = User.objects.create_user(phone='0555123456', password='testpass123', name='Phone')
        success, _ = verification.send_verification_email(user)
        self.assertFalse(success)
        self.assertEqual(len(mail.outbox), 0)

    def test_new_code_replaces_old_one(self):
        EmailVerificationCode.generate_for(self.user)
        EmailVerificationCode.generate_for(self.user)
        self.assertEqual(EmailVerificationCode.objects.filter(user=self.user).count(), 1)

    def test_verify_code(self):
        code = EmailVerificationCode.generate_for(self.user).code

        success, _ = verification.verify_code(self.user, code)

        self.assertTrue(success)
        self.user.refresh_from_db()
        self.assertTrue(self.user.has_verified_email())
        self.assertFalse(EmailVerificationCode.objects.filter(user=self.user).exists())

    def test_invalid_code(self):
        EmailVerificationCode.generate_for(self.user)
        success, message = verification.verify_code(self.user, 'abcdef')
        self.assertFalse(success)
        self.assertEqual(message, 'Invalid verification code')

    def test_expired_code(self):
        code = EmailVerificationCode.generate_for(self.user)
        code.expires_at = timezone.now() - timedelta(minutes=1)
        code.save()

        success, _ = verification.verify_code(self.user, code.code)

        self.assertFalse(success)
        self.assertFalse(EmailVerificationCode.objects.filter(pk=code.pk).exists())
        self.user.refresh_from_db()
        self.assertFalse(self.user.has_verified_email())

    def test_verification_link(self):
        link = verification.build_verification_link(self.user)
        signature = link.split('signature=')[1]
        email_hash = verification.email_hash(self.user)

        self.assertIn(f'/auth/email/verify/{self.user.pk}/{email_hash}', link)
        self.assertTrue(verification.check_verification_link(self.user, email_hash, signature))
        self.assertFalse(verification.check_verification_link(self.user, 'wrong', signature))
        self.assertFalse(verification.check_verification_link(self.user, email_hash, None))
        self.assertFalse(verification.check_verification_link(self.user, email_hash, signature + 'x'))

    def test_link_uses_request_host(self):
        request = RequestFactory().get('/')
        link = verification.build_verification_link(self.user, request)
        self.assertTrue(link.startswith('http://testserver/'))

    def test_link_for_changed_email_is_rejected(self):
        link = verification.build_verification_link(self.user)
        signature = link.split('signature=')[1]
        old_hash = verification.email_hash(self.user)

        self.user.email = 'changed@test.com'
        self.assertFalse(verification.check_verification_link(self.user, old_hash, signature))

    def test_purge_expired_codes_task(self):
        expired = EmailVerificationCode.generate_for(self.user)
        expired.expires_at = timezone.now() - timedelta(minutes=1)
        expired.save()
        other = User.objects.create_user(email='other@test.com', password='testpass123', name='Other')
        fresh = EmailVerificationCode.generate_for(other)

        result = purge_expired_verification_codes()

        self.assertEqual(result, {'status': 'success', 'deleted': 1})
        self.assertEqual(list(EmailVerificationCode.objects.all()), [fresh])


class CreateAdminCommandTestCase(TestCase):

    def test_create_data_entry_account(self):
        call_command(
            'createadmin', email='staff@test.com', password='Str0ngPass', role='data_entry', stdout=StringIO()
        )
        user = User.objects.get(email='staff@test.com')
        self.assertTrue(user.is_staff)
        self.assertTrue(user.is_data_entry)
        self.assertTrue(user.has_verified_email())

    def test_weak_password_is_refused(self):
        with self.assertRaises(CommandError):
            call_command('createadmin', email='staff@test.com', password='weak', stdout=StringIO())
