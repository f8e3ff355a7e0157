"""
Management command to create an admin panel account
"""
import getpass
import secrets
import string

from django.contrib.auth import get_user_model
from django.core.exceptions import ValidationError
from django.core.management.base import BaseCommand, CommandError
from django.core.validators import validate_email
from django.db import IntegrityError
from django.utils import timezone

User = get_user_model()


class Command(BaseCommand):
    help = 'Create an admin panel account (moderator or data entry staff)'

    def add_arguments(self, parser):
        parser.add_argument('--email', type=str, help='Account email address')
        parser.add_argument('--password', type=str, help='Account password')
        parser.add_argument('--name', type=str, help='Display name', default='Preuvely Admin')
        parser.add_argument(
            '--role',
            choices=['admin', 'data_entry'],
            default='admin',
            help='admin moderates everything, data_entry only manages stores and categories',
        )
        parser.add_argument('--superuser', action='store_true', help='Create as Django superuser')
        parser.add_argument('--generate-password', action='store_true', help='Auto-generate a strong password')

    def validate_password_strength(self, password):
        """Validate password strength"""
        if len(password) < 8:
            return False, "Password must be at least 8 characters long"
        if not any(c.isupper() for c in password):
            return False, "Password must contain at least one uppercase letter"
        if not any(c.islower() for c in password):
            return False, "Password must contain at least one lowercase letter"
        if not any(c.isdigit() for c in password):
            return False, "Password must contain at least one digit"
        return True, "Password is strong"

    def generate_strong_password(self, length=16):
        alphabet = string.ascii_letters + string.digits + string.punctuation
        while True:
            password = ''.join(secrets.choice(alphabet) for _ in range(length))
            is_valid, _ = self.validate_password_strength(password)
            if is_valid:
                return password

    def handle(self, *args, **options):
        email = options.get('email')
        password = options.get('password')
        name = options.get('name')
        role = options.get('role')

        if not email:
            email = input('Email address: ').strip()

        try:
            validate_email(email)
        except ValidationError:
            raise CommandError(f'Invalid email address: {email}')

        if options.get('generate_password'):
            password = self.generate_strong_password()
            self.stdout.write(self.style.SUCCESS(f'\nGenerated strong password: {password}'))
            self.stdout.write(self.style.WARNING('Please save this password securely!'))
        elif not password:
            password = getpass.getpass('Password: ')
            if password != getpass.getpass('Confirm password: '):
                raise CommandError('Passwords do not match.')

        is_valid, message = self.validate_password_strength(password)
        if not is_valid:
            raise CommandError(message)

        try:
            if options.get('superuser'):
                user = User.objects.create_superuser(email=email, password=password, name=name)
            else:
                user = User.objects.create_user(
                    email=email,
                    password=password,
                    name=name,
                    role=role,
                    is_staff=True,
                )
        except IntegrityError:
            raise CommandError(f'User with email {email} already exists!')

        user.email_verified_at = timezone.now()
        user.save(update_fields=['email_verified_at'])

        self.stdout.write(self.style.SUCCESS(
            f'\n{user.get_role_display()} account created successfully!'
        ))
        self.stdout.write(self.style.SUCCESS(f'Email: {email}'))
        self.stdout.write(self.style.SUCCESS('Access the admin panel at: /admin/'))
