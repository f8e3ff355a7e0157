from django.contrib.auth import get_user_model
from django.contrib.auth.backends import ModelBackend
from django.db.models import Q

User = get_user_model()


class EmailOrPhoneBackend(ModelBackend):
    """Authenticate with either the email address or the phone number"""

    def authenticate(self, request, username=None, password=None, **kwargs):
        login = username or kwargs.get(User.USERNAME_FIELD) or kwargs.get('phone')
        if not login or password is None:
            return None

        user = User.objects.filter(
            Q(email__iexact=login) | Q(phone=login)
        ).order_by('pk').first()

        if user is None:
            # Run the hasher once to keep timing similar for unknown accounts
            User().set_password(password)
            return None

        if user.check_password(password) and self.user_can_authenticate(user):
            return user
        return None
