from django import forms
from django.contrib.auth.forms import UserChangeForm, UserCreationForm
from django.utils.translation import gettext_lazy as _

from .models import User


class AdminUserCreationForm(UserCreationForm):
    """Admin add form; email or phone identifies the account"""

    class Meta:
        model = User
        fields = ('name', 'email', 'phone', 'role')

    def clean(self):
        cleaned_data = super().clean()
        if not cleaned_data.get('email') and not cleaned_data.get('phone'):
            raise forms.ValidationError(_('Either email or phone must be set'))
        return cleaned_data

    def clean_email(self):
        return self.cleaned_data.get('email') or None

    def clean_phone(self):
        return self.cleaned_data.get('phone') or None


class AdminUserChangeForm(UserChangeForm):

    class Meta:
        model = User
        fields = '__all__'

    def clean_email(self):
        return self.cleaned_data.get('email') or None

    def clean_phone(self):
        return self.cleaned_data.get('phone') or None
