from django.apps import AppConfig


class MobileApiConfig(AppConfig):
    """
    Mobile API Application Configuration
    Provides the versioned REST API for the Android and iOS apps
    """
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'mobileapi'
    verbose_name = 'Mobile API'
