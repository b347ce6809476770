from django.apps import AppConfig


class PricingConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'pricing'

    def ready(self):
        # Connects the setting_changed receiver and fails fast on bad rates
        from .rates import get_rate_table
        get_rate_table()
