from django.apps import AppConfig


class WasteRequestsConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'waste_requests'
    verbose_name = 'Waste requests'
