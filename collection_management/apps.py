from django.apps import AppConfig


class CollectionManagementConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'collection_management'
