from django.apps import AppConfig


class CoopbusMainAppConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'coopbus_main_app'

    def ready(self):
        import coopbus_main_app.signals  # Register signal receivers
