from django.apps import AppConfig


class StationsConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'stations'
    verbose_name = 'Fuel stations'

    def ready(self):
        from stationfinder.logging import setup_logging

        setup_logging()
