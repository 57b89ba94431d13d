from django.apps import AppConfig


class OptionsConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'apps.options'
    label = 'options'
    verbose_name = 'Product Options'

    def ready(self):
        from . import signals  # noqa: F401
