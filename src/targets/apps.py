"""App config for the targets module."""
from django.apps import AppConfig


class TargetsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "targets"
    verbose_name = "Objectifs employes"

    def ready(self):
        import targets.signals  # noqa: F401
