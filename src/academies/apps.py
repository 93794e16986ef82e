from django.apps import AppConfig


class AcademiesConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "academies"
    verbose_name = "Academies"
