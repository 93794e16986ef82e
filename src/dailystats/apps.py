from django.apps import AppConfig


class DailyStatsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "dailystats"
    verbose_name = "Statistiques journalieres"
