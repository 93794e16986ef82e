from django.apps import AppConfig


class ServiceSalesConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "servicesales"
    verbose_name = "Ventes de services"
