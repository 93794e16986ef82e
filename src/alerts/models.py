"""Models for the alerts app."""
from django.conf import settings
from django.db import models
from django.utils import timezone

from core.models import TimeStampedModel


class TargetAlert(TimeStampedModel):
    """Raised once when an employee target crosses 80 % or 100 %.

    Alerts are historical facts: they are never deleted when progress
    falls back below the threshold, and at most one alert of each type
    exists per target.
    """

    class Type(models.TextChoices):
        REACHED_80 = "reached_80", "80 % atteint"
        REACHED_100 = "reached_100", "Objectif atteint"

    employee = models.ForeignKey(
        "hr.Employee",
        on_delete=models.CASCADE,
        related_name="target_alerts",
        verbose_name="employe",
    )
    target = models.ForeignKey(
        "targets.EmployeeTarget",
        on_delete=models.CASCADE,
        related_name="alerts",
        verbose_name="objectif",
    )
    alert_type = models.CharField(
        "type d'alerte",
        max_length=15,
        choices=Type.choices,
    )
    percentage = models.DecimalField("pourcentage", max_digits=5, decimal_places=2)
    target_type = models.CharField("type d'objectif", max_length=30)
    target_value = models.DecimalField("valeur cible", max_digits=14, decimal_places=2)
    achieved_value = models.DecimalField("valeur atteinte", max_digits=14, decimal_places=2)
    message = models.TextField("message")
    month = models.PositiveSmallIntegerField("mois", null=True, blank=True)
    year = models.PositiveSmallIntegerField("annee")

    # Read tracking
    is_read = models.BooleanField("lu", default=False)
    read_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="read_target_alerts",
        verbose_name="lu par",
    )
    read_at = models.DateTimeField("lu le", null=True, blank=True)
    notified_owner = models.BooleanField("responsable notifie", default=False)

    class Meta:
        verbose_name = "Alerte objectif"
        verbose_name_plural = "Alertes objectifs"
        ordering = ["-created_at"]
        constraints = [
            models.UniqueConstraint(
                fields=["target", "alert_type"],
                name="uniq_target_alert_type",
            ),
        ]

    def __str__(self):
        return f"[{self.get_alert_type_display()}] {self.employee}"

    def mark_as_read(self, user):
        """Mark this alert as read by *user*."""
        if not self.is_read:
            self.is_read = True
            self.read_by = user
            self.read_at = timezone.now()
            self.save(update_fields=["is_read", "read_by", "read_at", "updated_at"])
