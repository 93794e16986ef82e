"""Tenant models: academies, their members and the audit trail."""
import uuid

from django.conf import settings
from django.db import models

from core.models import TimeStampedModel


class Academy(TimeStampedModel):
    """Training company owning employees, courses and targets."""

    name = models.CharField("nom", max_length=255)
    code = models.CharField("code", max_length=50, unique=True)
    currency = models.CharField("devise", max_length=10, default="SAR")
    email = models.EmailField("email", blank=True, default="")
    phone = models.CharField("telephone", max_length=30, blank=True, default="")
    is_active = models.BooleanField("active", default=True)

    class Meta:
        verbose_name = "Academie"
        verbose_name_plural = "Academies"
        ordering = ["name"]

    def __str__(self):
        return self.name


class AcademyMember(models.Model):
    """Links a user to one or more academies."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    academy = models.ForeignKey(
        Academy,
        on_delete=models.CASCADE,
        related_name="members",
    )
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="academy_memberships",
    )
    is_default = models.BooleanField(
        default=False,
        help_text="If True, this academy is the user's default academy.",
    )

    class Meta:
        unique_together = [("academy", "user")]
        verbose_name = "Membre academie"
        verbose_name_plural = "Membres academie"

    def __str__(self):
        return f"{self.user} @ {self.academy}"


class AuditLog(models.Model):
    """Immutable log of every significant action in the system."""

    actor = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="audit_logs",
    )
    academy = models.ForeignKey(
        Academy,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="audit_logs",
    )
    action = models.CharField(max_length=100)
    entity_type = models.CharField(max_length=100, db_index=True)
    entity_id = models.CharField(max_length=255)
    before_json = models.JSONField(null=True, blank=True)
    after_json = models.JSONField(null=True, blank=True)
    ip_address = models.GenericIPAddressField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)

    class Meta:
        ordering = ["-created_at"]
        verbose_name = "Journal d'audit"
        verbose_name_plural = "Journaux d'audit"
        indexes = [
            models.Index(fields=["academy", "created_at"], name="audit_academy_created_idx"),
            models.Index(fields=["action", "created_at"], name="audit_action_created_idx"),
            models.Index(fields=["entity_type", "created_at"], name="audit_entity_created_idx"),
        ]

    def __str__(self):
        return f"[{self.created_at}] {self.action} on {self.entity_type} #{self.entity_id}"
