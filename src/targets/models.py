"""Models for employee targets and the rewards attached to them."""
from __future__ import annotations

from decimal import Decimal

from django.conf import settings
from django.core.exceptions import ValidationError
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models

from core.models import TimeStampedModel


class EmployeeTarget(TimeStampedModel):
    """A numeric goal of an employee over a period.

    ``current_value`` is derived: ``base_value`` plus the sum of the mapped
    field over the employee's approved daily stats inside the target
    window.  It is only ever written by the calculation engine.
    """

    class TargetType(models.TextChoices):
        DAILY_CALLS = "daily_calls", "Appels quotidiens"
        CONFIRMED_CUSTOMERS = "confirmed_customers", "Clients confirmes"
        REGISTERED_CUSTOMERS = "registered_customers", "Clients inscrits"
        TARGETED_CUSTOMERS = "targeted_customers", "Clients cibles"
        SERVICES_SOLD = "services_sold", "Services vendus"
        RETARGETING = "retargeting", "Relances"
        CAMPAIGNS = "campaigns", "Campagnes"
        LEADS_GENERATED = "leads_generated", "Prospects generes"
        CONVERSION_RATE = "conversion_rate", "Taux de conversion"
        FEATURES_COMPLETED = "features_completed", "Fonctionnalites livrees"
        BUGS_FIXED = "bugs_fixed", "Anomalies corrigees"
        SALES_AMOUNT = "sales_amount", "Chiffre d'affaires"
        CUSTOMER_SATISFACTION = "customer_satisfaction", "Satisfaction client"
        ATTENDANCE_HOURS = "attendance_hours", "Heures de presence"
        OTHER = "other", "Autre"

    class Period(models.TextChoices):
        DAILY = "daily", "Quotidien"
        WEEKLY = "weekly", "Hebdomadaire"
        MONTHLY = "monthly", "Mensuel"
        QUARTERLY = "quarterly", "Trimestriel"
        YEARLY = "yearly", "Annuel"

    class Status(models.TextChoices):
        IN_PROGRESS = "in_progress", "En cours"
        ACHIEVED = "achieved", "Atteint"
        NOT_ACHIEVED = "not_achieved", "Non atteint"

    employee = models.ForeignKey(
        "hr.Employee",
        on_delete=models.CASCADE,
        related_name="targets",
        verbose_name="employe",
    )
    target_type = models.CharField(
        "type d'objectif",
        max_length=30,
        choices=TargetType.choices,
    )
    custom_name = models.CharField("libelle personnalise", max_length=200, blank=True, default="")
    description = models.TextField("description", blank=True, default="")
    target_value = models.DecimalField(
        "valeur cible",
        max_digits=14,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0"))],
    )
    base_value = models.DecimalField(
        "valeur de depart",
        max_digits=14,
        decimal_places=2,
        default=Decimal("0.00"),
        help_text="Ajustement manuel ajoute aux statistiques approuvees.",
    )
    current_value = models.DecimalField(
        "valeur actuelle",
        max_digits=14,
        decimal_places=2,
        default=Decimal("0.00"),
        editable=False,
    )
    period = models.CharField(
        "periode",
        max_length=10,
        choices=Period.choices,
        default=Period.MONTHLY,
    )
    month = models.PositiveSmallIntegerField(
        "mois",
        null=True,
        blank=True,
        validators=[MinValueValidator(1), MaxValueValidator(12)],
    )
    year = models.PositiveSmallIntegerField("annee")
    reward_amount = models.DecimalField(
        "montant de la prime",
        max_digits=14,
        decimal_places=2,
        null=True,
        blank=True,
    )
    status = models.CharField(
        "statut",
        max_length=15,
        choices=Status.choices,
        default=Status.IN_PROGRESS,
        db_index=True,
    )

    class Meta:
        verbose_name = "Objectif employe"
        verbose_name_plural = "Objectifs employes"
        ordering = ["-year", "-month", "employee"]
        indexes = [
            models.Index(fields=["employee", "year", "month"], name="target_emp_year_month_idx"),
        ]

    def __str__(self):
        return f"{self.employee} - {self.label} ({self.period_label})"

    def clean(self):
        super().clean()
        if self.month is not None and not 1 <= self.month <= 12:
            raise ValidationError({"month": "Le mois doit etre compris entre 1 et 12."})

    @property
    def label(self) -> str:
        return self.custom_name or self.get_target_type_display()

    @property
    def period_label(self) -> str:
        if self.month:
            return f"{self.month:02d}/{self.year}"
        return str(self.year)

    @property
    def progress_percentage(self) -> Decimal:
        """Progress towards the target, capped at 100."""
        if not self.target_value or self.target_value <= 0:
            return Decimal("0")
        pct = self.current_value / self.target_value * 100
        return min(Decimal("100"), pct).quantize(Decimal("0.01"))


class EmployeeReward(TimeStampedModel):
    """Bonus owed to an employee for an achieved target (one per target)."""

    class Status(models.TextChoices):
        PENDING = "pending", "En attente"
        APPROVED = "approved", "Approuvee"
        PAID = "paid", "Versee"
        REJECTED = "rejected", "Rejetee"

    employee = models.ForeignKey(
        "hr.Employee",
        on_delete=models.CASCADE,
        related_name="rewards",
        verbose_name="employe",
    )
    target = models.OneToOneField(
        EmployeeTarget,
        on_delete=models.CASCADE,
        related_name="reward",
        verbose_name="objectif",
    )
    amount = models.DecimalField("montant", max_digits=14, decimal_places=2)
    reason = models.CharField("motif", max_length=255, blank=True, default="")
    status = models.CharField(
        "statut",
        max_length=10,
        choices=Status.choices,
        default=Status.PENDING,
        db_index=True,
    )
    approved_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="approved_rewards",
        verbose_name="approuvee par",
    )
    approved_at = models.DateTimeField("approuvee le", null=True, blank=True)
    paid_at = models.DateTimeField("versee le", null=True, blank=True)
    notes = models.TextField("notes", blank=True, default="")

    class Meta:
        verbose_name = "Prime employe"
        verbose_name_plural = "Primes employes"
        ordering = ["-created_at"]

    def __str__(self):
        return f"{self.employee} - {self.amount} ({self.get_status_display()})"
