"""Daily activity statistics submitted by employees."""
from decimal import Decimal

from django.conf import settings
from django.db import models

from core.models import TimeStampedModel


class DailyStat(TimeStampedModel):
    """One day of activity figures of an employee.

    Only approved rows count towards target progress and course revenue.
    ``calculated_revenue`` is computed when the row is submitted or edited;
    approval promotes it into the authoritative revenue figure.
    """

    class Status(models.TextChoices):
        PENDING = "pending", "En attente"
        APPROVED = "approved", "Approuvee"
        REJECTED = "rejected", "Rejetee"

    employee = models.ForeignKey(
        "hr.Employee",
        on_delete=models.CASCADE,
        related_name="daily_stats",
        verbose_name="employe",
    )
    date = models.DateField("date", db_index=True)

    targeted_customers = models.PositiveIntegerField("clients cibles", default=0)
    confirmed_customers = models.PositiveIntegerField("clients confirmes", default=0)
    registered_customers = models.PositiveIntegerField("clients inscrits", default=0)
    services_sold = models.PositiveIntegerField("services vendus", default=0)
    sales_amount = models.DecimalField(
        "montant des ventes de services",
        max_digits=14,
        decimal_places=2,
        default=Decimal("0.00"),
    )
    targeted_by_services = models.PositiveIntegerField("clients cibles par les services", default=0)
    sold_services = models.JSONField(
        "services vendus (detail)",
        default=list,
        blank=True,
        help_text='Liste de {"name": ..., "price": ..., "quantity": ...}.',
    )

    course = models.ForeignKey(
        "courses.Course",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="daily_stats",
        verbose_name="formation",
    )
    course_fee = models.DecimalField(
        "tarif applique",
        max_digits=14,
        decimal_places=2,
        null=True,
        blank=True,
    )
    fee_breakdown = models.JSONField(
        "repartition par tarif",
        default=list,
        blank=True,
        help_text='Liste de {"fee_amount": ..., "customer_count": ...}.',
    )
    calculated_revenue = models.DecimalField(
        "chiffre d'affaires calcule",
        max_digits=14,
        decimal_places=2,
        default=Decimal("0.00"),
    )
    notes = models.TextField("notes", blank=True, default="")

    status = models.CharField(
        "statut",
        max_length=10,
        choices=Status.choices,
        default=Status.PENDING,
        db_index=True,
    )
    submitted_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="submitted_daily_stats",
        verbose_name="soumis par",
    )
    reviewed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="reviewed_daily_stats",
        verbose_name="revue par",
    )
    reviewed_at = models.DateTimeField("revue le", null=True, blank=True)
    review_notes = models.TextField("notes de revue", blank=True, default="")

    class Meta:
        verbose_name = "Statistique journaliere"
        verbose_name_plural = "Statistiques journalieres"
        ordering = ["-date", "-created_at"]
        indexes = [
            models.Index(fields=["employee", "status", "date"], name="dailystat_emp_status_date_idx"),
        ]

    def __str__(self):
        return f"{self.employee} - {self.date} ({self.get_status_display()})"

    @property
    def is_pending(self):
        return self.status == self.Status.PENDING

    @property
    def is_approved(self):
        return self.status == self.Status.APPROVED

    @property
    def is_rejected(self):
        return self.status == self.Status.REJECTED

    def compute_revenue(self) -> Decimal:
        """Revenue implied by the submitted figures.

        A fee breakdown wins over the single course fee; without a course
        the row carries no course revenue, whatever its breakdown says.
        """
        if not self.course_id:
            return Decimal("0.00")
        if self.fee_breakdown:
            total = sum(
                (
                    Decimal(str(line.get("fee_amount") or 0)) * int(line.get("customer_count") or 0)
                    for line in self.fee_breakdown
                ),
                Decimal("0"),
            )
            return total.quantize(Decimal("0.01"))
        if self.course_fee:
            return (self.course_fee * self.confirmed_customers).quantize(Decimal("0.01"))
        return Decimal("0.00")
