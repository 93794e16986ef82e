from decimal import Decimal

from django.db import models

from core.models import TimeStampedModel


class ServiceSale(TimeStampedModel):
    """One sold service line (name, unit price, quantity).

    Lines booked by the approval of a daily statistic point back to it, so
    unapproving the statistic removes exactly those lines.
    """

    academy = models.ForeignKey(
        "academies.Academy",
        on_delete=models.CASCADE,
        related_name="service_sales",
        verbose_name="academie",
    )
    daily_stat = models.ForeignKey(
        "dailystats.DailyStat",
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name="service_sales",
        verbose_name="statistique journaliere",
    )
    employee = models.ForeignKey(
        "hr.Employee",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="service_sales",
        verbose_name="employe",
    )
    name = models.CharField("service", max_length=255)
    price = models.DecimalField("prix unitaire", max_digits=14, decimal_places=2)
    quantity = models.PositiveIntegerField("quantite", default=1)
    total_amount = models.DecimalField(
        "montant total",
        max_digits=14,
        decimal_places=2,
        default=Decimal("0.00"),
    )
    sale_date = models.DateField("date de vente", db_index=True)
    notes = models.TextField("notes", blank=True, default="")

    class Meta:
        verbose_name = "Vente de service"
        verbose_name_plural = "Ventes de services"
        ordering = ["-sale_date", "-created_at"]

    def __str__(self):
        return f"{self.name} x{self.quantity} ({self.sale_date})"
