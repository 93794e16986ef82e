"""Employee records of an academy."""
from decimal import Decimal

from django.conf import settings
from django.db import models

from core.models import TimeStampedModel


class Employee(TimeStampedModel):
    """Employe rattache a une academie et eventuellement a un user Django."""

    class Specialization(models.TextChoices):
        CUSTOMER_SERVICE = "customer_service", "Service client"
        MARKETING = "marketing", "Marketing"
        EXECUTIVE_MANAGER = "executive_manager", "Direction"
        DEVELOPER = "developer", "Developpeur"
        SUPPORT = "support", "Support"

    class Status(models.TextChoices):
        ACTIVE = "active", "Actif"
        INACTIVE = "inactive", "Inactif"
        ON_LEAVE = "on_leave", "En conge"

    academy = models.ForeignKey(
        "academies.Academy",
        on_delete=models.CASCADE,
        related_name="employees",
        verbose_name="academie",
    )
    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="employee_profile",
        verbose_name="compte utilisateur",
    )
    employee_code = models.CharField("matricule", max_length=30, db_index=True)
    first_name = models.CharField("prenom", max_length=150)
    last_name = models.CharField("nom", max_length=150, blank=True, default="")
    email = models.EmailField("e-mail", blank=True, default="")
    phone = models.CharField("telephone", max_length=30, blank=True, default="")
    specialization = models.CharField(
        "specialisation",
        max_length=30,
        choices=Specialization.choices,
        default=Specialization.CUSTOMER_SERVICE,
    )
    status = models.CharField(
        "statut",
        max_length=20,
        choices=Status.choices,
        default=Status.ACTIVE,
        db_index=True,
    )
    hire_date = models.DateField("date d'embauche", null=True, blank=True)
    salary = models.DecimalField(
        "salaire", max_digits=14, decimal_places=2, default=Decimal("0.00"),
    )

    class Meta:
        verbose_name = "Employe"
        verbose_name_plural = "Employes"
        ordering = ["first_name", "last_name"]
        constraints = [
            models.UniqueConstraint(
                fields=["academy", "employee_code"],
                name="uniq_employee_code_per_academy",
            ),
        ]

    def __str__(self):
        return f"{self.full_name} ({self.employee_code})"

    @property
    def full_name(self):
        return f"{self.first_name} {self.last_name}".strip()
