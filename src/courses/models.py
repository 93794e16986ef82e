"""Courses, their fee tiers and trainee enrollments."""
from decimal import Decimal

from django.core.validators import MinValueValidator
from django.db import models

from core.models import TimeStampedModel


class Course(TimeStampedModel):
    """A training course run by an academy."""

    class Status(models.TextChoices):
        ACTIVE = "active", "Actif"
        COMPLETED = "completed", "Termine"
        CANCELLED = "cancelled", "Annule"

    academy = models.ForeignKey(
        "academies.Academy",
        on_delete=models.CASCADE,
        related_name="courses",
        verbose_name="academie",
    )
    code = models.CharField("code", max_length=50)
    name = models.CharField("nom", max_length=255)
    instructor_name = models.CharField("formateur", max_length=255, blank=True, default="")
    start_date = models.DateField("date de debut", null=True, blank=True)
    end_date = models.DateField("date de fin", null=True, blank=True)
    status = models.CharField(
        "statut",
        max_length=20,
        choices=Status.choices,
        default=Status.ACTIVE,
        db_index=True,
    )

    class Meta:
        verbose_name = "Formation"
        verbose_name_plural = "Formations"
        ordering = ["name"]
        constraints = [
            models.UniqueConstraint(
                fields=["academy", "code"],
                name="uniq_course_code_per_academy",
            ),
        ]

    def __str__(self):
        return f"{self.name} ({self.code})"


class CourseFee(TimeStampedModel):
    """A price tier of a course (e.g. early bird, corporate)."""

    course = models.ForeignKey(
        Course,
        on_delete=models.CASCADE,
        related_name="fees",
        verbose_name="formation",
    )
    name = models.CharField("libelle", max_length=150)
    amount = models.DecimalField(
        "montant",
        max_digits=14,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0"))],
    )

    class Meta:
        verbose_name = "Tarif de formation"
        verbose_name_plural = "Tarifs de formation"
        ordering = ["course", "amount"]

    def __str__(self):
        return f"{self.course.code} - {self.name} ({self.amount})"


class CourseEnrollment(TimeStampedModel):
    """Trainees enrolled in a course and the revenue they brought.

    Enrollments produced by the approval of a daily statistic keep an
    explicit one-to-one link to that statistic; unapproving it deletes
    exactly that enrollment and nothing else.
    """

    course = models.ForeignKey(
        Course,
        on_delete=models.CASCADE,
        related_name="enrollments",
        verbose_name="formation",
    )
    fee = models.ForeignKey(
        CourseFee,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="enrollments",
        verbose_name="tarif",
    )
    employee = models.ForeignKey(
        "hr.Employee",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="course_enrollments",
        verbose_name="employe",
    )
    daily_stat = models.OneToOneField(
        "dailystats.DailyStat",
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name="enrollment",
        verbose_name="statistique journaliere",
    )
    trainee_count = models.PositiveIntegerField("nombre de stagiaires", default=0)
    paid_amount = models.DecimalField(
        "montant par stagiaire",
        max_digits=14,
        decimal_places=2,
        default=Decimal("0.00"),
    )
    total_amount = models.DecimalField(
        "montant total",
        max_digits=14,
        decimal_places=2,
        default=Decimal("0.00"),
    )
    enrollment_date = models.DateField("date d'inscription")
    notes = models.TextField("notes", blank=True, default="")

    class Meta:
        verbose_name = "Inscription"
        verbose_name_plural = "Inscriptions"
        ordering = ["-enrollment_date", "-created_at"]

    def __str__(self):
        return f"{self.course.code} x{self.trainee_count} ({self.enrollment_date})"
