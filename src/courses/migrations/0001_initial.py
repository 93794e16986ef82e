import django.core.validators
import django.db.models.deletion
from decimal import Decimal
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("academies", "0001_initial"),
        ("hr", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="Course",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True, verbose_name="cree le")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="modifie le")),
                ("code", models.CharField(max_length=50, verbose_name="code")),
                ("name", models.CharField(max_length=255, verbose_name="nom")),
                ("instructor_name", models.CharField(blank=True, default="", max_length=255, verbose_name="formateur")),
                ("start_date", models.DateField(blank=True, null=True, verbose_name="date de debut")),
                ("end_date", models.DateField(blank=True, null=True, verbose_name="date de fin")),
                ("status", models.CharField(choices=[("active", "Actif"), ("completed", "Termine"), ("cancelled", "Annule")], db_index=True, default="active", max_length=20, verbose_name="statut")),
                ("academy", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="courses", to="academies.academy", verbose_name="academie")),
            ],
            options={
                "verbose_name": "Formation",
                "verbose_name_plural": "Formations",
                "ordering": ["name"],
                "constraints": [
                    models.UniqueConstraint(fields=("academy", "code"), name="uniq_course_code_per_academy"),
                ],
            },
        ),
        migrations.CreateModel(
            name="CourseFee",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True, verbose_name="cree le")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="modifie le")),
                ("name", models.CharField(max_length=150, verbose_name="libelle")),
                ("amount", models.DecimalField(decimal_places=2, max_digits=14, validators=[django.core.validators.MinValueValidator(Decimal("0"))], verbose_name="montant")),
                ("course", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="fees", to="courses.course", verbose_name="formation")),
            ],
            options={
                "verbose_name": "Tarif de formation",
                "verbose_name_plural": "Tarifs de formation",
                "ordering": ["course", "amount"],
            },
        ),
        migrations.CreateModel(
            name="CourseEnrollment",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True, verbose_name="cree le")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="modifie le")),
                ("trainee_count", models.PositiveIntegerField(default=0, verbose_name="nombre de stagiaires")),
                ("paid_amount", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=14, verbose_name="montant par stagiaire")),
                ("total_amount", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=14, verbose_name="montant total")),
                ("enrollment_date", models.DateField(verbose_name="date d'inscription")),
                ("notes", models.TextField(blank=True, default="", verbose_name="notes")),
                ("course", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="enrollments", to="courses.course", verbose_name="formation")),
                ("employee", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="course_enrollments", to="hr.employee", verbose_name="employe")),
                ("fee", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="enrollments", to="courses.coursefee", verbose_name="tarif")),
            ],
            options={
                "verbose_name": "Inscription",
                "verbose_name_plural": "Inscriptions",
                "ordering": ["-enrollment_date", "-created_at"],
            },
        ),
    ]
