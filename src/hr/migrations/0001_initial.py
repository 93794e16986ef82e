import django.db.models.deletion
from decimal import Decimal
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("academies", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Employee",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True, verbose_name="cree le")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="modifie le")),
                ("employee_code", models.CharField(db_index=True, max_length=30, verbose_name="matricule")),
                ("first_name", models.CharField(max_length=150, verbose_name="prenom")),
                ("last_name", models.CharField(blank=True, default="", max_length=150, verbose_name="nom")),
                ("email", models.EmailField(blank=True, default="", max_length=254, verbose_name="e-mail")),
                ("phone", models.CharField(blank=True, default="", max_length=30, verbose_name="telephone")),
                ("specialization", models.CharField(choices=[("customer_service", "Service client"), ("marketing", "Marketing"), ("executive_manager", "Direction"), ("developer", "Developpeur"), ("support", "Support")], default="customer_service", max_length=30, verbose_name="specialisation")),
                ("status", models.CharField(choices=[("active", "Actif"), ("inactive", "Inactif"), ("on_leave", "En conge")], db_index=True, default="active", max_length=20, verbose_name="statut")),
                ("hire_date", models.DateField(blank=True, null=True, verbose_name="date d'embauche")),
                ("salary", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=14, verbose_name="salaire")),
                ("academy", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="employees", to="academies.academy", verbose_name="academie")),
                ("user", models.OneToOneField(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="employee_profile", to=settings.AUTH_USER_MODEL, verbose_name="compte utilisateur")),
            ],
            options={
                "verbose_name": "Employe",
                "verbose_name_plural": "Employes",
                "ordering": ["first_name", "last_name"],
                "constraints": [
                    models.UniqueConstraint(fields=("academy", "employee_code"), name="uniq_employee_code_per_academy"),
                ],
            },
        ),
    ]
