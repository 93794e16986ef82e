import django.core.validators
import django.db.models.deletion
from decimal import Decimal
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("hr", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="EmployeeTarget",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True, verbose_name="cree le")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="modifie le")),
                ("target_type", models.CharField(choices=[("daily_calls", "Appels quotidiens"), ("confirmed_customers", "Clients confirmes"), ("registered_customers", "Clients inscrits"), ("targeted_customers", "Clients cibles"), ("services_sold", "Services vendus"), ("retargeting", "Relances"), ("campaigns", "Campagnes"), ("leads_generated", "Prospects generes"), ("conversion_rate", "Taux de conversion"), ("features_completed", "Fonctionnalites livrees"), ("bugs_fixed", "Anomalies corrigees"), ("sales_amount", "Chiffre d'affaires"), ("customer_satisfaction", "Satisfaction client"), ("attendance_hours", "Heures de presence"), ("other", "Autre")], max_length=30, verbose_name="type d'objectif")),
                ("custom_name", models.CharField(blank=True, default="", max_length=200, verbose_name="libelle personnalise")),
                ("description", models.TextField(blank=True, default="", verbose_name="description")),
                ("target_value", models.DecimalField(decimal_places=2, max_digits=14, validators=[django.core.validators.MinValueValidator(Decimal("0"))], verbose_name="valeur cible")),
                ("base_value", models.DecimalField(decimal_places=2, default=Decimal("0.00"), help_text="Ajustement manuel ajoute aux statistiques approuvees.", max_digits=14, verbose_name="valeur de depart")),
                ("current_value", models.DecimalField(decimal_places=2, default=Decimal("0.00"), editable=False, max_digits=14, verbose_name="valeur actuelle")),
                ("period", models.CharField(choices=[("daily", "Quotidien"), ("weekly", "Hebdomadaire"), ("monthly", "Mensuel"), ("quarterly", "Trimestriel"), ("yearly", "Annuel")], default="monthly", max_length=10, verbose_name="periode")),
                ("month", models.PositiveSmallIntegerField(blank=True, null=True, validators=[django.core.validators.MinValueValidator(1), django.core.validators.MaxValueValidator(12)], verbose_name="mois")),
                ("year", models.PositiveSmallIntegerField(verbose_name="annee")),
                ("reward_amount", models.DecimalField(blank=True, decimal_places=2, max_digits=14, null=True, verbose_name="montant de la prime")),
                ("status", models.CharField(choices=[("in_progress", "En cours"), ("achieved", "Atteint"), ("not_achieved", "Non atteint")], db_index=True, default="in_progress", max_length=15, verbose_name="statut")),
                ("employee", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="targets", to="hr.employee", verbose_name="employe")),
            ],
            options={
                "verbose_name": "Objectif employe",
                "verbose_name_plural": "Objectifs employes",
                "ordering": ["-year", "-month", "employee"],
                "indexes": [
                    models.Index(fields=["employee", "year", "month"], name="target_emp_year_month_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="EmployeeReward",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True, verbose_name="cree le")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="modifie le")),
                ("amount", models.DecimalField(decimal_places=2, max_digits=14, verbose_name="montant")),
                ("reason", models.CharField(blank=True, default="", max_length=255, verbose_name="motif")),
                ("status", models.CharField(choices=[("pending", "En attente"), ("approved", "Approuvee"), ("paid", "Versee"), ("rejected", "Rejetee")], db_index=True, default="pending", max_length=10, verbose_name="statut")),
                ("approved_at", models.DateTimeField(blank=True, null=True, verbose_name="approuvee le")),
                ("paid_at", models.DateTimeField(blank=True, null=True, verbose_name="versee le")),
                ("notes", models.TextField(blank=True, default="", verbose_name="notes")),
                ("approved_by", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="approved_rewards", to=settings.AUTH_USER_MODEL, verbose_name="approuvee par")),
                ("employee", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="rewards", to="hr.employee", verbose_name="employe")),
                ("target", models.OneToOneField(on_delete=django.db.models.deletion.CASCADE, related_name="reward", to="targets.employeetarget", verbose_name="objectif")),
            ],
            options={
                "verbose_name": "Prime employe",
                "verbose_name_plural": "Primes employes",
                "ordering": ["-created_at"],
            },
        ),
    ]
