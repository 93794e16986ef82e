import django.db.models.deletion
from decimal import Decimal
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("courses", "0001_initial"),
        ("hr", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="DailyStat",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True, verbose_name="cree le")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="modifie le")),
                ("date", models.DateField(db_index=True, verbose_name="date")),
                ("targeted_customers", models.PositiveIntegerField(default=0, verbose_name="clients cibles")),
                ("confirmed_customers", models.PositiveIntegerField(default=0, verbose_name="clients confirmes")),
                ("registered_customers", models.PositiveIntegerField(default=0, verbose_name="clients inscrits")),
                ("services_sold", models.PositiveIntegerField(default=0, verbose_name="services vendus")),
                ("sales_amount", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=14, verbose_name="montant des ventes de services")),
                ("course_fee", models.DecimalField(blank=True, decimal_places=2, max_digits=14, null=True, verbose_name="tarif applique")),
                ("fee_breakdown", models.JSONField(blank=True, default=list, help_text='Liste de {"fee_amount": ..., "customer_count": ...}.', verbose_name="repartition par tarif")),
                ("calculated_revenue", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=14, verbose_name="chiffre d'affaires calcule")),
                ("notes", models.TextField(blank=True, default="", verbose_name="notes")),
                ("status", models.CharField(choices=[("pending", "En attente"), ("approved", "Approuvee"), ("rejected", "Rejetee")], db_index=True, default="pending", max_length=10, verbose_name="statut")),
                ("reviewed_at", models.DateTimeField(blank=True, null=True, verbose_name="revue le")),
                ("review_notes", models.TextField(blank=True, default="", verbose_name="notes de revue")),
                ("course", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="daily_stats", to="courses.course", verbose_name="formation")),
                ("employee", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="daily_stats", to="hr.employee", verbose_name="employe")),
                ("reviewed_by", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="reviewed_daily_stats", to=settings.AUTH_USER_MODEL, verbose_name="revue par")),
                ("submitted_by", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="submitted_daily_stats", to=settings.AUTH_USER_MODEL, verbose_name="soumis par")),
            ],
            options={
                "verbose_name": "Statistique journaliere",
                "verbose_name_plural": "Statistiques journalieres",
                "ordering": ["-date", "-created_at"],
                "indexes": [
                    models.Index(fields=["employee", "status", "date"], name="dailystat_emp_status_date_idx"),
                ],
            },
        ),
    ]
