import django.db.models.deletion
from decimal import Decimal
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("academies", "0001_initial"),
        ("dailystats", "0002_sold_services"),
        ("hr", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="ServiceSale",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True, verbose_name="cree le")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="modifie le")),
                ("name", models.CharField(max_length=255, verbose_name="service")),
                ("price", models.DecimalField(decimal_places=2, max_digits=14, verbose_name="prix unitaire")),
                ("quantity", models.PositiveIntegerField(default=1, verbose_name="quantite")),
                ("total_amount", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=14, verbose_name="montant total")),
                ("sale_date", models.DateField(db_index=True, verbose_name="date de vente")),
                ("notes", models.TextField(blank=True, default="", verbose_name="notes")),
                ("academy", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="service_sales", to="academies.academy", verbose_name="academie")),
                ("daily_stat", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.CASCADE, related_name="service_sales", to="dailystats.dailystat", verbose_name="statistique journaliere")),
                ("employee", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="service_sales", to="hr.employee", verbose_name="employe")),
            ],
            options={
                "verbose_name": "Vente de service",
                "verbose_name_plural": "Ventes de services",
                "ordering": ["-sale_date", "-created_at"],
            },
        ),
    ]
