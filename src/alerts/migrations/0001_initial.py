import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("hr", "0001_initial"),
        ("targets", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="TargetAlert",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True, verbose_name="cree le")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="modifie le")),
                ("alert_type", models.CharField(choices=[("reached_80", "80 % atteint"), ("reached_100", "Objectif atteint")], max_length=15, verbose_name="type d'alerte")),
                ("percentage", models.DecimalField(decimal_places=2, max_digits=5, verbose_name="pourcentage")),
                ("target_type", models.CharField(max_length=30, verbose_name="type d'objectif")),
                ("target_value", models.DecimalField(decimal_places=2, max_digits=14, verbose_name="valeur cible")),
                ("achieved_value", models.DecimalField(decimal_places=2, max_digits=14, verbose_name="valeur atteinte")),
                ("message", models.TextField(verbose_name="message")),
                ("month", models.PositiveSmallIntegerField(blank=True, null=True, verbose_name="mois")),
                ("year", models.PositiveSmallIntegerField(verbose_name="annee")),
                ("is_read", models.BooleanField(default=False, verbose_name="lu")),
                ("read_at", models.DateTimeField(blank=True, null=True, verbose_name="lu le")),
                ("notified_owner", models.BooleanField(default=False, verbose_name="responsable notifie")),
                ("employee", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="target_alerts", to="hr.employee", verbose_name="employe")),
                ("read_by", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="read_target_alerts", to=settings.AUTH_USER_MODEL, verbose_name="lu par")),
                ("target", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="alerts", to="targets.employeetarget", verbose_name="objectif")),
            ],
            options={
                "verbose_name": "Alerte objectif",
                "verbose_name_plural": "Alertes objectifs",
                "ordering": ["-created_at"],
                "constraints": [
                    models.UniqueConstraint(fields=("target", "alert_type"), name="uniq_target_alert_type"),
                ],
            },
        ),
    ]
