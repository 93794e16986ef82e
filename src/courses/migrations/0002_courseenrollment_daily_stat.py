import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    dependencies = [
        ("courses", "0001_initial"),
        ("dailystats", "0001_initial"),
    ]

    operations = [
        migrations.AddField(
            model_name="courseenrollment",
            name="daily_stat",
            field=models.OneToOneField(blank=True, null=True, on_delete=django.db.models.deletion.CASCADE, related_name="enrollment", to="dailystats.dailystat", verbose_name="statistique journaliere"),
        ),
    ]
