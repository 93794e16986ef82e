from django.db import migrations, models


class Migration(migrations.Migration):

    dependencies = [
        ("dailystats", "0001_initial"),
    ]

    operations = [
        migrations.AddField(
            model_name="dailystat",
            name="targeted_by_services",
            field=models.PositiveIntegerField(default=0, verbose_name="clients cibles par les services"),
        ),
        migrations.AddField(
            model_name="dailystat",
            name="sold_services",
            field=models.JSONField(blank=True, default=list, help_text='Liste de {"name": ..., "price": ..., "quantity": ...}.', verbose_name="services vendus (detail)"),
        ),
    ]
