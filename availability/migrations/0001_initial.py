import datetime

import availability.models
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="AvailabilityConfig",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("weekly_days", models.JSONField(default=availability.models.default_weekly_days)),
                ("cutoff_time", models.TimeField(default=datetime.time(18, 0))),
                ("is_temporarily_closed", models.BooleanField(default=False)),
                ("temp_close_reason", models.CharField(blank=True, default="", max_length=255)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
        ),
    ]
