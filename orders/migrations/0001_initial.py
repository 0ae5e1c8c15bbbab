import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


STATUS_CHOICES = [
    ("pending", "pending"),
    ("in_progress", "in_progress"),
    ("arrived", "arrived"),
    ("delivered", "delivered"),
    ("canceled", "canceled"),
    ("no_show", "no_show"),
]


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Order",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("tracking_code", models.CharField(editable=False, max_length=12, unique=True)),
                ("customer_name", models.CharField(max_length=150)),
                ("phone", models.CharField(db_index=True, max_length=20)),
                ("location", models.CharField(max_length=255)),
                ("items", models.JSONField(default=list)),
                ("total", models.PositiveIntegerField()),
                ("status", models.CharField(choices=STATUS_CHOICES, db_index=True, default="pending", max_length=20)),
                (
                    "source",
                    models.CharField(
                        choices=[("online", "online"), ("manual", "manual")], default="online", max_length=10
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "user",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="orders",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "ordering": ("-created_at", "-id"),
            },
        ),
        migrations.CreateModel(
            name="OrderStatusEvent",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("status", models.CharField(choices=STATUS_CHOICES, max_length=20)),
                ("at", models.DateTimeField(auto_now_add=True)),
                (
                    "order",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="status_history",
                        to="orders.order",
                    ),
                ),
            ],
            options={
                "ordering": ("at", "id"),
            },
        ),
        migrations.CreateModel(
            name="OrderNotification",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                (
                    "message_type",
                    models.CharField(
                        choices=[("confirmation", "confirmation"), ("arrival", "arrival")], max_length=20
                    ),
                ),
                ("provider", models.CharField(blank=True, default="", max_length=30)),
                ("provider_response", models.JSONField(blank=True, null=True)),
                ("outcome", models.CharField(choices=[("sent", "sent"), ("failed", "failed")], max_length=10)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "order",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="notifications",
                        to="orders.order",
                    ),
                ),
            ],
            options={
                "ordering": ("created_at", "id"),
            },
        ),
    ]
