from decimal import Decimal

import django.core.validators
import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="DeliveryRequest",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("item_description", models.TextField()),
                ("contact_number", models.CharField(max_length=30)),
                ("village", models.CharField(max_length=120)),
                ("shop_name", models.CharField(max_length=200)),
                ("shop_address", models.CharField(max_length=255)),
                ("shop_id", models.CharField(blank=True, db_index=True, max_length=50, null=True)),
                ("items", models.JSONField(blank=True, default=list)),
                ("product_total", models.FloatField(blank=True, null=True)),
                ("delivery_fee", models.FloatField(blank=True, null=True)),
                ("grand_total", models.FloatField(blank=True, null=True)),
                (
                    "estimated_distance_km",
                    models.FloatField(
                        blank=True,
                        null=True,
                        validators=[django.core.validators.MinValueValidator(0)],
                    ),
                ),
                ("price", models.DecimalField(decimal_places=2, default=Decimal("4.00"), max_digits=10)),
                ("need_by_at", models.DateTimeField(blank=True, null=True)),
                (
                    "delivery_status",
                    models.CharField(
                        choices=[
                            ("Pending", "Pending"),
                            ("Assigned", "Assigned"),
                            ("Picked", "Picked"),
                            ("Delivered", "Delivered"),
                        ],
                        default="Pending",
                        max_length=20,
                    ),
                ),
                (
                    "shop_confirmation_status",
                    models.CharField(
                        choices=[
                            ("Pending", "Pending"),
                            ("Accepted", "Accepted"),
                            ("Rejected", "Rejected"),
                        ],
                        default="Pending",
                        max_length=20,
                    ),
                ),
                ("shop_confirmation_at", models.DateTimeField(blank=True, null=True)),
                ("shop_note", models.CharField(blank=True, default="", max_length=300)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "assigned_driver",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="assigned_deliveries",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "created_by",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="delivery_requests",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "indexes": [
                    models.Index(fields=["delivery_status", "assigned_driver"], name="delivery_status_driver_idx"),
                    models.Index(fields=["shop_id", "shop_confirmation_status"], name="delivery_shop_confirm_idx"),
                ],
            },
        ),
    ]
