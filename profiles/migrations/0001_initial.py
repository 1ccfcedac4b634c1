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
            name="Profile",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("type", models.CharField(choices=[("customer", "customer"), ("driver", "driver"), ("shop", "shop")], max_length=20)),
                ("mobile", models.CharField(blank=True, default="", max_length=30)),
                ("village", models.CharField(blank=True, default="", max_length=120)),
                ("vehicle_type", models.CharField(blank=True, default="", max_length=50)),
                ("shop_id", models.CharField(blank=True, max_length=50, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "user",
                    models.OneToOneField(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="profile",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "indexes": [models.Index(fields=["type", "shop_id"], name="profile_type_shop_idx")],
            },
        ),
    ]
