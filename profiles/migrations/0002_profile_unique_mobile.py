from django.db import migrations, models


class Migration(migrations.Migration):

    dependencies = [
        ("profiles", "0001_initial"),
    ]

    operations = [
        migrations.AddConstraint(
            model_name="profile",
            constraint=models.UniqueConstraint(
                condition=models.Q(("mobile", ""), _negated=True),
                fields=("mobile",),
                name="profile_unique_mobile",
            ),
        ),
    ]
