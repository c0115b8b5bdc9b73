import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):
    dependencies = [
        ("accounts", "0001_initial"),
        ("memberships", "0001_initial"),
    ]
    operations = [
        migrations.AddField(
            model_name="user",
            name="membership_plan",
            field=models.ForeignKey(
                blank=True,
                null=True,
                on_delete=django.db.models.deletion.SET_NULL,
                related_name="members",
                to="memberships.membershipplan",
            ),
        ),
    ]
