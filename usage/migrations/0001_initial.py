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
            name="UsageRecord",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("generation_mode", models.CharField(choices=[("photo2avatar", "Photo to avatar"), ("text2avatar", "Text to avatar")], db_index=True, max_length=32)),
                ("input_type", models.CharField(choices=[("image", "Image"), ("text", "Text")], max_length=16)),
                ("style", models.CharField(default="notion", max_length=32)),
                ("image_path", models.CharField(blank=True, default="", max_length=512)),
                ("credits_charged", models.PositiveIntegerField(default=0)),
                ("estimated_tokens", models.PositiveIntegerField(default=0)),
                ("used_free", models.BooleanField(default=False)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("user", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="usage_records", to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "db_table": "usage_records",
                "indexes": [
                    models.Index(fields=["user", "created_at"], name="usage_user_created_idx"),
                    models.Index(fields=["created_at"], name="usage_created_idx"),
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=(models.Q(("used_free", True), ("credits_charged", 0)) | models.Q(("used_free", False), ("credits_charged__gt", 0))),
                        name="usage_free_iff_zero_credits",
                    ),
                ],
            },
        ),
    ]
