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
            name="PromoCode",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("code", models.CharField(max_length=64, unique=True)),
                ("credits", models.PositiveIntegerField()),
                ("active", models.BooleanField(default=True)),
                ("expires_at", models.DateTimeField(blank=True, null=True)),
                ("max_redemptions", models.PositiveIntegerField(blank=True, null=True)),
                ("redemption_count", models.PositiveIntegerField(default=0)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
            ],
            options={"db_table": "promo_codes", "ordering": ["-created_at"]},
        ),
        migrations.CreateModel(
            name="CreditPackage",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("credits_purchased", models.PositiveIntegerField()),
                ("credits_remaining", models.PositiveIntegerField()),
                ("source", models.CharField(choices=[("purchase", "Purchase"), ("promo", "Promo code")], default="purchase", max_length=16)),
                ("payment_intent_id", models.CharField(blank=True, max_length=255, null=True, unique=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("promo_code", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="credit_packages", to="billing.promocode")),
                ("user", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="credit_packages", to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "db_table": "credit_packages",
                "indexes": [models.Index(fields=["user", "credits_remaining"], name="credit_pkg_user_remaining_idx")],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(("credits_remaining__lte", models.F("credits_purchased"))),
                        name="credit_pkg_remaining_lte_purchased",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="Subscription",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("stripe_subscription_id", models.CharField(blank=True, db_index=True, default="", max_length=255)),
                ("status", models.CharField(choices=[("active", "Active"), ("inactive", "Inactive"), ("canceled", "Canceled"), ("past_due", "Past due")], default="inactive", max_length=16)),
                ("plan_type", models.CharField(choices=[("free", "Free"), ("monthly", "Monthly")], default="free", max_length=16)),
                ("current_period_start", models.DateTimeField(blank=True, null=True)),
                ("current_period_end", models.DateTimeField(blank=True, null=True)),
                ("cancel_at_period_end", models.BooleanField(default=False)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("user", models.OneToOneField(on_delete=django.db.models.deletion.CASCADE, related_name="subscription", to=settings.AUTH_USER_MODEL)),
            ],
            options={"db_table": "subscriptions"},
        ),
        migrations.CreateModel(
            name="PromoRedemption",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("credits_awarded", models.PositiveIntegerField()),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("promo_code", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="redemptions", to="billing.promocode")),
                ("user", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="promo_redemptions", to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "db_table": "promo_redemptions",
                "constraints": [
                    models.UniqueConstraint(fields=("user", "promo_code"), name="promo_redemption_once_per_user"),
                ],
            },
        ),
    ]
