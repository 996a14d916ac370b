from django.conf import settings
from django.db import models
from django.db.models import F, Q
from django.utils import timezone


class CreditPackage(models.Model):
    """
    Paquet de crédits acheté (ou offert par code promo).
    - credits_purchased: figé à la création
    - credits_remaining: décrémenté/réincrémenté uniquement par limits.services.ledger
    - payment_intent_id: transaction Stripe (unique => crédit au plus une fois par paiement)
    """
    SOURCE_PURCHASE = "purchase"
    SOURCE_PROMO = "promo"
    SOURCE_CHOICES = [
        (SOURCE_PURCHASE, "Purchase"),
        (SOURCE_PROMO, "Promo code"),
    ]

    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="credit_packages")
    credits_purchased = models.PositiveIntegerField()
    credits_remaining = models.PositiveIntegerField()
    source = models.CharField(max_length=16, choices=SOURCE_CHOICES, default=SOURCE_PURCHASE)
    payment_intent_id = models.CharField(max_length=255, unique=True, null=True, blank=True)
    promo_code = models.ForeignKey("billing.PromoCode", on_delete=models.SET_NULL, null=True, blank=True,
                                   related_name="credit_packages")
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "credit_packages"
        indexes = [models.Index(fields=["user", "credits_remaining"], name="credit_pkg_user_remaining_idx")]
        constraints = [
            models.CheckConstraint(
                condition=Q(credits_remaining__lte=F("credits_purchased")),
                name="credit_pkg_remaining_lte_purchased",
            ),
        ]

    def __str__(self) -> str:
        return f"CreditPackage(u={self.user_id}, {self.credits_remaining}/{self.credits_purchased})"


class Subscription(models.Model):
    """
    Abonnement récurrent (legacy). Mis à jour uniquement par les webhooks Stripe.
    """
    STATUS_ACTIVE = "active"
    STATUS_INACTIVE = "inactive"
    STATUS_CANCELED = "canceled"
    STATUS_PAST_DUE = "past_due"
    STATUS_CHOICES = [
        (STATUS_ACTIVE, "Active"),
        (STATUS_INACTIVE, "Inactive"),
        (STATUS_CANCELED, "Canceled"),
        (STATUS_PAST_DUE, "Past due"),
    ]
    PLAN_FREE = "free"
    PLAN_MONTHLY = "monthly"
    PLAN_CHOICES = [
        (PLAN_FREE, "Free"),
        (PLAN_MONTHLY, "Monthly"),
    ]

    user = models.OneToOneField(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="subscription")
    stripe_subscription_id = models.CharField(max_length=255, blank=True, default="", db_index=True)
    status = models.CharField(max_length=16, choices=STATUS_CHOICES, default=STATUS_INACTIVE)
    plan_type = models.CharField(max_length=16, choices=PLAN_CHOICES, default=PLAN_FREE)
    current_period_start = models.DateTimeField(null=True, blank=True)
    current_period_end = models.DateTimeField(null=True, blank=True)
    cancel_at_period_end = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "subscriptions"

    def __str__(self) -> str:
        return f"Subscription(u={self.user_id}, {self.status}/{self.plan_type})"

    @property
    def is_active(self) -> bool:
        if self.status != self.STATUS_ACTIVE:
            return False
        return not (self.current_period_end and self.current_period_end <= timezone.now())


class PromoCode(models.Model):
    """
    Code promo donnant un montant fixe de crédits.
    - code: normalisé en majuscules
    - max_redemptions: None => illimité (global, tous utilisateurs confondus)
    - redemption_count: incrémenté de façon conditionnelle (F) au rachat
    """
    code = models.CharField(max_length=64, unique=True)
    credits = models.PositiveIntegerField()
    active = models.BooleanField(default=True)
    expires_at = models.DateTimeField(null=True, blank=True)
    max_redemptions = models.PositiveIntegerField(null=True, blank=True)
    redemption_count = models.PositiveIntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "promo_codes"
        ordering = ["-created_at"]

    def __str__(self) -> str:
        return f"{self.code} (+{self.credits})"

    def save(self, *args, **kwargs):
        self.code = (self.code or "").strip().upper()
        super().save(*args, **kwargs)

    @property
    def is_expired(self) -> bool:
        return bool(self.expires_at and self.expires_at <= timezone.now())


class PromoRedemption(models.Model):
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="promo_redemptions")
    promo_code = models.ForeignKey(PromoCode, on_delete=models.CASCADE, related_name="redemptions")
    credits_awarded = models.PositiveIntegerField()
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "promo_redemptions"
        constraints = [
            models.UniqueConstraint(fields=["user", "promo_code"], name="promo_redemption_once_per_user"),
        ]

    def __str__(self) -> str:
        return f"PromoRedemption(u={self.user_id}, code={self.promo_code_id})"
