from django.contrib import admin
from .models import CreditPackage, PromoCode, PromoRedemption, Subscription


@admin.register(CreditPackage)
class CreditPackageAdmin(admin.ModelAdmin):
    list_display = ("id", "user", "source", "credits_remaining", "credits_purchased", "payment_intent_id", "created_at")
    list_filter = ("source",)
    search_fields = ("user__email", "payment_intent_id")
    readonly_fields = ("payment_intent_id", "credits_purchased", "created_at")


@admin.register(Subscription)
class SubscriptionAdmin(admin.ModelAdmin):
    list_display = ("user", "status", "plan_type", "current_period_end", "cancel_at_period_end")
    list_filter = ("status", "plan_type")
    search_fields = ("user__email", "stripe_subscription_id")


@admin.register(PromoCode)
class PromoCodeAdmin(admin.ModelAdmin):
    list_display = ("code", "credits", "active", "expires_at", "redemption_count", "max_redemptions")
    list_filter = ("active",)
    search_fields = ("code",)
    readonly_fields = ("redemption_count", "created_at")


@admin.register(PromoRedemption)
class PromoRedemptionAdmin(admin.ModelAdmin):
    list_display = ("user", "promo_code", "credits_awarded", "created_at")
    search_fields = ("user__email", "promo_code__code")
