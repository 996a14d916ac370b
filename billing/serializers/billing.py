from rest_framework import serializers

from billing.models import PromoCode, Subscription

PACK_CHOICES = ["small", "medium", "large"]


class PromoRedeemInputSerializer(serializers.Serializer):
    code = serializers.CharField(
        max_length=64,
        error_messages={
            "required": "Invalid promo code",
            "blank": "Invalid promo code",
            "null": "Invalid promo code",
            "max_length": "Invalid promo code",
        },
    )


class CheckoutInputSerializer(serializers.Serializer):
    packId = serializers.ChoiceField(
        choices=PACK_CHOICES,
        default="small",
        error_messages={"invalid_choice": "Invalid credit pack"},
    )


class SubscriptionOutSerializer(serializers.ModelSerializer):
    is_active = serializers.BooleanField(read_only=True)

    class Meta:
        model = Subscription
        fields = ("status", "plan_type", "current_period_start", "current_period_end",
                  "cancel_at_period_end", "is_active", "updated_at")
        read_only_fields = fields


class PromoCodeAdminSerializer(serializers.ModelSerializer):
    class Meta:
        model = PromoCode
        fields = ("id", "code", "credits", "active", "expires_at", "max_redemptions",
                  "redemption_count", "created_at")
        read_only_fields = ("id", "redemption_count", "created_at")

    def validate_code(self, value):
        value = (value or "").strip().upper()
        if not value:
            raise serializers.ValidationError("Code is required")
        return value

    def validate_credits(self, value):
        if value <= 0:
            raise serializers.ValidationError("Credits must be positive")
        return value
