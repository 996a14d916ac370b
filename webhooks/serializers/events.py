from rest_framework import serializers

from webhooks.models import WebhookEvent


class WebhookEventOutSerializer(serializers.ModelSerializer):
    class Meta:
        model = WebhookEvent
        fields = (
            "id", "event_id", "event_type", "livemode", "status", "attempts",
            "last_error", "created_at", "updated_at", "processed_at",
        )
        read_only_fields = fields


class WebhookEventDetailSerializer(WebhookEventOutSerializer):
    class Meta(WebhookEventOutSerializer.Meta):
        fields = WebhookEventOutSerializer.Meta.fields + ("payload",)
        read_only_fields = fields
