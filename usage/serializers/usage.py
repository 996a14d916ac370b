from django.core.files.storage import default_storage
from rest_framework import serializers

from usage.models import UsageRecord


class UsageRecordOutSerializer(serializers.ModelSerializer):
    class Meta:
        model = UsageRecord
        fields = ("id", "user", "generation_mode", "input_type", "style", "image_path",
                  "credits_charged", "estimated_tokens", "used_free", "created_at")
        read_only_fields = fields


class UsageHistoryItemSerializer(serializers.ModelSerializer):
    image_url = serializers.SerializerMethodField()

    class Meta:
        model = UsageRecord
        fields = ("id", "generation_mode", "created_at", "image_path", "image_url")
        read_only_fields = fields

    def get_image_url(self, obj) -> str | None:
        if not obj.image_path:
            return None
        return default_storage.url(obj.image_path)


class UsageCheckOutSerializer(serializers.Serializer):
    remaining = serializers.IntegerField()
    total = serializers.IntegerField()
    isUnlimited = serializers.BooleanField()
    isAuthenticated = serializers.BooleanField()
    freeRemaining = serializers.IntegerField()
    paidCredits = serializers.IntegerField()
