import base64
import binascii

from django.conf import settings
from rest_framework import serializers

from billing.services.pricing import MODE_PHOTO, MODE_TEXT, strip_data_url
from generation.services.prompts import STYLE_CHOICES, DEFAULT_STYLE

MODE_CHOICES = [MODE_PHOTO, MODE_TEXT]


def decode_image_payload(value: str) -> bytes:
    """Décode une image base64 (data URL acceptée). ValueError si illisible."""
    try:
        return base64.b64decode(strip_data_url(value), validate=True)
    except (binascii.Error, ValueError):
        raise ValueError("INVALID_IMAGE_BASE64")


class GenerateAvatarInputSerializer(serializers.Serializer):
    mode = serializers.ChoiceField(
        choices=MODE_CHOICES,
        error_messages={
            "required": "Invalid generation mode",
            "invalid_choice": "Invalid generation mode",
            "null": "Invalid generation mode",
        },
    )
    style = serializers.ChoiceField(
        choices=STYLE_CHOICES,
        default=DEFAULT_STYLE,
        error_messages={"invalid_choice": "Invalid avatar style"},
    )
    image = serializers.CharField(required=False, allow_blank=True, allow_null=True, trim_whitespace=False)
    description = serializers.CharField(required=False, allow_blank=True, allow_null=True, trim_whitespace=False)

    def validate(self, attrs):
        mode = attrs["mode"]
        if mode == MODE_PHOTO:
            image = attrs.get("image") or ""
            if not image:
                raise serializers.ValidationError("Image is required for photo2avatar mode")
            try:
                raw = decode_image_payload(image)
            except ValueError:
                raise serializers.ValidationError("Invalid image data")
            if not raw or len(raw) > settings.AI_MAX_IMAGE_BYTES:
                raise serializers.ValidationError("Invalid image data")
            attrs["payload"] = image
        else:
            description = attrs.get("description") or ""
            if not description.strip():
                raise serializers.ValidationError("Description is required for text2avatar mode")
            attrs["payload"] = description
        return attrs
