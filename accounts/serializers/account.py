from django.contrib.auth import get_user_model
from rest_framework import serializers

User = get_user_model()


class SignupSerializer(serializers.Serializer):
    username = serializers.CharField(
        min_length=2, max_length=50,
        error_messages={
            "min_length": "Username must be at least 2 characters",
            "max_length": "Username must be at most 50 characters",
            "required": "Username must be at least 2 characters",
            "blank": "Username must be at least 2 characters",
        },
    )
    email = serializers.EmailField(error_messages={
        "invalid": "Invalid email address",
        "required": "Invalid email address",
        "blank": "Invalid email address",
    })
    password = serializers.CharField(
        min_length=6, write_only=True, trim_whitespace=False,
        error_messages={
            "min_length": "Password must be at least 6 characters",
            "required": "Password must be at least 6 characters",
            "blank": "Password must be at least 6 characters",
        },
    )

    def validate_email(self, value: str) -> str:
        value = value.strip().lower()
        if User.objects.filter(username=value).exists():
            raise serializers.ValidationError("Email already registered")
        return value


class LoginSerializer(serializers.Serializer):
    email = serializers.EmailField()
    password = serializers.CharField(trim_whitespace=False)


class UserOutSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    email = serializers.EmailField()
    name = serializers.SerializerMethodField()

    def get_name(self, obj) -> str:
        profile = getattr(obj, "profile", None)
        return profile.display_name if profile else ""
