from rest_framework import serializers


class GenerateAvatarOutputSerializer(serializers.Serializer):
    success = serializers.BooleanField()
    image = serializers.CharField()             # data URL "data:<mime>;base64,..."
    creditsCharged = serializers.IntegerField()
    usedFree = serializers.BooleanField()


class GenerateAvatarErrorSerializer(serializers.Serializer):
    success = serializers.BooleanField(default=False)
    error = serializers.CharField()
    requiredCredits = serializers.IntegerField(required=False)  # 402 uniquement
