from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView
from drf_spectacular.utils import extend_schema, OpenApiExample, OpenApiResponse

from core.responses import first_error
from limits.throttling import GenerationRateThrottle

from ..serializers.input import GenerateAvatarInputSerializer
from ..serializers.output import GenerateAvatarErrorSerializer, GenerateAvatarOutputSerializer
from ..services.orchestrator import AvatarGenerationService, PaymentRequired
from ..services.provider import GenerationError

MSG_SIGN_IN = "Please sign in to generate avatars"
MSG_GENERATION_FAILED = "Failed to generate avatar. Please try again."


def _fail(message: str, status_code: int, **extra) -> Response:
    return Response({"success": False, "error": message, **extra}, status=status_code)


@extend_schema(
    tags=["AI Avatar"],
    request=GenerateAvatarInputSerializer,
    responses={
        200: OpenApiResponse(response=GenerateAvatarOutputSerializer, description="Avatar généré (data URL)"),
        400: OpenApiResponse(response=GenerateAvatarErrorSerializer, description="Validation"),
        401: OpenApiResponse(response=GenerateAvatarErrorSerializer, description="Non connecté"),
        402: OpenApiResponse(response=GenerateAvatarErrorSerializer, description="Quota gratuit épuisé / crédits insuffisants"),
        500: OpenApiResponse(response=GenerateAvatarErrorSerializer, description="Échec provider (allocation restituée)"),
    },
    examples=[
        OpenApiExample(
            "Requête text2avatar",
            value={"mode": "text2avatar", "style": "ghibli", "description": "A woman with short red hair"},
            request_only=True,
        ),
        OpenApiExample(
            "Réponse",
            value={"success": True, "image": "data:image/png;base64,<...>", "creditsCharged": 1, "usedFree": False},
            response_only=True,
        ),
        OpenApiExample(
            "Crédits insuffisants",
            value={"success": False, "error": "Insufficient credits. Please recharge to continue.", "requiredCredits": 2},
            response_only=True,
            status_codes=["402"],
        ),
    ],
)
class GenerateAvatarView(APIView):
    """
    POST /ai/generate-avatar
    Validation (400) avant authentification (401), toutes deux avant toute écriture du registre.
    """
    permission_classes = [AllowAny]
    throttle_classes = [GenerationRateThrottle]
    serializer_class = GenerateAvatarInputSerializer

    def post(self, request):
        ser = self.serializer_class(data=request.data)
        if not ser.is_valid():
            return _fail(first_error(ser.errors), status.HTTP_400_BAD_REQUEST)
        if not request.user.is_authenticated:
            return _fail(MSG_SIGN_IN, status.HTTP_401_UNAUTHORIZED)
        data = ser.validated_data

        svc = AvatarGenerationService()
        try:
            outcome = svc.run(user=request.user, mode=data["mode"], style=data["style"], payload=data["payload"])
        except PaymentRequired as e:
            return _fail(e.message, status.HTTP_402_PAYMENT_REQUIRED, requiredCredits=e.required_credits)
        except GenerationError:
            return _fail(MSG_GENERATION_FAILED, status.HTTP_500_INTERNAL_SERVER_ERROR)

        return Response({
            "success": True,
            "image": outcome.image,
            "creditsCharged": outcome.credits_charged,
            "usedFree": outcome.used_free,
        }, status=status.HTTP_200_OK)
