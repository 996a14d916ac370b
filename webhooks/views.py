import logging

from django.conf import settings
from django.shortcuts import get_object_or_404
from rest_framework import viewsets, mixins, status
from rest_framework.decorators import action
from rest_framework.permissions import AllowAny, IsAdminUser
from rest_framework.response import Response
from rest_framework.views import APIView
from drf_spectacular.utils import extend_schema, OpenApiParameter, OpenApiResponse

from billing.services.payment_provider import WebhookVerificationError, get_payment_provider
from core.responses import error_response

from .models import WebhookEvent
from .serializers.events import WebhookEventDetailSerializer, WebhookEventOutSerializer
from .services.processor import RESULT_FAILED, process_event, replay_event

logger = logging.getLogger(__name__)


@extend_schema(
    tags=["Stripe"],
    request=None,
    parameters=[OpenApiParameter("Stripe-Signature", str, location=OpenApiParameter.HEADER, required=True)],
    responses={
        200: OpenApiResponse(description="{received: true} (y compris doublon)"),
        400: OpenApiResponse(description="Signature invalide / corps illisible"),
        413: OpenApiResponse(description="Corps > 1 Mo"),
        500: OpenApiResponse(description="Traitement en échec (journalisé, rejouable)"),
    },
)
class StripeWebhookView(APIView):
    """
    POST /stripe/webhook
    Corps brut signé par Stripe: aucun parser DRF, aucune auth applicative.
    """
    permission_classes = [AllowAny]
    authentication_classes = []
    parser_classes = []
    throttle_classes = []

    def post(self, request):
        payload = request.body
        if len(payload) > settings.STRIPE_WEBHOOK_MAX_BYTES:
            return error_response("Payload too large", status.HTTP_413_REQUEST_ENTITY_TOO_LARGE)

        provider = get_payment_provider()
        try:
            event = provider.verify_webhook(payload, request.headers.get("Stripe-Signature"))
        except WebhookVerificationError as e:
            logger.warning("Stripe webhook verification failed: %s", e)
            return error_response("Webhook signature verification failed", status.HTTP_400_BAD_REQUEST)

        result = process_event(event, provider)
        if result.status == RESULT_FAILED:
            return error_response("Webhook handler failed", status.HTTP_500_INTERNAL_SERVER_ERROR)
        return Response({"received": True}, status=status.HTTP_200_OK)


class WebhookEventAdminViewSet(viewsets.GenericViewSet, mixins.ListModelMixin, mixins.RetrieveModelMixin):
    """
    Super-admin: consultation du journal des événements Stripe + rejeu manuel.
    """
    permission_classes = [IsAdminUser]
    serializer_class = WebhookEventOutSerializer
    queryset = WebhookEvent.objects.all().order_by("-created_at")
    filterset_fields = ["status", "event_type", "livemode"]

    def get_serializer_class(self):
        if self.action == "retrieve":
            return WebhookEventDetailSerializer
        return WebhookEventOutSerializer

    @action(detail=True, methods=["post"], url_path="replay")
    def replay(self, request, pk=None):
        """Rejoue un événement en échec (no-op si déjà traité)."""
        row = get_object_or_404(WebhookEvent, pk=pk)
        result = replay_event(row)
        row.refresh_from_db()
        return Response(
            {"result": result.status, "event": WebhookEventOutSerializer(row).data},
            status=status.HTTP_200_OK,
        )
