import logging

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView
from drf_spectacular.utils import extend_schema, OpenApiExample, OpenApiResponse

from core.responses import error_response, first_error
from limits.services.ledger import get_credit_balance

from ..models import Subscription
from ..serializers.billing import CheckoutInputSerializer, PromoRedeemInputSerializer, SubscriptionOutSerializer
from ..services.checkout import PriceNotConfigured, create_credits_checkout
from ..services.payment_provider import PaymentProviderError
from ..services.promo import PromoRedemptionError, redeem_promo_code

logger = logging.getLogger(__name__)


@extend_schema(
    tags=["Billing"],
    request=PromoRedeemInputSerializer,
    responses={
        200: OpenApiResponse(description="{success, credits, message}"),
        400: OpenApiResponse(description="Code invalide / expiré / déjà utilisé / limite atteinte"),
        401: OpenApiResponse(description="Non connecté"),
    },
    examples=[
        OpenApiExample("Requête", value={"code": "WELCOME50"}, request_only=True),
        OpenApiExample(
            "Réponse",
            value={"success": True, "credits": 50, "message": "Successfully redeemed 50 credits!"},
            response_only=True,
        ),
    ],
)
class PromoRedeemView(APIView):
    """POST /promo/redeem"""

    def post(self, request):
        ser = PromoRedeemInputSerializer(data=request.data)
        if not ser.is_valid():
            return error_response(first_error(ser.errors), status.HTTP_400_BAD_REQUEST)

        try:
            credits = redeem_promo_code(request.user, ser.validated_data["code"])
        except PromoRedemptionError as e:
            return error_response(e.message, status.HTTP_400_BAD_REQUEST)

        return Response({
            "success": True,
            "credits": credits,
            "message": f"Successfully redeemed {credits} credits!",
        }, status=status.HTTP_200_OK)


@extend_schema(
    tags=["Billing"],
    request=CheckoutInputSerializer,
    responses={
        200: OpenApiResponse(description="{url}: URL de la session Stripe Checkout"),
        400: OpenApiResponse(description="Pack inconnu"),
        500: OpenApiResponse(description="Prix non configuré / erreur Stripe"),
    },
)
class CheckoutView(APIView):
    """POST /billing/checkout"""

    def post(self, request):
        ser = CheckoutInputSerializer(data=request.data)
        if not ser.is_valid():
            return error_response(first_error(ser.errors), status.HTTP_400_BAD_REQUEST)

        try:
            url = create_credits_checkout(request.user, ser.validated_data["packId"])
        except PriceNotConfigured:
            return error_response("Price not configured", status.HTTP_500_INTERNAL_SERVER_ERROR)
        except PaymentProviderError:
            logger.exception("Stripe checkout error for user %s", request.user.pk)
            return error_response("Failed to create checkout session", status.HTTP_500_INTERNAL_SERVER_ERROR)

        return Response({"url": url}, status=status.HTTP_200_OK)


@extend_schema(
    tags=["Billing"],
    responses={200: OpenApiResponse(description="{subscription: {...}|null, credits}")},
)
class SubscriptionView(APIView):
    """GET /account/subscription : abonnement (legacy) + solde de crédits."""

    def get(self, request):
        sub = Subscription.objects.filter(user=request.user).first()
        return Response({
            "subscription": SubscriptionOutSerializer(sub).data if sub else None,
            "credits": get_credit_balance(request.user),
        })
