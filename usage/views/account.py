from drf_spectacular.utils import extend_schema, OpenApiParameter, OpenApiResponse
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from billing.config import get_pricing_config
from limits.services.ledger import get_credit_balance, get_free_allowance, today
from usage.models import UsageRecord
from usage.serializers.usage import UsageCheckOutSerializer, UsageHistoryItemSerializer

HISTORY_DEFAULT_LIMIT = 10
HISTORY_MAX_LIMIT = 50

ANONYMOUS_USAGE = {
    "remaining": 0,
    "total": 1,
    "isUnlimited": False,
    "isAuthenticated": False,
    "freeRemaining": 0,
    "paidCredits": 0,
}


def _parse_limit(raw) -> int:
    try:
        value = int(raw)
    except (TypeError, ValueError):
        return HISTORY_DEFAULT_LIMIT
    return min(max(value, 1), HISTORY_MAX_LIMIT)


@extend_schema(
    tags=["Usage"],
    responses={200: OpenApiResponse(response=UsageCheckOutSerializer, description="Allocation restante du jour")},
)
class UsageCheckView(APIView):
    """
    GET /usage/check
    Lecture seule: aucune mutation du registre.
    """
    permission_classes = [AllowAny]

    def get(self, request):
        if not request.user.is_authenticated:
            return Response(ANONYMOUS_USAGE)

        allowance = get_free_allowance(request.user, today(), get_pricing_config().site_free_daily_limit)
        paid = get_credit_balance(request.user)
        return Response({
            "remaining": allowance.free_remaining + paid,
            "freeRemaining": allowance.free_remaining,
            "paidCredits": paid,
            "total": 1 if allowance.eligible else 0,
            "isUnlimited": False,
            "isAuthenticated": True,
        })


@extend_schema(
    tags=["Usage"],
    parameters=[OpenApiParameter("limit", int, description="1..50 (défaut 10)")],
    responses={200: OpenApiResponse(description="{records: [...]}")},
)
class UsageHistoryView(APIView):
    """GET /usage/history?limit=N : dernières générations de l'utilisateur."""
    permission_classes = [IsAuthenticated]

    def get(self, request):
        limit = _parse_limit(request.query_params.get("limit"))
        qs = UsageRecord.objects.filter(user=request.user).order_by("-created_at", "-id")[:limit]
        return Response({"records": UsageHistoryItemSerializer(qs, many=True).data})
