from rest_framework import viewsets, mixins
from rest_framework.permissions import IsAdminUser

from ..models import PromoCode
from ..serializers.billing import PromoCodeAdminSerializer


class PromoCodeAdminViewSet(viewsets.GenericViewSet,
                            mixins.ListModelMixin,
                            mixins.RetrieveModelMixin,
                            mixins.CreateModelMixin,
                            mixins.UpdateModelMixin):
    """
    Super-admin: création / activation / désactivation des codes promo.
    """
    permission_classes = [IsAdminUser]
    serializer_class = PromoCodeAdminSerializer
    queryset = PromoCode.objects.all().order_by("-created_at")
    filterset_fields = ["active"]
    ordering_fields = ["created_at", "redemption_count"]
