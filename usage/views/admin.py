from django.db.models import Count, Sum
from rest_framework import viewsets, mixins
from rest_framework.permissions import IsAdminUser

from usage.models import UsageRecord
from usage.serializers.usage import UsageRecordOutSerializer


class UsageRecordAdminViewSet(viewsets.GenericViewSet, mixins.ListModelMixin, mixins.RetrieveModelMixin):
    """
    Super-admin: lecture des générations (filtrable via query params).
    """
    permission_classes = [IsAdminUser]
    serializer_class = UsageRecordOutSerializer

    def get_queryset(self):
        qs = UsageRecord.objects.select_related("user").order_by("-created_at")
        user_id = self.request.query_params.get("user_id")
        mode = self.request.query_params.get("mode")
        used_free = self.request.query_params.get("used_free")
        date_from = self.request.query_params.get("from")
        date_to = self.request.query_params.get("to")
        if user_id:
            qs = qs.filter(user_id=user_id)
        if mode:
            qs = qs.filter(generation_mode=mode)
        if used_free is not None:
            qs = qs.filter(used_free=(used_free.lower() == "true"))
        if date_from:
            qs = qs.filter(created_at__gte=date_from)
        if date_to:
            qs = qs.filter(created_at__lt=date_to)
        return qs

    # Résumé agrégé par mode
    def list(self, request, *args, **kwargs):
        response = super().list(request, *args, **kwargs)
        qs = self.get_queryset().order_by()
        agg = (qs.values("generation_mode")
               .annotate(total_generations=Count("id"), total_credits=Sum("credits_charged"))
               .order_by("generation_mode"))
        response.data = {"results": response.data, "summary": list(agg)}
        return response
