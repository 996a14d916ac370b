from rest_framework.routers import DefaultRouter

router = DefaultRouter()

# Admin Usage records
from usage.views.admin import UsageRecordAdminViewSet
router.register(r"admin/usage", UsageRecordAdminViewSet, basename="admin-usage")

# Admin Webhook events (Stripe)
from webhooks.views import WebhookEventAdminViewSet
router.register(r"admin/webhooks/events", WebhookEventAdminViewSet, basename="admin-webhook-events")

# Admin Promo codes
from billing.views.admin import PromoCodeAdminViewSet
router.register(r"admin/promo-codes", PromoCodeAdminViewSet, basename="admin-promo-codes")
