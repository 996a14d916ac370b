from django.conf import settings
from django.conf.urls.static import static
from django.contrib import admin
from django.urls import path, include, re_path
from django.http import JsonResponse
from drf_spectacular.views import SpectacularAPIView, SpectacularSwaggerView, SpectacularRedocView
from rest_framework.permissions import AllowAny

from billing.urls import account_urlpatterns, billing_urlpatterns, promo_urlpatterns
from .routers import router as api_router
from .settings.base import API_PREFIX, API_VERSION, HEALTH_INFO

def health_view(_request):
    return JsonResponse({"status": "ok", **HEALTH_INFO()})

API = f"{API_PREFIX}/{API_VERSION}"

urlpatterns = [
    path("health/", health_view, name="health"),
    path("admin/", admin.site.urls),

    # OpenAPI
    path(f"{API}/schema/", SpectacularAPIView.as_view(), name="schema"),
    path(
        f"{API}/docs/",
        SpectacularSwaggerView.as_view(
            url_name="schema",
            permission_classes=[AllowAny],
            authentication_classes=[],
        ),
        name="swagger-ui",
    ),
    path(
        f"{API}/redoc/",
        SpectacularRedocView.as_view(
            url_name="schema",
            permission_classes=[AllowAny],
            authentication_classes=[],
        ),
        name="redoc",
    ),

    path(f"{API}/", include(api_router.urls)),
    path(f"{API}/auth/", include("accounts.urls")),
    path(f"{API}/ai/", include("generation.urls")),
    path(f"{API}/usage/", include("usage.urls")),
    path(f"{API}/promo/", include(promo_urlpatterns)),
    path(f"{API}/billing/", include(billing_urlpatterns)),
    path(f"{API}/account/", include(account_urlpatterns)),
    path(f"{API}/stripe/", include("webhooks.urls")),
]

if settings.DEBUG:
    urlpatterns += static(settings.MEDIA_URL, document_root=settings.MEDIA_ROOT)

urlpatterns += [
    re_path(
        r"^$",
        SpectacularSwaggerView.as_view(
            url_name="schema",
            permission_classes=[AllowAny],
            authentication_classes=[],
        ),
    ),
]
