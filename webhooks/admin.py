from django.contrib import admin
from .models import WebhookEvent


@admin.register(WebhookEvent)
class WebhookEventAdmin(admin.ModelAdmin):
    list_display = ("event_id", "event_type", "status", "attempts", "livemode", "created_at", "processed_at")
    list_filter = ("status", "event_type", "livemode")
    search_fields = ("event_id",)
    readonly_fields = ("event_id", "event_type", "livemode", "payload", "created_at", "updated_at", "processed_at")
