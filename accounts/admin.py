from django.contrib import admin
from .models import AccessToken, Profile


@admin.register(Profile)
class ProfileAdmin(admin.ModelAdmin):
    list_display = ("id", "user", "display_name", "stripe_customer_id", "created_at")
    search_fields = ("user__email", "display_name", "stripe_customer_id")
    readonly_fields = ("created_at", "updated_at")


@admin.register(AccessToken)
class AccessTokenAdmin(admin.ModelAdmin):
    list_display = ("id", "user", "token_prefix", "active", "is_expired", "last_used_at", "created_at")
    list_filter = ("active",)
    search_fields = ("token_prefix", "user__email")
    readonly_fields = ("token_hash", "created_at", "last_used_at")
