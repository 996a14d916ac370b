from django.contrib import admin
from .models import SiteDailyUsage, UserDailyUsage


@admin.register(SiteDailyUsage)
class SiteDailyUsageAdmin(admin.ModelAdmin):
    list_display = ("usage_date", "count", "updated_at")
    ordering = ("-usage_date",)


@admin.register(UserDailyUsage)
class UserDailyUsageAdmin(admin.ModelAdmin):
    list_display = ("user", "usage_date", "count", "updated_at")
    list_filter = ("usage_date",)
    search_fields = ("user__email",)
