from django.contrib import admin
from .models import UsageRecord


@admin.register(UsageRecord)
class UsageRecordAdmin(admin.ModelAdmin):
    list_display = ("id", "user", "generation_mode", "style", "credits_charged", "used_free", "created_at")
    list_filter = ("generation_mode", "used_free", "style")
    search_fields = ("user__email",)
    readonly_fields = [f.name for f in UsageRecord._meta.fields]
