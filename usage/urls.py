from django.urls import path

from usage.views.account import UsageCheckView, UsageHistoryView

urlpatterns = [
    path("check", UsageCheckView.as_view(), name="usage-check"),
    path("history", UsageHistoryView.as_view(), name="usage-history"),
]
