from django.urls import path

from .views.account import CheckoutView, PromoRedeemView, SubscriptionView

promo_urlpatterns = [
    path("redeem", PromoRedeemView.as_view(), name="promo-redeem"),
]

billing_urlpatterns = [
    path("checkout", CheckoutView.as_view(), name="billing-checkout"),
]

account_urlpatterns = [
    path("subscription", SubscriptionView.as_view(), name="account-subscription"),
]
