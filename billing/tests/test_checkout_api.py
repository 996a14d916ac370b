from unittest import mock

from django.contrib.auth import get_user_model
from django.test import TestCase, Client

from accounts.models import AccessToken, Profile
from billing.models import CreditPackage, Subscription
from billing.services.payment_provider import PaymentProviderError

User = get_user_model()


class FakeProvider:
    def __init__(self, fail=False):
        self.fail = fail
        self.sessions = []

    def get_or_create_customer(self, *, customer_id, email, user_id):
        return customer_id or "cus_new"

    def create_checkout_session(self, **kwargs):
        if self.fail:
            raise PaymentProviderError("boom")
        self.sessions.append(kwargs)
        return "https://checkout.stripe.test/c/cs_123"


class CheckoutApiTest(TestCase):
    def setUp(self):
        self.user = User.objects.create_user(username="k@example.com", email="k@example.com", password="secret123")
        Profile.objects.create(user=self.user, display_name="k")
        _, self.raw = AccessToken.issue(self.user)
        self.client = Client()

    def _post(self, body):
        return self.client.post("/api/v1/billing/checkout", data=body, content_type="application/json",
                                HTTP_AUTHORIZATION=f"Bearer {self.raw}")

    def test_checkout_medium_pack(self):
        provider = FakeProvider()
        with mock.patch("billing.services.checkout.get_payment_provider", return_value=provider):
            resp = self._post({"packId": "medium"})
        self.assertEqual(resp.status_code, 200, resp.content)
        self.assertEqual(resp.json(), {"url": "https://checkout.stripe.test/c/cs_123"})
        session = provider.sessions[0]
        self.assertEqual(session["price_id"], "price_medium")
        self.assertEqual(session["customer_id"], "cus_new")
        self.assertEqual(session["metadata"], {"user_id": self.user.pk, "price_type": "credits", "credits_amount": 500})
        self.assertTrue(session["success_url"].endswith("/ai-avatar?success=true"))
        self.assertTrue(session["cancel_url"].endswith("/pricing?canceled=true"))
        self.assertEqual(Profile.objects.get(user=self.user).stripe_customer_id, "cus_new")

    def test_default_pack_is_small(self):
        provider = FakeProvider()
        with mock.patch("billing.services.checkout.get_payment_provider", return_value=provider):
            self.assertEqual(self._post({}).status_code, 200)
        self.assertEqual(provider.sessions[0]["price_id"], "price_small")

    def test_price_not_configured(self):
        resp = self._post({"packId": "large"})
        self.assertEqual(resp.status_code, 500)
        self.assertEqual(resp.json(), {"error": "Price not configured"})

    def test_provider_error(self):
        with mock.patch("billing.services.checkout.get_payment_provider", return_value=FakeProvider(fail=True)):
            resp = self._post({"packId": "small"})
        self.assertEqual(resp.status_code, 500)
        self.assertEqual(resp.json(), {"error": "Failed to create checkout session"})

    def test_unknown_pack(self):
        self.assertEqual(self._post({"packId": "huge"}).status_code, 400)

    def test_requires_auth(self):
        resp = self.client.post("/api/v1/billing/checkout", data={}, content_type="application/json")
        self.assertEqual(resp.status_code, 401)


class SubscriptionApiTest(TestCase):
    def setUp(self):
        self.user = User.objects.create_user(username="s@example.com", email="s@example.com", password="secret123")
        _, self.raw = AccessToken.issue(self.user)
        self.client = Client()

    def _get(self):
        return self.client.get("/api/v1/account/subscription", HTTP_AUTHORIZATION=f"Bearer {self.raw}")

    def test_no_subscription(self):
        CreditPackage.objects.create(user=self.user, credits_purchased=100, credits_remaining=60)
        CreditPackage.objects.create(user=self.user, credits_purchased=5, credits_remaining=0)
        self.assertEqual(self._get().json(), {"subscription": None, "credits": 60})

    def test_with_subscription(self):
        Subscription.objects.create(user=self.user, stripe_subscription_id="sub_1",
                                    status=Subscription.STATUS_ACTIVE, plan_type=Subscription.PLAN_MONTHLY)
        data = self._get().json()
        self.assertEqual(data["subscription"]["status"], "active")
        self.assertTrue(data["subscription"]["is_active"])
        self.assertEqual(data["credits"], 0)
