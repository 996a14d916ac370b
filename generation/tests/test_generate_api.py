import base64
import json
from unittest import mock

from django.contrib.auth import get_user_model
from django.test import TestCase, Client, override_settings

from accounts.models import AccessToken
from billing.config import build_pricing_config
from billing.models import CreditPackage
from limits.models import SiteDailyUsage, UserDailyUsage
from limits.services.ledger import get_credit_balance, today
from usage.models import UsageRecord
from generation.services.provider import BaseAvatarProvider, GenerationError

User = get_user_model()
PATH = "/api/v1/ai/generate-avatar"


class FailingProvider(BaseAvatarProvider):
    name = "failing"

    def generate(self, *, mode, payload, style):
        raise GenerationError("model overloaded")


class GenerateAvatarApiTest(TestCase):
    def setUp(self):
        self.user = User.objects.create_user(username="g@example.com", email="g@example.com", password="secret123")
        _, self.raw = AccessToken.issue(self.user)
        self.client = Client()

    def _post(self, body: dict, auth: bool = True):
        headers = {"HTTP_AUTHORIZATION": f"Bearer {self.raw}"} if auth else {}
        return self.client.post(PATH, data=json.dumps(body), content_type="application/json", **headers)

    def _site_count(self):
        row = SiteDailyUsage.objects.filter(usage_date=today()).first()
        return row.count if row else 0

    def test_first_generation_is_free(self):
        resp = self._post({"mode": "text2avatar", "description": "hello"})
        self.assertEqual(resp.status_code, 200, resp.content)
        data = resp.json()
        self.assertTrue(data["success"])
        self.assertTrue(data["usedFree"])
        self.assertEqual(data["creditsCharged"], 0)
        self.assertTrue(data["image"].startswith("data:image/svg+xml;base64,"))
        rec = UsageRecord.objects.get(user=self.user)
        self.assertTrue(rec.used_free)
        self.assertEqual(rec.estimated_tokens, 2702)
        self.assertTrue(rec.image_path.startswith(f"avatars/{self.user.pk}/"))
        self.assertEqual(self._site_count(), 1)

    def test_second_generation_without_credits_is_402(self):
        self.assertEqual(self._post({"mode": "text2avatar", "description": "hello"}).status_code, 200)
        resp = self._post({"mode": "text2avatar", "description": "hello"})
        self.assertEqual(resp.status_code, 402)
        self.assertEqual(resp.json(), {
            "success": False,
            "error": "Today’s free quota has been used. Please recharge credits to continue.",
            "requiredCredits": 1,
        })

    def test_paid_generation_consumes_credits(self):
        CreditPackage.objects.create(user=self.user, credits_purchased=10, credits_remaining=10)
        resp = self._post({"mode": "text2avatar", "style": "oil_painting", "description": "hello"})
        self.assertEqual(resp.status_code, 200, resp.content)
        self.assertFalse(resp.json()["usedFree"])
        self.assertEqual(resp.json()["creditsCharged"], 1)
        self.assertEqual(get_credit_balance(self.user), 9)
        self.assertEqual(self._site_count(), 0)

    @override_settings(PROFIT_MULTIPLIER=0.0, MIN_CREDITS_PER_GENERATION=0)
    def test_zero_priced_settings_still_charge_one_credit(self):
        CreditPackage.objects.create(user=self.user, credits_purchased=5, credits_remaining=5)
        with mock.patch("generation.services.orchestrator.get_pricing_config", build_pricing_config):
            resp = self._post({"mode": "text2avatar", "description": "hi"})
        self.assertEqual(resp.status_code, 200, resp.content)
        self.assertEqual(resp.json()["creditsCharged"], 1)
        rec = UsageRecord.objects.get(user=self.user)
        self.assertFalse(rec.used_free)
        self.assertEqual(rec.credits_charged, 1)
        self.assertEqual(get_credit_balance(self.user), 4)

    def test_description_is_priced_untrimmed(self):
        resp = self._post({"mode": "text2avatar", "description": "abcd "})
        self.assertEqual(resp.status_code, 200, resp.content)
        self.assertEqual(UsageRecord.objects.get(user=self.user).estimated_tokens, 700 + 2 + 2000)

    def test_insufficient_credits_message(self):
        CreditPackage.objects.create(user=self.user, credits_purchased=2, credits_remaining=2)
        with mock.patch("generation.services.orchestrator.estimate_generation_usage") as est:
            est.return_value.required_credits = 5
            est.return_value.estimated_tokens = 3000
            resp = self._post({"mode": "text2avatar", "description": "hello"})
        self.assertEqual(resp.status_code, 402)
        self.assertEqual(resp.json()["error"], "Insufficient credits. Please recharge to continue.")
        self.assertEqual(resp.json()["requiredCredits"], 5)
        self.assertEqual(get_credit_balance(self.user), 2)

    def test_provider_failure_refunds_free_slot(self):
        with mock.patch("generation.services.orchestrator.get_avatar_provider", return_value=FailingProvider()):
            resp = self._post({"mode": "text2avatar", "description": "hello"})
        self.assertEqual(resp.status_code, 500)
        self.assertEqual(resp.json(), {"success": False, "error": "Failed to generate avatar. Please try again."})
        self.assertEqual(self._site_count(), 0)
        self.assertEqual(UserDailyUsage.objects.get(user=self.user, usage_date=today()).count, 0)
        self.assertFalse(UsageRecord.objects.exists())

    def test_provider_failure_refunds_credits(self):
        CreditPackage.objects.create(user=self.user, credits_purchased=3, credits_remaining=3)
        with mock.patch("generation.services.orchestrator.get_avatar_provider", return_value=FailingProvider()):
            resp = self._post({"mode": "text2avatar", "description": "hello"})
        self.assertEqual(resp.status_code, 500)
        self.assertEqual(get_credit_balance(self.user), 3)

    def test_storage_failure_is_not_fatal(self):
        with mock.patch("django.core.files.storage.FileSystemStorage.save", side_effect=OSError("disk full")):
            resp = self._post({"mode": "text2avatar", "description": "hello"})
        self.assertEqual(resp.status_code, 200, resp.content)
        self.assertEqual(UsageRecord.objects.get(user=self.user).image_path, "")

    def test_photo_mode(self):
        image = "data:image/png;base64," + base64.b64encode(b"\x89PNG fake image bytes").decode()
        resp = self._post({"mode": "photo2avatar", "style": "ghibli", "image": image})
        self.assertEqual(resp.status_code, 200, resp.content)
        self.assertEqual(UsageRecord.objects.get(user=self.user).input_type, "image")

    def test_validation_errors(self):
        cases = [
            ({"mode": "video2avatar"}, "Invalid generation mode"),
            ({}, "Invalid generation mode"),
            ({"mode": "photo2avatar"}, "Image is required for photo2avatar mode"),
            ({"mode": "photo2avatar", "image": "@@@not base64@@@"}, "Invalid image data"),
            ({"mode": "text2avatar", "description": "   "}, "Description is required for text2avatar mode"),
        ]
        for body, message in cases:
            resp = self._post(body)
            self.assertEqual(resp.status_code, 400, body)
            self.assertEqual(resp.json(), {"success": False, "error": message})
        self.assertFalse(SiteDailyUsage.objects.exists())

    def test_validation_before_auth(self):
        self.assertEqual(self._post({"mode": "nope"}, auth=False).status_code, 400)

    def test_anonymous_is_401(self):
        resp = self._post({"mode": "text2avatar", "description": "hello"}, auth=False)
        self.assertEqual(resp.status_code, 401)
        self.assertEqual(resp.json()["error"], "Please sign in to generate avatars")
        self.assertFalse(SiteDailyUsage.objects.exists())
