from datetime import date

from django.contrib.auth import get_user_model
from django.test import TestCase

from billing.models import CreditPackage
from limits.models import SiteDailyUsage, UserDailyUsage
from limits.services.ledger import (
    consume_user_credits, get_credit_balance, get_free_allowance, is_eligible_for_daily_free,
    refund_free_usage, refund_user_credits, try_consume_site_free_usage, try_reserve_free_usage,
)

User = get_user_model()
DAY = date(2026, 1, 15)


class SiteQuotaTest(TestCase):
    def test_limit_is_never_exceeded(self):
        granted = sum(1 for _ in range(15) if try_consume_site_free_usage(DAY, 10))
        self.assertEqual(granted, 10)
        self.assertEqual(SiteDailyUsage.objects.get(usage_date=DAY).count, 10)

    def test_zero_limit_refuses(self):
        self.assertFalse(try_consume_site_free_usage(DAY, 0))

    def test_days_are_independent(self):
        self.assertTrue(try_consume_site_free_usage(DAY, 1))
        self.assertFalse(try_consume_site_free_usage(DAY, 1))
        self.assertTrue(try_consume_site_free_usage(date(2026, 1, 16), 1))


class FreeReservationTest(TestCase):
    def setUp(self):
        self.user = User.objects.create_user(username="a@example.com", email="a@example.com", password="x" * 8)

    def test_one_free_generation_per_day(self):
        self.assertTrue(try_reserve_free_usage(self.user, DAY, 10))
        self.assertFalse(try_reserve_free_usage(self.user, DAY, 10))
        self.assertEqual(SiteDailyUsage.objects.get(usage_date=DAY).count, 1)

    def test_site_exhausted_rolls_back_personal_slot(self):
        other = User.objects.create_user(username="b@example.com", email="b@example.com", password="x" * 8)
        self.assertTrue(try_reserve_free_usage(other, DAY, 1))
        self.assertFalse(try_reserve_free_usage(self.user, DAY, 1))
        self.assertFalse(UserDailyUsage.objects.filter(user=self.user, usage_date=DAY, count__gt=0).exists())

    def test_refund_restores_state(self):
        self.assertTrue(try_reserve_free_usage(self.user, DAY, 10))
        refund_free_usage(self.user, DAY)
        self.assertEqual(SiteDailyUsage.objects.get(usage_date=DAY).count, 0)
        allowance = get_free_allowance(self.user, DAY, 10)
        self.assertEqual(allowance.free_remaining, 1)
        self.assertEqual(allowance.site_remaining, 10)

    def test_buying_credits_ends_eligibility(self):
        self.assertTrue(is_eligible_for_daily_free(self.user))
        CreditPackage.objects.create(user=self.user, credits_purchased=100, credits_remaining=100)
        self.assertFalse(is_eligible_for_daily_free(self.user))
        self.assertFalse(try_reserve_free_usage(self.user, DAY, 10))


class CreditsTest(TestCase):
    def setUp(self):
        self.user = User.objects.create_user(username="c@example.com", email="c@example.com", password="x" * 8)
        self.old = CreditPackage.objects.create(user=self.user, credits_purchased=3, credits_remaining=3)
        self.new = CreditPackage.objects.create(user=self.user, credits_purchased=5, credits_remaining=5)

    def test_consume_spans_packages_oldest_first(self):
        self.assertTrue(consume_user_credits(self.user, 4))
        self.old.refresh_from_db()
        self.new.refresh_from_db()
        self.assertEqual(self.old.credits_remaining, 0)
        self.assertEqual(self.new.credits_remaining, 4)

    def test_insufficient_balance_changes_nothing(self):
        self.assertFalse(consume_user_credits(self.user, 9))
        self.assertEqual(get_credit_balance(self.user), 8)

    def test_no_double_spend(self):
        results = [consume_user_credits(self.user, 3) for _ in range(3)]
        self.assertEqual(results, [True, True, False])
        self.assertEqual(get_credit_balance(self.user), 2)

    def test_refund_is_inverse_of_consume(self):
        self.assertTrue(consume_user_credits(self.user, 6))
        self.assertEqual(refund_user_credits(self.user, 6), 6)
        self.old.refresh_from_db()
        self.new.refresh_from_db()
        self.assertEqual((self.old.credits_remaining, self.new.credits_remaining), (3, 5))

    def test_refund_never_exceeds_purchased(self):
        self.assertTrue(consume_user_credits(self.user, 1))
        self.assertEqual(refund_user_credits(self.user, 5), 1)
        self.assertEqual(get_credit_balance(self.user), 8)
