from concurrent.futures import ThreadPoolExecutor
from datetime import date

from django.contrib.auth import get_user_model
from django.db import connection
from django.test import TransactionTestCase, skipUnlessDBFeature

from billing.models import CreditPackage
from limits.models import SiteDailyUsage, UserDailyUsage
from limits.services.ledger import (
    consume_user_credits, get_credit_balance, try_consume_site_free_usage, try_reserve_free_usage,
)

User = get_user_model()
DAY = date(2026, 1, 15)


def _run_in_threads(calls):
    """Lance chaque appel dans son propre thread (donc sa propre connexion DB)."""
    def _call(fn):
        try:
            return fn()
        finally:
            connection.close()

    with ThreadPoolExecutor(max_workers=len(calls)) as pool:
        return list(pool.map(_call, calls))


# SQLite ignore select_for_update et sérialise mal les écrivains concurrents:
# ces tests tournent sur Postgres (TEST_DATABASE_URL).
@skipUnlessDBFeature("has_select_for_update")
class ConcurrentLedgerTest(TransactionTestCase):
    def test_site_quota_under_contention(self):
        results = _run_in_threads([lambda: try_consume_site_free_usage(DAY, 10)] * 15)
        self.assertEqual(results.count(True), 10)
        self.assertEqual(SiteDailyUsage.objects.get(usage_date=DAY).count, 10)

    def test_free_reservations_from_many_users(self):
        users = [
            User.objects.create_user(username=f"r{i}@example.com", email=f"r{i}@example.com", password="x" * 8)
            for i in range(15)
        ]
        results = _run_in_threads([lambda u=u: try_reserve_free_usage(u, DAY, 10) for u in users])
        self.assertEqual(results.count(True), 10)
        self.assertEqual(SiteDailyUsage.objects.get(usage_date=DAY).count, 10)
        # Les réservations refusées ne gardent pas le créneau personnel
        self.assertEqual(UserDailyUsage.objects.filter(usage_date=DAY, count=1).count(), 10)

    def test_no_double_spend_under_contention(self):
        user = User.objects.create_user(username="c@example.com", email="c@example.com", password="x" * 8)
        CreditPackage.objects.create(user=user, credits_purchased=3, credits_remaining=3)
        CreditPackage.objects.create(user=user, credits_purchased=5, credits_remaining=5)

        results = _run_in_threads([lambda: consume_user_credits(user, 3)] * 10)
        self.assertEqual(results.count(True), 8 // 3)
        self.assertEqual(get_credit_balance(user), 2)
        self.assertEqual(
            sorted(CreditPackage.objects.filter(user=user).values_list("credits_remaining", flat=True)),
            [0, 2],
        )
