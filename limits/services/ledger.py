"""
Registre des allocations: quota gratuit global journalier + crédits achetés.
Toutes les mutations passent par des UPDATE conditionnels (F / filtre sur la valeur
courante) dans transaction.atomic: jamais de lecture-puis-écriture côté application.
Un refus (quota épuisé, solde insuffisant) est un booléen, pas une exception.
"""
import logging
from dataclasses import dataclass
from datetime import date

from django.db import transaction
from django.db.models import F, Sum
from django.utils import timezone

from billing.models import CreditPackage
from limits.models import SiteDailyUsage, UserDailyUsage

logger = logging.getLogger(__name__)

PERSONAL_FREE_SLOTS_PER_DAY = 1


@dataclass
class FreeAllowance:
    eligible: bool
    site_remaining: int
    free_remaining: int  # 0 ou 1 (créneau personnel)


def today() -> date:
    return timezone.now().date()

# ------------------------------------------------------------------------------
# Quota gratuit global (site)
# ------------------------------------------------------------------------------
def try_consume_site_free_usage(usage_date: date, limit: int) -> bool:
    """Incrémente le compteur du jour ssi count < limit. Retourne True si l'incrément a eu lieu."""
    if limit <= 0:
        return False
    SiteDailyUsage.objects.get_or_create(usage_date=usage_date)
    updated = (SiteDailyUsage.objects
               .filter(usage_date=usage_date, count__lt=limit)
               .update(count=F("count") + 1, updated_at=timezone.now()))
    return updated == 1

def refund_site_free_usage(usage_date: date) -> None:
    """Rend une génération gratuite au compteur du jour (plancher à 0)."""
    (SiteDailyUsage.objects
     .filter(usage_date=usage_date, count__gt=0)
     .update(count=F("count") - 1, updated_at=timezone.now()))

def get_site_free_used(usage_date: date) -> int:
    row = SiteDailyUsage.objects.filter(usage_date=usage_date).values_list("count", flat=True).first()
    return row or 0

# ------------------------------------------------------------------------------
# Créneau gratuit personnel
# ------------------------------------------------------------------------------
def is_eligible_for_daily_free(user) -> bool:
    """Éligible tant que l'utilisateur ne possède aucun CreditPackage (achat ou promo)."""
    return not CreditPackage.objects.filter(user=user).exists()

def _try_consume_user_daily_slot(user, usage_date: date) -> bool:
    UserDailyUsage.objects.get_or_create(user=user, usage_date=usage_date)
    updated = (UserDailyUsage.objects
               .filter(user=user, usage_date=usage_date, count__lt=PERSONAL_FREE_SLOTS_PER_DAY)
               .update(count=F("count") + 1, updated_at=timezone.now()))
    return updated == 1

def _refund_user_daily_slot(user, usage_date: date) -> None:
    (UserDailyUsage.objects
     .filter(user=user, usage_date=usage_date, count__gt=0)
     .update(count=F("count") - 1, updated_at=timezone.now()))

def try_reserve_free_usage(user, usage_date: date, limit: int) -> bool:
    """
    Réserve une génération gratuite: éligibilité, puis créneau personnel, puis quota site.
    Tout ou rien: si le quota site est épuisé, le créneau personnel est annulé (rollback).
    """
    with transaction.atomic():
        if not is_eligible_for_daily_free(user):
            return False
        if not _try_consume_user_daily_slot(user, usage_date):
            return False
        if not try_consume_site_free_usage(usage_date, limit):
            transaction.set_rollback(True)
            return False
        return True

def refund_free_usage(user, usage_date: date) -> None:
    with transaction.atomic():
        refund_site_free_usage(usage_date)
        _refund_user_daily_slot(user, usage_date)

def get_free_allowance(user, usage_date: date, limit: int) -> FreeAllowance:
    """Lecture seule (aucune mutation), utilisée par /usage/check."""
    eligible = is_eligible_for_daily_free(user)
    site_remaining = max(0, limit - get_site_free_used(usage_date))
    free_remaining = 0
    if eligible and site_remaining > 0:
        used = (UserDailyUsage.objects
                .filter(user=user, usage_date=usage_date)
                .values_list("count", flat=True).first()) or 0
        free_remaining = 0 if used >= PERSONAL_FREE_SLOTS_PER_DAY else 1
    return FreeAllowance(eligible=eligible, site_remaining=site_remaining, free_remaining=free_remaining)

# ------------------------------------------------------------------------------
# Crédits achetés
# ------------------------------------------------------------------------------
def get_credit_balance(user) -> int:
    total = (CreditPackage.objects
             .filter(user=user, credits_remaining__gt=0)
             .aggregate(total=Sum("credits_remaining"))["total"])
    return total or 0

def consume_user_credits(user, amount: int) -> bool:
    """
    Débite amount sur le solde cumulé des paquets (plus ancien d'abord).
    Solde insuffisant => False, aucune mutation.
    """
    if amount <= 0:
        return True

    with transaction.atomic():
        packages = list(
            CreditPackage.objects.select_for_update()
            .filter(user=user, credits_remaining__gt=0)
            .order_by("created_at", "id")
        )
        if sum(p.credits_remaining for p in packages) < amount:
            return False

        left = amount
        for pkg in packages:
            if left == 0:
                break
            take = min(left, pkg.credits_remaining)
            updated = (CreditPackage.objects
                       .filter(pk=pkg.pk, credits_remaining__gte=take)
                       .update(credits_remaining=F("credits_remaining") - take))
            if updated != 1:
                transaction.set_rollback(True)
                return False
            left -= take
        return True

def refund_user_credits(user, amount: int) -> int:
    """
    Recrédite amount dans les paquets entamés (plus récent d'abord), sans jamais
    dépasser credits_purchased. Retourne le montant effectivement restitué.
    """
    if amount <= 0:
        return 0

    with transaction.atomic():
        packages = list(
            CreditPackage.objects.select_for_update()
            .filter(user=user, credits_remaining__lt=F("credits_purchased"))
            .order_by("-created_at", "-id")
        )
        left = amount
        for pkg in packages:
            if left == 0:
                break
            give = min(left, pkg.credits_purchased - pkg.credits_remaining)
            updated = (CreditPackage.objects
                       .filter(pk=pkg.pk, credits_remaining__lte=F("credits_purchased") - give)
                       .update(credits_remaining=F("credits_remaining") + give))
            if updated == 1:
                left -= give

    if left:
        logger.error("Credit refund incomplete for user %s: %s of %s credits not restored", user.pk, left, amount)
    return amount - left
