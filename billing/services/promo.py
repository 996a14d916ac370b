import logging

from django.db import IntegrityError, transaction
from django.db.models import F, Q

from billing.models import CreditPackage, PromoCode, PromoRedemption

logger = logging.getLogger(__name__)

MSG_INVALID = "Invalid promo code"
MSG_EXPIRED = "Promo code has expired"
MSG_ALREADY_REDEEMED = "Promo code already redeemed"
MSG_LIMIT_REACHED = "Promo code redemption limit reached"


class PromoRedemptionError(Exception):
    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


def normalize_promo_code(raw: str) -> str:
    return (raw or "").strip().upper()


def redeem_promo_code(user, raw_code: str) -> int:
    """
    Rachète un code promo pour user et retourne le nombre de crédits accordés.
    Ligne PromoCode verrouillée (select_for_update) le temps de la transaction.
    """
    code = normalize_promo_code(raw_code)
    if not code:
        raise PromoRedemptionError(MSG_INVALID)

    try:
        with transaction.atomic():
            try:
                promo = PromoCode.objects.select_for_update().get(code=code, active=True)
            except PromoCode.DoesNotExist:
                raise PromoRedemptionError(MSG_INVALID)

            if promo.is_expired:
                raise PromoRedemptionError(MSG_EXPIRED)

            if PromoRedemption.objects.filter(user=user, promo_code=promo).exists():
                raise PromoRedemptionError(MSG_ALREADY_REDEEMED)

            updated = (PromoCode.objects
                       .filter(pk=promo.pk)
                       .filter(Q(max_redemptions__isnull=True) | Q(redemption_count__lt=F("max_redemptions")))
                       .update(redemption_count=F("redemption_count") + 1))
            if not updated:
                raise PromoRedemptionError(MSG_LIMIT_REACHED)

            PromoRedemption.objects.create(user=user, promo_code=promo, credits_awarded=promo.credits)
            CreditPackage.objects.create(
                user=user,
                credits_purchased=promo.credits,
                credits_remaining=promo.credits,
                source=CreditPackage.SOURCE_PROMO,
                promo_code=promo,
            )
    except IntegrityError:
        # Rachat concurrent du même code par le même utilisateur
        raise PromoRedemptionError(MSG_ALREADY_REDEEMED)

    logger.info("Promo code %s redeemed by user %s (+%s credits)", code, user.pk, promo.credits)
    return promo.credits
