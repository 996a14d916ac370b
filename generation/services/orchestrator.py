"""
Orchestration d'une génération: prix -> réservation -> provider -> réconciliation -> trace.
La réservation est une étape de saga: tout échec du provider déclenche reservation.release()
dans le même appel serveur, avant de remonter l'erreur.
"""
import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Optional

from billing.config import PricingConfig, get_pricing_config
from billing.services.pricing import estimate_generation_usage
from limits.services import ledger
from usage.models import UsageRecord
from usage.services.metering import record_usage

from .factory import get_avatar_provider
from .provider import BaseAvatarProvider, GenerationError
from .storage import save_generated_avatar

logger = logging.getLogger(__name__)

MSG_FREE_QUOTA_USED = "Today’s free quota has been used. Please recharge credits to continue."
MSG_INSUFFICIENT_CREDITS = "Insufficient credits. Please recharge to continue."


class PaymentRequired(Exception):
    """Allocation refusée (quota gratuit épuisé et solde insuffisant) -> HTTP 402."""

    def __init__(self, message: str, required_credits: int) -> None:
        super().__init__(message)
        self.message = message
        self.required_credits = required_credits


@dataclass
class Reservation:
    user: object
    usage_date: date
    used_free: bool
    credits: int = 0
    released: bool = field(default=False, init=False)

    def release(self) -> None:
        """Annule exactement ce qui a été réservé (idempotent)."""
        if self.released:
            return
        if self.used_free:
            ledger.refund_free_usage(self.user, self.usage_date)
        elif self.credits:
            ledger.refund_user_credits(self.user, self.credits)
        self.released = True


@dataclass
class GenerationOutcome:
    image: str
    credits_charged: int
    used_free: bool
    record: UsageRecord


class AvatarGenerationService:
    def __init__(self, provider: Optional[BaseAvatarProvider] = None,
                 pricing: Optional[PricingConfig] = None) -> None:
        self.provider = provider or get_avatar_provider()
        self.pricing = pricing or get_pricing_config()

    def reserve(self, user, required_credits: int, usage_date: Optional[date] = None) -> Reservation:
        usage_date = usage_date or ledger.today()

        if ledger.try_reserve_free_usage(user, usage_date, self.pricing.site_free_daily_limit):
            return Reservation(user=user, usage_date=usage_date, used_free=True)

        balance = ledger.get_credit_balance(user)
        if balance < required_credits:
            message = MSG_FREE_QUOTA_USED if balance <= 0 else MSG_INSUFFICIENT_CREDITS
            raise PaymentRequired(message, required_credits)

        # Course perdue entre la lecture du solde et le débit conditionnel
        if not ledger.consume_user_credits(user, required_credits):
            raise PaymentRequired(MSG_INSUFFICIENT_CREDITS, required_credits)

        return Reservation(user=user, usage_date=usage_date, used_free=False, credits=required_credits)

    def run(self, *, user, mode: str, style: str, payload: str) -> GenerationOutcome:
        estimate = estimate_generation_usage(mode, payload, self.pricing)
        reservation = self.reserve(user, estimate.required_credits)

        try:
            result = self.provider.generate(mode=mode, payload=payload, style=style)
        except Exception as e:
            reservation.release()
            logger.error("Avatar generation failed for user %s (provider=%s, free=%s, credits=%s): %s",
                         user.pk, self.provider.name, reservation.used_free, reservation.credits, e)
            if isinstance(e, GenerationError):
                raise
            raise GenerationError(str(e)) from e

        image_path = save_generated_avatar(user.pk, result.image)

        record = record_usage(
            user=user,
            generation_mode=mode,
            style=style,
            credits_charged=reservation.credits,
            estimated_tokens=estimate.estimated_tokens,
            used_free=reservation.used_free,
            image_path=image_path,
        )
        return GenerationOutcome(
            image=result.image,
            credits_charged=reservation.credits,
            used_free=reservation.used_free,
            record=record,
        )
