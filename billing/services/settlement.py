"""
Règlement des paiements: applique un événement Stripe (déjà vérifié) au registre.
Appelé par webhooks.services.processor dans une transaction; toute exception
non gérée ici fait échouer (et annuler) le traitement de l'événement.
"""
import logging
from datetime import datetime, timezone as dt_timezone
from typing import Optional

from django.conf import settings
from django.contrib.auth import get_user_model
from django.db import IntegrityError, transaction
from django.utils import timezone

from billing.models import CreditPackage, Subscription

logger = logging.getLogger(__name__)

User = get_user_model()

PRICE_TYPE_CREDITS = "credits"
PRICE_TYPE_MONTHLY = "monthly"

EVENT_CHECKOUT_COMPLETED = "checkout.session.completed"
EVENT_SUBSCRIPTION_UPDATED = "customer.subscription.updated"
EVENT_SUBSCRIPTION_DELETED = "customer.subscription.deleted"
EVENT_INVOICE_PAYMENT_FAILED = "invoice.payment_failed"


def _to_datetime(ts) -> Optional[datetime]:
    if isinstance(ts, bool) or not isinstance(ts, (int, float)) or ts <= 0:
        return None
    return datetime.fromtimestamp(ts, tz=dt_timezone.utc)


def _resolve_user(metadata: dict):
    user_id = (metadata or {}).get("user_id")
    if not user_id:
        return None
    try:
        return User.objects.get(pk=user_id)
    except (User.DoesNotExist, ValueError, TypeError):
        return None


def _credits_from_metadata(metadata: dict) -> int:
    try:
        amount = int(str((metadata or {}).get("credits_amount", "0")).strip())
    except ValueError:
        amount = 0
    return amount if amount > 0 else settings.CREDITS_FALLBACK_AMOUNT


def map_subscription_status(provider_status: str, period_end: Optional[datetime],
                            now: Optional[datetime] = None) -> tuple[str, str]:
    """État Stripe -> (status, plan_type) locaux."""
    now = now or timezone.now()
    expired = bool(period_end and period_end < now)
    if provider_status == "active":
        if expired:
            return Subscription.STATUS_CANCELED, Subscription.PLAN_FREE
        return Subscription.STATUS_ACTIVE, Subscription.PLAN_MONTHLY
    if provider_status in ("past_due", "unpaid"):
        return Subscription.STATUS_PAST_DUE, Subscription.PLAN_MONTHLY
    if provider_status in ("canceled", "incomplete_expired"):
        return Subscription.STATUS_CANCELED, Subscription.PLAN_FREE
    return Subscription.STATUS_INACTIVE, Subscription.PLAN_FREE

# ------------------------------------------------------------------------------
# Handlers
# ------------------------------------------------------------------------------
def grant_purchased_credits(user, payment_intent_id: str, credits: int) -> Optional[CreditPackage]:
    """Crée le paquet; un payment_intent déjà crédité est un no-op (retourne None)."""
    try:
        with transaction.atomic():
            return CreditPackage.objects.create(
                user=user,
                credits_purchased=credits,
                credits_remaining=credits,
                source=CreditPackage.SOURCE_PURCHASE,
                payment_intent_id=payment_intent_id,
            )
    except IntegrityError:
        logger.info("Payment intent %s already credited", payment_intent_id)
        return None


def handle_checkout_completed(session: dict, provider) -> str:
    metadata = session.get("metadata") or {}
    user = _resolve_user(metadata)
    if user is None:
        logger.warning("checkout.session.completed %s without a known user_id", session.get("id"))
        return "ignored"

    price_type = metadata.get("price_type")

    if price_type == PRICE_TYPE_MONTHLY and session.get("subscription"):
        sub = provider.retrieve_subscription(session["subscription"])
        Subscription.objects.update_or_create(
            user=user,
            defaults={
                "stripe_subscription_id": sub["id"],
                "status": Subscription.STATUS_ACTIVE,
                "plan_type": Subscription.PLAN_MONTHLY,
                "current_period_start": _to_datetime(sub.get("current_period_start")),
                "current_period_end": _to_datetime(sub.get("current_period_end")),
                "cancel_at_period_end": bool(sub.get("cancel_at_period_end")),
            },
        )
        return "subscription_activated"

    if price_type == PRICE_TYPE_CREDITS:
        payment_intent = session.get("payment_intent")
        if not payment_intent or not isinstance(payment_intent, str):
            logger.warning("checkout.session.completed %s without payment_intent", session.get("id"))
            return "ignored"
        pkg = grant_purchased_credits(user, payment_intent, _credits_from_metadata(metadata))
        return "credits_granted" if pkg else "duplicate"

    return "ignored"


def handle_subscription_updated(sub: dict) -> str:
    period_start = _to_datetime(sub.get("current_period_start"))
    period_end = _to_datetime(sub.get("current_period_end"))
    status, plan_type = map_subscription_status(sub.get("status", ""), period_end)
    updated = Subscription.objects.filter(stripe_subscription_id=sub.get("id") or "-").update(
        status=status,
        plan_type=plan_type,
        current_period_start=period_start,
        current_period_end=period_end,
        cancel_at_period_end=bool(sub.get("cancel_at_period_end")),
        updated_at=timezone.now(),
    )
    return "subscription_updated" if updated else "ignored"


def handle_subscription_deleted(sub: dict) -> str:
    updated = Subscription.objects.filter(stripe_subscription_id=sub.get("id") or "-").update(
        status=Subscription.STATUS_CANCELED,
        plan_type=Subscription.PLAN_FREE,
        updated_at=timezone.now(),
    )
    return "subscription_canceled" if updated else "ignored"


def handle_invoice_payment_failed(invoice: dict) -> str:
    subscription_id = invoice.get("subscription")
    if not subscription_id and isinstance(invoice.get("parent"), dict):
        # API récente: invoice.parent.subscription_details.subscription
        subscription_id = ((invoice["parent"].get("subscription_details") or {}).get("subscription"))
    if not subscription_id or not isinstance(subscription_id, str):
        return "ignored"
    updated = Subscription.objects.filter(stripe_subscription_id=subscription_id).update(
        status=Subscription.STATUS_PAST_DUE,
        updated_at=timezone.now(),
    )
    return "subscription_past_due" if updated else "ignored"


def dispatch_event(event: dict, provider) -> str:
    """Route l'événement vers son handler. Types non gérés: succès sans effet."""
    event_type = event.get("type")
    obj = ((event.get("data") or {}).get("object")) or {}

    if event_type == EVENT_CHECKOUT_COMPLETED:
        return handle_checkout_completed(obj, provider)
    if event_type == EVENT_SUBSCRIPTION_UPDATED:
        return handle_subscription_updated(obj)
    if event_type == EVENT_SUBSCRIPTION_DELETED:
        return handle_subscription_deleted(obj)
    if event_type == EVENT_INVOICE_PAYMENT_FAILED:
        return handle_invoice_payment_failed(obj)

    logger.debug("Unhandled Stripe event type %s", event_type)
    return "unhandled"
