"""
Accès au provider de paiement (Stripe).
Le reste du code ne manipule que des dict Python: les objets SDK ne sortent pas d'ici.
"""
import json
import logging
from typing import Optional

import stripe
from django.conf import settings

logger = logging.getLogger(__name__)


class PaymentProviderError(Exception):
    """Appel Stripe en échec (réseau, clé invalide, ressource introuvable...)."""


class WebhookVerificationError(Exception):
    """Signature absente/invalide, horodatage hors tolérance, ou corps illisible."""


def _get(obj, key: str, default=None):
    try:
        value = obj[key]
    except (KeyError, TypeError, IndexError):
        return default
    return default if value is None else value


def _subscription_snapshot(sub) -> dict:
    # Depuis l'API 2025-03, les bornes de période vivent sur les items de l'abonnement
    start = _get(sub, "current_period_start")
    end = _get(sub, "current_period_end")
    if start is None or end is None:
        items = _get(_get(sub, "items", {}), "data", [])
        first = items[0] if items else {}
        start = start if start is not None else _get(first, "current_period_start")
        end = end if end is not None else _get(first, "current_period_end")
    return {
        "id": _get(sub, "id", ""),
        "status": _get(sub, "status", ""),
        "current_period_start": start,
        "current_period_end": end,
        "cancel_at_period_end": bool(_get(sub, "cancel_at_period_end", False)),
    }


class StripePaymentProvider:
    def __init__(self, *, secret_key: str, webhook_secret: str, tolerance_s: int = 300) -> None:
        self.secret_key = secret_key
        self.webhook_secret = webhook_secret
        self.tolerance_s = tolerance_s

    # --------------------------------------------------------------------------
    # Webhooks
    # --------------------------------------------------------------------------
    def verify_webhook(self, payload: bytes, sig_header: Optional[str]) -> dict:
        """Vérifie l'en-tête Stripe-Signature puis retourne l'événement (dict)."""
        if not sig_header:
            raise WebhookVerificationError("Missing Stripe-Signature header")
        if not self.webhook_secret:
            raise WebhookVerificationError("Webhook secret not configured")
        try:
            text = payload.decode("utf-8")
        except UnicodeDecodeError as e:
            raise WebhookVerificationError("Payload is not valid UTF-8") from e
        try:
            stripe.WebhookSignature.verify_header(text, sig_header, self.webhook_secret, self.tolerance_s)
        except stripe.SignatureVerificationError as e:
            raise WebhookVerificationError(str(e)) from e
        try:
            event = json.loads(text)
        except ValueError as e:
            raise WebhookVerificationError("Invalid JSON payload") from e
        if not isinstance(event, dict) or not event.get("id") or not event.get("type"):
            raise WebhookVerificationError("Malformed event")
        return event

    # --------------------------------------------------------------------------
    # API
    # --------------------------------------------------------------------------
    def retrieve_subscription(self, subscription_id: str) -> dict:
        try:
            sub = stripe.Subscription.retrieve(subscription_id, api_key=self.secret_key)
        except stripe.StripeError as e:
            raise PaymentProviderError(f"Subscription retrieve failed: {e}") from e
        return _subscription_snapshot(sub)

    def get_or_create_customer(self, *, customer_id: str, email: str, user_id) -> str:
        """Réutilise le client existant; le recrée s'il a été supprimé côté Stripe."""
        if customer_id:
            try:
                customer = stripe.Customer.retrieve(customer_id, api_key=self.secret_key)
                if not _get(customer, "deleted", False):
                    return customer_id
                logger.info("Stripe customer %s was deleted, creating a new one", customer_id)
            except stripe.InvalidRequestError as e:
                if getattr(e, "code", None) != "resource_missing":
                    raise PaymentProviderError(f"Customer retrieve failed: {e}") from e
                logger.info("Stripe customer %s not found, creating a new one", customer_id)
            except stripe.StripeError as e:
                raise PaymentProviderError(f"Customer retrieve failed: {e}") from e

        try:
            customer = stripe.Customer.create(
                email=email,
                metadata={"user_id": str(user_id)},
                api_key=self.secret_key,
            )
        except stripe.StripeError as e:
            raise PaymentProviderError(f"Customer create failed: {e}") from e
        return customer["id"]

    def create_checkout_session(self, *, customer_id: str, price_id: str, success_url: str,
                                cancel_url: str, metadata: dict) -> str:
        try:
            session = stripe.checkout.Session.create(
                customer=customer_id,
                mode="payment",
                payment_method_types=["card"],
                line_items=[{"price": price_id, "quantity": 1}],
                success_url=success_url,
                cancel_url=cancel_url,
                metadata={k: str(v) for k, v in metadata.items()},
                api_key=self.secret_key,
            )
        except stripe.StripeError as e:
            raise PaymentProviderError(f"Checkout session create failed: {e}") from e
        return session["url"]


def get_payment_provider() -> StripePaymentProvider:
    return StripePaymentProvider(
        secret_key=settings.STRIPE_SECRET_KEY,
        webhook_secret=settings.STRIPE_WEBHOOK_SECRET,
        tolerance_s=settings.STRIPE_WEBHOOK_TOLERANCE_S,
    )
