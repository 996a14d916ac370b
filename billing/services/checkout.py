import logging

from django.conf import settings

from accounts.models import Profile
from .payment_provider import get_payment_provider

logger = logging.getLogger(__name__)

DEFAULT_PACK = "small"


class PriceNotConfigured(Exception):
    pass


def create_credits_checkout(user, pack_id: str = DEFAULT_PACK, provider=None) -> str:
    """
    Crée une session Checkout Stripe pour un pack de crédits et retourne son URL.
    Le client Stripe est créé à la demande et mémorisé sur le profil.
    """
    pack = settings.CREDIT_PACKS.get(pack_id) or settings.CREDIT_PACKS[DEFAULT_PACK]
    price_id = pack.get("price_id")
    if not price_id:
        raise PriceNotConfigured(pack_id)

    provider = provider or get_payment_provider()
    profile, _ = Profile.objects.get_or_create(user=user)

    customer_id = provider.get_or_create_customer(
        customer_id=profile.stripe_customer_id, email=user.email, user_id=user.pk
    )
    if customer_id != profile.stripe_customer_id:
        profile.stripe_customer_id = customer_id
        profile.save(update_fields=["stripe_customer_id", "updated_at"])

    site_url = settings.SITE_URL.rstrip("/")
    return provider.create_checkout_session(
        customer_id=customer_id,
        price_id=price_id,
        success_url=f"{site_url}/ai-avatar?success=true",
        cancel_url=f"{site_url}/pricing?canceled=true",
        metadata={"user_id": user.pk, "price_type": "credits", "credits_amount": pack["credits"]},
    )
