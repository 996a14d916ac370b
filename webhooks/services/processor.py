"""
Traitement idempotent des événements Stripe vérifiés.

La ligne WebhookEvent est insérée dans la MÊME transaction que les effets (crédits,
abonnement) et n'est committée qu'avec status=processed. Si le dispatch lève, tout est
annulé puis l'échec est journalisé à part (status=failed) pour un rejeu ultérieur:
un événement n'est jamais marqué traité sans que ses effets soient appliqués.
"""
import logging
from dataclasses import dataclass

from django.db import IntegrityError, transaction
from django.db.models import F
from django.utils import timezone

from billing.services.payment_provider import get_payment_provider
from billing.services.settlement import dispatch_event

from ..models import WebhookEvent

logger = logging.getLogger(__name__)

RESULT_PROCESSED = "processed"
RESULT_DUPLICATE = "duplicate"
RESULT_FAILED = "failed"

MAX_ERROR_LEN = 2000


@dataclass
class ProcessResult:
    status: str
    outcome: str = ""
    error: str = ""


def _record_failure(event: dict, error: str) -> None:
    with transaction.atomic():
        row, created = WebhookEvent.objects.get_or_create(
            event_id=event["id"],
            defaults={
                "event_type": event.get("type", ""),
                "livemode": bool(event.get("livemode")),
                "status": WebhookEvent.STATUS_FAILED,
                "attempts": 1,
                "last_error": error,
                "payload": event,
            },
        )
        if not created and row.status != WebhookEvent.STATUS_PROCESSED:
            WebhookEvent.objects.filter(pk=row.pk).update(
                status=WebhookEvent.STATUS_FAILED,
                attempts=F("attempts") + 1,
                last_error=error,
                updated_at=timezone.now(),
            )


def process_event(event: dict, provider=None) -> ProcessResult:
    event_id = event["id"]
    provider = provider or get_payment_provider()

    try:
        with transaction.atomic():
            row = WebhookEvent.objects.select_for_update().filter(event_id=event_id).first()
            if row is None:
                try:
                    with transaction.atomic():
                        row = WebhookEvent.objects.create(
                            event_id=event_id,
                            event_type=event.get("type", ""),
                            livemode=bool(event.get("livemode")),
                            status=WebhookEvent.STATUS_PROCESSED,
                            payload=event,
                        )
                except IntegrityError:
                    # Livraison concurrente du même événement déjà en cours / committée
                    logger.info("Stripe event %s delivered concurrently, skipping", event_id)
                    return ProcessResult(RESULT_DUPLICATE)
            elif row.status == WebhookEvent.STATUS_PROCESSED:
                logger.info("Stripe event %s already processed", event_id)
                return ProcessResult(RESULT_DUPLICATE)

            outcome = dispatch_event(event, provider)

            row.status = WebhookEvent.STATUS_PROCESSED
            row.attempts = (row.attempts or 0) + 1
            row.last_error = ""
            row.processed_at = timezone.now()
            row.save(update_fields=["status", "attempts", "last_error", "processed_at", "updated_at"])
    except Exception as e:
        logger.exception("Stripe event %s (%s) processing failed", event_id, event.get("type"))
        error = f"{type(e).__name__}: {e}"[:MAX_ERROR_LEN]
        _record_failure(event, error)
        return ProcessResult(RESULT_FAILED, error=error)

    logger.info("Stripe event %s (%s) processed: %s", event_id, event.get("type"), outcome)
    return ProcessResult(RESULT_PROCESSED, outcome=outcome)


def replay_event(row: WebhookEvent, provider=None) -> ProcessResult:
    """Rejoue un événement journalisé en échec à partir du payload stocké."""
    if row.status == WebhookEvent.STATUS_PROCESSED:
        return ProcessResult(RESULT_DUPLICATE)
    return process_event(row.payload, provider)
