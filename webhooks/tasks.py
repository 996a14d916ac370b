import logging

from celery import shared_task
from django.conf import settings

from .models import WebhookEvent
from .services.processor import replay_event

logger = logging.getLogger(__name__)


@shared_task
def replay_failed_webhook_events(limit: int = 100) -> dict:
    """
    Rejoue les événements Stripe en échec (planifié par Celery beat).
    Les événements ayant atteint WEBHOOK_REPLAY_MAX_ATTEMPTS restent en failed (rejeu manuel).
    """
    counts = {"processed": 0, "duplicate": 0, "failed": 0}
    events = (WebhookEvent.objects
              .filter(status=WebhookEvent.STATUS_FAILED, attempts__lt=settings.WEBHOOK_REPLAY_MAX_ATTEMPTS)
              .order_by("created_at")[:limit])
    for row in events:
        result = replay_event(row)
        counts[result.status] += 1
    if counts["processed"] or counts["failed"]:
        logger.info("Webhook replay: %s", counts)
    return counts
