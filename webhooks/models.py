from django.db import models


class WebhookEvent(models.Model):
    """
    Journal des événements Stripe reçus (un par event_id).
    - status=processed: effets appliqués, committés dans la même transaction que cette ligne
    - status=failed: traitement en échec (effets annulés), rejouable
    - attempts: nb de tentatives de traitement
    - payload: événement complet (nécessaire au rejeu)
    """
    STATUS_PROCESSED = "processed"
    STATUS_FAILED = "failed"
    STATUS_CHOICES = [
        (STATUS_PROCESSED, "Processed"),
        (STATUS_FAILED, "Failed"),
    ]

    event_id = models.CharField(max_length=255, unique=True)
    event_type = models.CharField(max_length=128, db_index=True)
    livemode = models.BooleanField(default=False)
    status = models.CharField(max_length=16, choices=STATUS_CHOICES)
    attempts = models.PositiveIntegerField(default=0)
    last_error = models.TextField(blank=True, default="")
    payload = models.JSONField(default=dict, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)
    processed_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        db_table = "stripe_webhook_events"
        indexes = [
            models.Index(fields=["status", "created_at"], name="webhook_evt_status_created_idx"),
        ]

    def __str__(self) -> str:
        return f"WebhookEvent({self.event_id}, {self.event_type}, {self.status}, attempts={self.attempts})"
