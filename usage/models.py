from django.conf import settings
from django.db import models
from django.db.models import Q


class UsageRecord(models.Model):
    """
    Trace d'une génération réussie (immuable).
    - generation_mode: 'photo2avatar' | 'text2avatar'
    - input_type: 'image' | 'text'
    - image_path: chemin dans le storage (vide si la persistance a échoué)
    - credits_charged: 0 si used_free, sinon le prix payé en crédits
    - estimated_tokens: estimation du calculateur au moment T
    """
    MODE_CHOICES = [
        ("photo2avatar", "Photo to avatar"),
        ("text2avatar", "Text to avatar"),
    ]
    INPUT_CHOICES = [
        ("image", "Image"),
        ("text", "Text"),
    ]

    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="usage_records")
    generation_mode = models.CharField(max_length=32, choices=MODE_CHOICES, db_index=True)
    input_type = models.CharField(max_length=16, choices=INPUT_CHOICES)
    style = models.CharField(max_length=32, default="notion")
    image_path = models.CharField(max_length=512, blank=True, default="")
    credits_charged = models.PositiveIntegerField(default=0)
    estimated_tokens = models.PositiveIntegerField(default=0)
    used_free = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "usage_records"
        indexes = [
            models.Index(fields=["user", "created_at"], name="usage_user_created_idx"),
            models.Index(fields=["created_at"], name="usage_created_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=(Q(used_free=True, credits_charged=0) | Q(used_free=False, credits_charged__gt=0)),
                name="usage_free_iff_zero_credits",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.user_id}:{self.generation_mode}@{self.created_at:%Y-%m-%d %H:%M:%S}"
