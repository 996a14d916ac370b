import hashlib
import secrets
from datetime import timedelta

from django.conf import settings
from django.db import models
from django.utils import timezone

TOKEN_PREFIX_LEN = 8


def hash_token(raw_token: str) -> str:
    return hashlib.sha256(raw_token.encode("utf-8")).hexdigest()


class Profile(models.Model):
    """
    Profil applicatif d'un utilisateur.
    - display_name: nom affiché (username saisi à l'inscription)
    - stripe_customer_id: client Stripe associé (créé au premier checkout)
    """
    user = models.OneToOneField(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="profile")
    display_name = models.CharField(max_length=50, blank=True, default="")
    stripe_customer_id = models.CharField(max_length=255, blank=True, default="")
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "profiles"

    def __str__(self) -> str:
        return f"Profile(user={self.user_id})"


class AccessToken(models.Model):
    """
    Jeton d'accès porté par un utilisateur; on ne stocke jamais le jeton en clair.
    - token_prefix (public) pour l'affichage / le support
    - token_hash: sha256 du jeton (lookup O(1))
    - last_used_at: mis à jour à chaque requête authentifiée
    - expires_at: optionnel ; si dépassé => inactif
    """
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="access_tokens")
    token_prefix = models.CharField(max_length=16, db_index=True)
    token_hash = models.CharField(max_length=64, unique=True)
    active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    last_used_at = models.DateTimeField(null=True, blank=True)
    expires_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        db_table = "access_tokens"
        indexes = [models.Index(fields=["user", "active"], name="access_tokens_user_active_idx")]

    def __str__(self) -> str:
        return f"{self.user_id}:{self.token_prefix}"

    @property
    def is_expired(self) -> bool:
        return bool(self.expires_at and self.expires_at <= timezone.now())

    @classmethod
    def issue(cls, user) -> tuple["AccessToken", str]:
        """Crée un jeton et retourne (instance, jeton_en_clair). Le clair n'est montré qu'une fois."""
        raw = secrets.token_urlsafe(32)
        ttl_days = getattr(settings, "ACCESS_TOKEN_TTL_DAYS", 30)
        token = cls.objects.create(
            user=user,
            token_prefix=raw[:TOKEN_PREFIX_LEN],
            token_hash=hash_token(raw),
            expires_at=timezone.now() + timedelta(days=ttl_days) if ttl_days else None,
        )
        return token, raw

    def touch_last_used(self):
        self.last_used_at = timezone.now()
        self.save(update_fields=["last_used_at"])
