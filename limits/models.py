from django.conf import settings
from django.db import models


class SiteDailyUsage(models.Model):
    """
    Compteur global des générations gratuites consommées sur une journée.
    Créé paresseusement (get_or_create), muté uniquement par UPDATE conditionnel (F).
    """
    usage_date = models.DateField(unique=True)
    count = models.PositiveIntegerField(default=0)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "site_daily_usage"

    def __str__(self) -> str:
        return f"SiteDailyUsage({self.usage_date}: {self.count})"


class UserDailyUsage(models.Model):
    """
    Créneau gratuit personnel (1 par jour) d'un utilisateur qui n'a jamais acheté de crédits.
    """
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="daily_usage")
    usage_date = models.DateField()
    count = models.PositiveIntegerField(default=0)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "daily_usage"
        constraints = [
            models.UniqueConstraint(fields=["user", "usage_date"], name="daily_usage_user_date_unique"),
        ]

    def __str__(self) -> str:
        return f"UserDailyUsage(u={self.user_id}, {self.usage_date}: {self.count})"
