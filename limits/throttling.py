from rest_framework.throttling import SimpleRateThrottle


class GenerationRateThrottle(SimpleRateThrottle):
    """
    Limite de débit sur /ai/generate-avatar, par utilisateur (ou IP si anonyme).
    Débit lu dans REST_FRAMEWORK["DEFAULT_THROTTLE_RATES"]["generation"].
    """
    scope = "generation"

    def get_cache_key(self, request, view):
        if request.user and request.user.is_authenticated:
            ident = request.user.pk
        else:
            ident = self.get_ident(request)
        return self.cache_format % {"scope": self.scope, "ident": ident}
