from django.conf import settings

from .provider import BaseAvatarProvider
from .provider_gemini import GeminiAvatarProvider
from .provider_mock import MockAvatarProvider


def get_avatar_provider() -> BaseAvatarProvider:
    """Mock si USE_MOCK_AI ou si aucune clé Gemini n'est configurée."""
    if settings.USE_MOCK_AI or not settings.GEMINI_API_KEY:
        return MockAvatarProvider(delay_ms=settings.MOCK_AI_DELAY_MS)
    return GeminiAvatarProvider(
        api_key=settings.GEMINI_API_KEY,
        model=settings.GEMINI_MODEL,
        base_url=settings.GEMINI_API_BASE,
        timeout_s=settings.GEMINI_TIMEOUT_S,
    )
