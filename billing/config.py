import math
from dataclasses import dataclass
from functools import lru_cache

from django.conf import settings

DEFAULT_SITE_FREE_DAILY_LIMIT = 10
DEFAULT_CREDIT_USD_VALUE = 0.05
DEFAULT_PROFIT_MULTIPLIER = 3.0
DEFAULT_INPUT_USD_PER_1M = 0.35
DEFAULT_OUTPUT_USD_PER_1M = 0.7
DEFAULT_MIN_CREDITS_PER_GENERATION = 1
DEFAULT_OUTPUT_TOKENS_ESTIMATE = 2000


@dataclass(frozen=True)
class PricingConfig:
    site_free_daily_limit: int = DEFAULT_SITE_FREE_DAILY_LIMIT
    credit_usd_value: float = DEFAULT_CREDIT_USD_VALUE
    profit_multiplier: float = DEFAULT_PROFIT_MULTIPLIER
    input_usd_per_1m_tokens: float = DEFAULT_INPUT_USD_PER_1M
    output_usd_per_1m_tokens: float = DEFAULT_OUTPUT_USD_PER_1M
    min_credits_per_generation: int = DEFAULT_MIN_CREDITS_PER_GENERATION
    output_tokens_estimate: int = DEFAULT_OUTPUT_TOKENS_ESTIMATE


def clamp_number(value, fallback):
    """Retourne value si c'est un nombre fini, sinon fallback (NaN, inf, None, texte...)."""
    try:
        number = float(value)
    except (TypeError, ValueError):
        return fallback
    if not math.isfinite(number):
        return fallback
    return type(fallback)(number)


def positive_number(value, fallback):
    """Comme clamp_number, mais zéro et négatif retombent aussi sur fallback."""
    number = clamp_number(value, fallback)
    return number if number > 0 else fallback


def build_pricing_config(source=None) -> PricingConfig:
    source = source or settings
    return PricingConfig(
        site_free_daily_limit=max(
            0, clamp_number(getattr(source, "SITE_FREE_DAILY_LIMIT", None), DEFAULT_SITE_FREE_DAILY_LIMIT)
        ),
        credit_usd_value=positive_number(getattr(source, "CREDIT_USD_VALUE", None), DEFAULT_CREDIT_USD_VALUE),
        profit_multiplier=positive_number(getattr(source, "PROFIT_MULTIPLIER", None), DEFAULT_PROFIT_MULTIPLIER),
        input_usd_per_1m_tokens=positive_number(getattr(source, "GEMINI_INPUT_USD_PER_1M", None), DEFAULT_INPUT_USD_PER_1M),
        output_usd_per_1m_tokens=positive_number(getattr(source, "GEMINI_OUTPUT_USD_PER_1M", None), DEFAULT_OUTPUT_USD_PER_1M),
        # Une génération payante coûte toujours au moins 1 crédit
        min_credits_per_generation=max(
            1, clamp_number(getattr(source, "MIN_CREDITS_PER_GENERATION", None), DEFAULT_MIN_CREDITS_PER_GENERATION)
        ),
        output_tokens_estimate=max(
            0, clamp_number(getattr(source, "AI_OUTPUT_TOKENS_ESTIMATE", None), DEFAULT_OUTPUT_TOKENS_ESTIMATE)
        ),
    )


@lru_cache(maxsize=1)
def get_pricing_config() -> PricingConfig:
    """Configuration tarifaire figée, construite une fois par process."""
    return build_pricing_config()
