"""
Calcul du coût en crédits d'une génération.
Fonction pure: aucune lecture de settings ici, la PricingConfig est passée explicitement.
"""
import math
import re
from dataclasses import dataclass

from billing.config import PricingConfig

MODE_PHOTO = "photo2avatar"
MODE_TEXT = "text2avatar"

BASE_PROMPT_TOKENS = {
    MODE_TEXT: 700,
    MODE_PHOTO: 850,
}
IMAGE_TOKENS_PER_KB = 8

DATA_URL_PREFIX = re.compile(r"^data:image/\w+;base64,")


@dataclass(frozen=True)
class UsageEstimate:
    estimated_tokens: int
    required_credits: int


def strip_data_url(value: str) -> str:
    return DATA_URL_PREFIX.sub("", value or "", count=1)


def estimate_tokens_from_text(text: str) -> int:
    return max(1, math.ceil(len(text) / 4))


def estimate_bytes_from_base64(data: str) -> int:
    return (len(strip_data_url(data)) * 3) // 4


def estimate_generation_usage(mode: str, payload: str, config: PricingConfig) -> UsageEstimate:
    prompt_tokens = BASE_PROMPT_TOKENS.get(mode, BASE_PROMPT_TOKENS[MODE_PHOTO])
    if mode == MODE_TEXT:
        prompt_tokens += estimate_tokens_from_text(payload)
    elif mode == MODE_PHOTO:
        prompt_tokens += math.ceil(estimate_bytes_from_base64(payload) / 1024) * IMAGE_TOKENS_PER_KB

    output_tokens = config.output_tokens_estimate

    input_cost_usd = (prompt_tokens / 1_000_000) * config.input_usd_per_1m_tokens
    output_cost_usd = (output_tokens / 1_000_000) * config.output_usd_per_1m_tokens
    total_cost_usd = input_cost_usd + output_cost_usd

    required_credits = max(
        1,
        config.min_credits_per_generation,
        math.ceil((total_cost_usd * config.profit_multiplier) / config.credit_usd_value),
    )
    return UsageEstimate(estimated_tokens=prompt_tokens + output_tokens, required_credits=required_credits)
