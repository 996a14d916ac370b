import math

from django.test import SimpleTestCase

from billing.config import PricingConfig, build_pricing_config, clamp_number
from billing.services.pricing import (
    MODE_PHOTO, MODE_TEXT, estimate_bytes_from_base64, estimate_generation_usage, estimate_tokens_from_text,
)


class _Settings:
    def __init__(self, **values):
        self.__dict__.update(values)


class PricingTest(SimpleTestCase):
    def setUp(self):
        self.config = PricingConfig()

    def test_hello_text(self):
        est = estimate_generation_usage(MODE_TEXT, "hello", self.config)
        self.assertEqual(est.estimated_tokens, 2702)
        self.assertEqual(est.required_credits, 1)

    def test_text_tokens(self):
        self.assertEqual(estimate_tokens_from_text(""), 1)
        self.assertEqual(estimate_tokens_from_text("abcd"), 1)
        self.assertEqual(estimate_tokens_from_text("abcde"), 2)

    def test_image_bytes_ignore_data_url_prefix(self):
        self.assertEqual(estimate_bytes_from_base64("data:image/png;base64,AAAA"), 3)
        self.assertEqual(estimate_bytes_from_base64("AAAAAAAA"), 6)

    def test_photo_tokens(self):
        payload = "A" * 4096  # 3072 octets -> 3 Ko -> 24 tokens
        est = estimate_generation_usage(MODE_PHOTO, payload, self.config)
        self.assertEqual(est.estimated_tokens, 850 + 24 + 2000)

    def test_monotonic_in_input_size(self):
        previous = 0
        for size in (10, 1_000, 100_000, 1_000_000, 10_000_000):
            credits = estimate_generation_usage(MODE_TEXT, "x" * size, self.config).required_credits
            self.assertGreaterEqual(credits, previous)
            previous = credits
        self.assertGreater(previous, 1)

    def test_min_credits_floor(self):
        config = PricingConfig(min_credits_per_generation=7)
        self.assertEqual(estimate_generation_usage(MODE_TEXT, "hi", config).required_credits, 7)

    def test_large_text_cost(self):
        text = "x" * 400_000  # 100 000 tokens
        est = estimate_generation_usage(MODE_TEXT, text, self.config)
        cost = (100_700 / 1e6) * 0.35 + (2000 / 1e6) * 0.7
        self.assertEqual(est.required_credits, math.ceil(cost * 3 / 0.05))


class PricingConfigTest(SimpleTestCase):
    def test_clamp_number(self):
        self.assertEqual(clamp_number("12", 10), 12)
        self.assertEqual(clamp_number("nan", 10), 10)
        self.assertEqual(clamp_number(float("inf"), 0.5), 0.5)
        self.assertEqual(clamp_number(None, 3.0), 3.0)
        self.assertEqual(clamp_number("abc", 1), 1)

    def test_non_finite_settings_fall_back(self):
        config = build_pricing_config(_Settings(
            SITE_FREE_DAILY_LIMIT="nan",
            CREDIT_USD_VALUE=float("inf"),
            PROFIT_MULTIPLIER=2,
            GEMINI_INPUT_USD_PER_1M=None,
            GEMINI_OUTPUT_USD_PER_1M="0.9",
        ))
        self.assertEqual(config.site_free_daily_limit, 10)
        self.assertEqual(config.credit_usd_value, 0.05)
        self.assertEqual(config.profit_multiplier, 2.0)
        self.assertEqual(config.input_usd_per_1m_tokens, 0.35)
        self.assertEqual(config.output_usd_per_1m_tokens, 0.9)
        self.assertEqual(config.output_tokens_estimate, 2000)

    def test_zero_credit_value_falls_back(self):
        self.assertEqual(build_pricing_config(_Settings(CREDIT_USD_VALUE=0)).credit_usd_value, 0.05)

    def test_non_positive_settings_fall_back(self):
        config = build_pricing_config(_Settings(
            PROFIT_MULTIPLIER=0,
            GEMINI_INPUT_USD_PER_1M=-1,
            GEMINI_OUTPUT_USD_PER_1M=0,
            MIN_CREDITS_PER_GENERATION=0,
        ))
        self.assertEqual(config.profit_multiplier, 3.0)
        self.assertEqual(config.input_usd_per_1m_tokens, 0.35)
        self.assertEqual(config.output_usd_per_1m_tokens, 0.7)
        self.assertEqual(config.min_credits_per_generation, 1)

    def test_paid_generation_never_costs_zero(self):
        config = PricingConfig(profit_multiplier=0.0, min_credits_per_generation=0)
        self.assertEqual(estimate_generation_usage(MODE_TEXT, "hi", config).required_credits, 1)

    def test_trailing_whitespace_is_priced(self):
        self.assertEqual(estimate_tokens_from_text("abcd "), 2)
