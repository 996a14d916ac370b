import logging
from typing import Optional

import httpx

from billing.services.pricing import MODE_PHOTO, strip_data_url
from .prompts import get_prompt
from .provider import BaseAvatarProvider, AvatarResult, GenerationError

logger = logging.getLogger(__name__)


class GeminiAvatarProvider(BaseAvatarProvider):
    """
    Connecteur Gemini (API REST generateContent, sortie IMAGE).
    transport: injectable (httpx.MockTransport en test).
    """
    name = "gemini"

    def __init__(self, *, api_key: str, model: str, base_url: str, timeout_s: int = 90,
                 transport: Optional[httpx.BaseTransport] = None) -> None:
        if not api_key:
            raise GenerationError("GEMINI_API_KEY is not configured")
        self.api_key = api_key
        self.model = model
        self.base_url = base_url.rstrip("/")
        self.timeout_s = timeout_s
        self.transport = transport

    def _build_body(self, mode: str, payload: str, style: str) -> dict:
        prompt = get_prompt(style, mode)
        if mode == MODE_PHOTO:
            parts = [
                {"text": prompt},
                {"inline_data": {"mime_type": "image/jpeg", "data": strip_data_url(payload)}},
            ]
        else:
            parts = [{"text": f"{prompt}{payload}"}]
        return {
            "contents": [{"role": "user", "parts": parts}],
            "generationConfig": {"responseModalities": ["IMAGE"]},
        }

    def generate(self, *, mode: str, payload: str, style: str) -> AvatarResult:
        url = f"{self.base_url}/models/{self.model}:generateContent"
        headers = {"x-goog-api-key": self.api_key, "Content-Type": "application/json"}
        try:
            with httpx.Client(timeout=self.timeout_s, transport=self.transport) as client:
                resp = client.post(url, headers=headers, json=self._build_body(mode, payload, style))
                resp.raise_for_status()
                data = resp.json()
        except httpx.HTTPStatusError as e:
            raise GenerationError(f"Gemini HTTP {e.response.status_code}: {e.response.text[:300]}") from e
        except httpx.HTTPError as e:
            raise GenerationError(f"Gemini request failed: {e}") from e
        except ValueError as e:
            raise GenerationError("Gemini returned invalid JSON") from e

        return self._parse(data)

    def _parse(self, data: dict) -> AvatarResult:
        candidates = data.get("candidates") or []
        if not candidates:
            raise GenerationError("No image generated")
        parts = ((candidates[0] or {}).get("content") or {}).get("parts")
        if not parts:
            raise GenerationError("No content parts in response")

        for part in parts:
            inline = part.get("inlineData") or part.get("inline_data")
            if inline and inline.get("data"):
                mime = inline.get("mimeType") or inline.get("mime_type") or "image/png"
                return AvatarResult(image=f"data:{mime};base64,{inline['data']}", mime_type=mime, provider=self.name)

        raise GenerationError("Unexpected response format")
