import base64
import logging
import time

from .provider import BaseAvatarProvider, AvatarResult

logger = logging.getLogger(__name__)

MOCK_AVATAR_SVG = """<svg viewBox="0 0 1080 1080" fill="none" xmlns="http://www.w3.org/2000/svg">
  <rect width="1080" height="1080" fill="#fffefc"/>
  <path d="M540 200C350 200 200 350 200 540C200 730 350 880 540 880C730 880 880 730 880 540C880 350 730 200 540 200Z" stroke="black" stroke-width="20"/>
  <circle cx="400" cy="450" r="50" fill="black"/>
  <circle cx="680" cy="450" r="50" fill="black"/>
  <path d="M400 700Q540 800 680 700" stroke="black" stroke-width="20" fill="none"/>
</svg>"""

MOCK_MIME = "image/svg+xml"


class MockAvatarProvider(BaseAvatarProvider):
    """
    Provider fake déterministe (dev / tests / absence de clé Gemini):
    - attend delay_ms pour simuler la latence du modèle
    - retourne toujours le même SVG, quel que soit le style
    """
    name = "mock"

    def __init__(self, delay_ms: int = 0) -> None:
        self.delay_ms = max(0, delay_ms)

    def generate(self, *, mode: str, payload: str, style: str) -> AvatarResult:
        logger.info("Mock avatar generation (mode=%s, style=%s)", mode, style)
        if self.delay_ms:
            time.sleep(self.delay_ms / 1000)
        data = base64.b64encode(MOCK_AVATAR_SVG.encode("utf-8")).decode()
        return AvatarResult(image=f"data:{MOCK_MIME};base64,{data}", mime_type=MOCK_MIME, provider=self.name)
