"""
Contrat provider-agnostic pour la génération d'avatars.
Le provider reçoit l'entrée brute (base64 ou description) et retourne une image en data URL.
"""
from dataclasses import dataclass


class GenerationError(Exception):
    """Échec du provider (réseau, quota provider, réponse inexploitable...)."""


@dataclass
class AvatarResult:
    image: str       # "data:<mime>;base64,<...>"
    mime_type: str
    provider: str    # 'mock' | 'gemini'


class BaseAvatarProvider:
    name = "base"

    def generate(self, *, mode: str, payload: str, style: str) -> AvatarResult:
        raise NotImplementedError
