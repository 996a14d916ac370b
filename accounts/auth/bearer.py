from typing import Optional, Tuple

from rest_framework import exceptions
from rest_framework.authentication import BaseAuthentication, get_authorization_header

from ..models import AccessToken, hash_token

KEYWORD = "Bearer"


class BearerTokenAuthentication(BaseAuthentication):
    """
    Authentification par jeton opaque:
      Authorization: Bearer <token>
    Le jeton est comparé via son sha256 (jamais stocké en clair).
    Sans en-tête Authorization -> None (DRF essaie l'auth suivante / anonyme).
    """

    def authenticate(self, request) -> Optional[Tuple[object, AccessToken]]:
        auth = get_authorization_header(request).split()
        if not auth or auth[0].lower() != KEYWORD.lower().encode():
            return None

        if len(auth) != 2:
            raise exceptions.AuthenticationFailed("Invalid token header")

        try:
            raw = auth[1].decode("utf-8")
        except UnicodeError:
            raise exceptions.AuthenticationFailed("Invalid token header")

        try:
            token = AccessToken.objects.select_related("user").get(token_hash=hash_token(raw), active=True)
        except AccessToken.DoesNotExist:
            raise exceptions.AuthenticationFailed("Invalid token")

        if token.is_expired:
            raise exceptions.AuthenticationFailed("Token expired")

        if not token.user.is_active:
            raise exceptions.AuthenticationFailed("User inactive")

        token.touch_last_used()
        return (token.user, token)

    def authenticate_header(self, request):
        return KEYWORD
