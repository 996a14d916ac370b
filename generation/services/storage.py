import base64
import logging
import re
import uuid

from django.core.files.base import ContentFile
from django.core.files.storage import default_storage

logger = logging.getLogger(__name__)

DATA_URL_RE = re.compile(r"^data:(?P<mime>[\w/+.-]+);base64,(?P<data>.*)$", re.DOTALL)

EXTENSIONS = {
    "image/png": "png",
    "image/jpeg": "jpg",
    "image/webp": "webp",
    "image/gif": "gif",
    "image/svg+xml": "svg",
}


def data_url_to_bytes(image: str) -> tuple[bytes, str]:
    m = DATA_URL_RE.match(image or "")
    if m:
        mime, data = m.group("mime"), m.group("data")
    else:
        mime, data = "image/png", image or ""
    return base64.b64decode(data, validate=True), mime


def save_generated_avatar(user_id, image: str) -> str:
    """
    Persiste l'avatar dans default_storage (local ou S3).
    Best-effort: en cas d'échec on logge et on retourne "" (la génération reste un succès).
    """
    try:
        content, mime = data_url_to_bytes(image)
        name = f"avatars/{user_id}/{uuid.uuid4().hex}.{EXTENSIONS.get(mime, 'png')}"
        return default_storage.save(name, ContentFile(content))
    except Exception as e:  # storage local, S3 (botocore) ou data URL illisible
        logger.warning("Failed to store generated avatar for user %s: %s", user_id, e)
        return ""
