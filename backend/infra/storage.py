"""
Hébergement des images (Supabase Storage).
Upload d'un fichier puis retour de son URL publique.
"""
import logging
from uuid import uuid4

from backend.infra.supabase_client import get_storage_bucket
from backend.utils.errors import ServerError

logger = logging.getLogger(__name__)

_EXTENSIONS = {
    "image/jpeg": "jpg",
    "image/png": "png",
    "image/webp": "webp",
    "image/gif": "gif",
}

def upload_image(content: bytes, content_type: str, folder: str = "restaurants") -> str:
    """
    Envoie l'image dans le bucket des restaurants et retourne l'URL publique.
    - Chemin: <folder>/<uuid>.<ext> (ext déduite du content-type, "bin" sinon)
    - Soulève ServerError si l'upload échoue.
    """
    ext = _EXTENSIONS.get((content_type or "").lower(), "bin")
    path = f"{folder}/{uuid4()}.{ext}"
    try:
        bucket = get_storage_bucket()
        bucket.upload(path, content, {"content-type": content_type or "application/octet-stream"})
        return bucket.get_public_url(path)
    except Exception:
        logger.exception("infra.storage.upload_image failed path=%s", path)
        raise ServerError("Error while uploading the image")
