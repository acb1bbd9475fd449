"""Object storage for report photo blobs.

Blobs live under generated unique keys in a single bucket directory and are
served back by the API under STORAGE_PUBLIC_URL, so the public URL of a blob
is known as soon as the upload returns.
"""

import logging
import os
import uuid

from werkzeug.utils import secure_filename

from field_service.core.config import STORAGE_DIR, STORAGE_PUBLIC_URL

logger = logging.getLogger(__name__)

ALLOWED_PHOTO_EXTENSIONS = {"jpg", "jpeg", "png", "gif", "bmp", "webp", "heic"}


class StorageError(Exception):
    pass


def allowed_photo_file(filename: str) -> bool:
    return "." in filename and filename.rsplit(".", 1)[1].lower() in ALLOWED_PHOTO_EXTENSIONS


class LocalObjectStorage:
    def __init__(self, root_dir: str = STORAGE_DIR, public_url: str = STORAGE_PUBLIC_URL):
        self.root_dir = root_dir
        self.public_url = public_url.rstrip("/")
        os.makedirs(self.root_dir, exist_ok=True)

    def generate_key(self, filename: str) -> str:
        safe_name = secure_filename(filename) or "photo"
        return f"{uuid.uuid4()}-{safe_name}"

    def upload(self, key: str, data: bytes) -> str:
        """Write a new blob. Existing keys are never overwritten."""
        path = os.path.join(self.root_dir, key)
        try:
            with open(path, "xb") as handle:
                handle.write(data)
        except OSError as exc:
            raise StorageError(f"Could not store {key}: {exc}") from exc

        logger.info("Stored blob %s (%d bytes)", key, len(data))
        return key

    def get_public_url(self, key: str) -> str:
        return f"{self.public_url}/{key}"


_storage: LocalObjectStorage | None = None


def get_storage() -> LocalObjectStorage:
    """FastAPI dependency returning the process-wide bucket handle."""
    global _storage
    if _storage is None:
        _storage = LocalObjectStorage()
    return _storage
