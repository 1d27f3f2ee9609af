"""Image storage for location photos: validation, naming, local blob store."""
import logging
import re
import secrets
import string
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Optional
from urllib.parse import unquote, urlparse

from explorer_core.errors import InvalidImage, StorageFailure

LOG = logging.getLogger(__name__)

# MIME type -> stored extension
ALLOWED_IMAGE_TYPES: dict[str, str] = {
    "image/jpeg": ".jpg",
    "image/jpg": ".jpg",
    "image/png": ".png",
    "image/webp": ".webp",
    "image/gif": ".gif",
}

MAX_FILE_SIZE = 5 * 1024 * 1024
STORAGE_PATH = "locations"

_RANDOM_ALPHABET = string.ascii_lowercase + string.digits
# Characters kept from a location id when it prefixes a stored file name.
_UNSAFE_NAME_CHARS = re.compile(r"[^A-Za-z0-9_-]+")


@dataclass(frozen=True)
class UploadResult:
    download_url: str
    file_name: str
    full_path: str
    size: int
    content_type: str


def validate_image(content_type: Optional[str], size: int, max_size: int = MAX_FILE_SIZE) -> tuple[bool, str]:
    """Returns (ok, error_message)."""
    if size > max_size:
        return False, f"File too large. Maximum size is {max_size // (1024 * 1024)}MB"
    if size <= 0:
        return False, "Empty file"
    if content_type not in ALLOWED_IMAGE_TYPES:
        allowed = ", ".join(sorted(set(ALLOWED_IMAGE_TYPES.values())))
        return False, f"File type not allowed. Allowed: {allowed}"
    return True, ""


def generate_storage_file_name(content_type: str, location_id: Optional[str] = None) -> str:
    """{location_id or "unknown"}-{timestamp_ms}-{random}{ext}

    The location id is reduced to letters, digits, "_" and "-" so the name
    never contains a path separator.
    """
    timestamp = int(time.time() * 1000)
    token = "".join(secrets.choice(_RANDOM_ALPHABET) for _ in range(13))
    extension = ALLOWED_IMAGE_TYPES.get(content_type, ".jpg")
    prefix = _UNSAFE_NAME_CHARS.sub("-", location_id.strip()).strip("-")[:64] if location_id else ""
    prefix = prefix or "unknown"
    return f"{prefix}-{timestamp}-{token}{extension}"


class LocalBlobStore:
    """
    Filesystem-backed blob store. Objects live under root/<full_path> and are
    served at base_url/<full_path>.
    """

    def __init__(self, root: str | Path, base_url: str = "/media", max_size: int = MAX_FILE_SIZE) -> None:
        self.root = Path(root)
        self.base_url = base_url.rstrip("/")
        self.max_size = max_size

    def _path_for(self, full_path: str) -> Path:
        target = (self.root / full_path).resolve()
        if self.root.resolve() not in target.parents:
            raise StorageFailure(f"Path escapes storage root: {full_path}")
        return target

    def url_for(self, full_path: str) -> str:
        return f"{self.base_url}/{full_path}"

    def upload(
        self,
        content: bytes,
        content_type: Optional[str],
        original_name: Optional[str] = None,
        location_id: Optional[str] = None,
    ) -> UploadResult:
        """Validate and store an image under STORAGE_PATH. Raises InvalidImage or StorageFailure."""
        ok, err = validate_image(content_type, len(content), self.max_size)
        if not ok:
            raise InvalidImage(err)
        file_name = generate_storage_file_name(content_type, location_id)
        full_path = f"{STORAGE_PATH}/{file_name}"
        target = self._path_for(full_path)
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(content)
        except OSError as e:
            LOG.exception("Failed to store image %s (original %s)", full_path, original_name)
            raise StorageFailure(f"Could not store image: {e}") from e
        LOG.info("Stored image %s (%d bytes, location=%s)", full_path, len(content), location_id or "unknown")
        return UploadResult(
            download_url=self.url_for(full_path),
            file_name=file_name,
            full_path=full_path,
            size=len(content),
            content_type=content_type,
        )

    def delete(self, full_path: str) -> bool:
        """Delete an object. Returns False if it did not exist."""
        target = self._path_for(full_path)
        try:
            target.unlink()
        except FileNotFoundError:
            return False
        except OSError as e:
            raise StorageFailure(f"Could not delete image: {e}") from e
        return True

    def is_managed_url(self, url: Optional[str]) -> bool:
        """True if url points into this store."""
        if not url:
            return False
        return self.extract_path(url) is not None

    def extract_path(self, url: str) -> Optional[str]:
        """Storage path (e.g. "locations/x.jpg") for a managed URL, or None."""
        path = unquote(urlparse(url).path)
        base_path = urlparse(self.base_url).path.rstrip("/")
        marker = f"{base_path}/"
        if not path.startswith(marker):
            return None
        rest = path[len(marker):]
        return rest or None

    def cleanup_old_image(self, old_url: Optional[str], new_url: Optional[str]) -> None:
        """Delete the previous photo after an update. Best effort: failures are logged only."""
        if not old_url or old_url == new_url or not self.is_managed_url(old_url):
            return
        old_path = self.extract_path(old_url)
        if old_path is None:
            return
        try:
            self.delete(old_path)
        except StorageFailure as e:
            LOG.warning("Failed to clean up old image %s: %s", old_path, e)
