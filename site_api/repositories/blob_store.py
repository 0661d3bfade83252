"""
Uploaded image files under the uploads root.

Blobs are named "<epoch-ms>-<random>.<ext>" and referenced from records by the
public URL built from that name ("<base>/uploads/<name>").
"""

from __future__ import annotations

import mimetypes
import os
import secrets
import time
from dataclasses import dataclass
from typing import Callable, Optional

from site_api.core.errors import ValidationError, WriteError
from site_api.core.logging_config import get_logger
from site_api.core.utils import absolute_url

logger = get_logger(__name__)

UPLOADS_PREFIX = "/uploads/"
IMAGE_EXTENSIONS = {".jpg", ".jpeg", ".png", ".gif", ".webp"}
_TYPE_EXTENSIONS = {
    "image/jpeg": ".jpg",
    "image/jpg": ".jpg",
    "image/pjpeg": ".jpg",
    "image/png": ".png",
    "image/gif": ".gif",
    "image/webp": ".webp",
}
_MAX_NAME_ATTEMPTS = 5

DELETED = "deleted"
IGNORABLE = "ignorable"


@dataclass(frozen=True)
class BlobRef:
    filename: str
    url: str


@dataclass(frozen=True)
class DeleteOutcome:
    """Result of a best-effort delete: "deleted" or "ignorable" (with reason)."""

    status: str
    ref: str
    reason: str = ""

    @property
    def ignorable(self) -> bool:
        return self.status == IGNORABLE


class BlobStore:
    def __init__(
        self,
        root: str,
        *,
        max_bytes: int = 5 * 1024 * 1024,
        public_base: str = "",
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.root = os.path.abspath(root)
        self.max_bytes = max_bytes
        self.public_base = public_base
        self._clock = clock

    # ------------------------------------------------------------ naming
    def url_for(self, filename: str) -> str:
        return absolute_url(UPLOADS_PREFIX + filename, base=self.public_base)

    def filename_of(self, ref: str | None) -> Optional[str]:
        """Extract the blob filename from a URL, path or bare filename."""
        value = (ref or "").strip()
        if not value:
            return None
        if UPLOADS_PREFIX in value:
            value = value.split(UPLOADS_PREFIX, 1)[1]
        value = value.split("?", 1)[0]
        if not value or "/" in value or "\\" in value or value in {".", ".."}:
            return None
        return value

    def path_for(self, ref: str | None) -> Optional[str]:
        filename = self.filename_of(ref)
        if not filename:
            return None
        return os.path.join(self.root, filename)

    def _extension(self, original_name: str, content_type: str) -> str:
        """Extension for a stored blob, always one of IMAGE_EXTENSIONS.

        The client filename is trusted only when it already names an image type;
        otherwise the extension comes from the declared content type.
        """
        ext = os.path.splitext(original_name or "")[1].lower()
        if ext in IMAGE_EXTENSIONS:
            return ext
        ext = _TYPE_EXTENSIONS.get(content_type) or (mimetypes.guess_extension(content_type) or "").lower()
        if ext not in IMAGE_EXTENSIONS:
            raise ValidationError("Unsupported image type", "unsupported_type")
        return ext

    def _generate_name(self, ext: str) -> str:
        stamp = int(self._clock() * 1000)
        return f"{stamp}-{secrets.randbelow(10**9)}{ext}"

    # ------------------------------------------------------------ operations
    def validate(self, content: bytes, content_type: str | None) -> None:
        ct = (content_type or "").lower()
        if not ct.startswith("image/"):
            raise ValidationError("Only image files are allowed!", "not_image")
        if not content:
            raise ValidationError("No image file uploaded", "empty_file")
        if len(content) > self.max_bytes:
            limit_mb = self.max_bytes / (1024 * 1024)
            raise ValidationError(f"File is too large. Maximum size is {limit_mb:g}MB.", "too_large")

    def store(self, content: bytes, original_name: str, content_type: str | None) -> BlobRef:
        """Validate and write a new blob under a freshly generated name."""
        self.validate(content, content_type)
        ext = self._extension(original_name, (content_type or "").lower())
        try:
            os.makedirs(self.root, exist_ok=True)
            for _ in range(_MAX_NAME_ATTEMPTS):
                filename = self._generate_name(ext)
                try:
                    with open(os.path.join(self.root, filename), "xb") as f:
                        f.write(content)
                except FileExistsError:
                    continue
                logger.debug("Stored blob %s (%d bytes)", filename, len(content))
                return BlobRef(filename=filename, url=self.url_for(filename))
        except OSError as exc:
            logger.error("Failed to store upload %r: %s", original_name, exc)
            raise WriteError("Failed to store uploaded file") from exc
        raise WriteError("Could not allocate a unique name for the upload")

    def exists(self, ref: str | None) -> bool:
        path = self.path_for(ref)
        return bool(path) and os.path.isfile(path)

    def read(self, ref: str | None) -> bytes:
        path = self.path_for(ref)
        if not path:
            raise FileNotFoundError(ref)
        with open(path, "rb") as f:
            return f.read()

    def delete(self, ref: str | None) -> DeleteOutcome:
        """Remove a blob; a missing or undeletable file is logged, never raised."""
        path = self.path_for(ref)
        if not path:
            logger.warning("Ignoring delete of unresolvable blob reference %r", ref)
            return DeleteOutcome(IGNORABLE, ref or "", "unresolvable reference")
        try:
            os.remove(path)
        except FileNotFoundError:
            logger.warning("Image file not found or could not be deleted: %s", path)
            return DeleteOutcome(IGNORABLE, ref or "", "missing")
        except OSError as exc:
            logger.warning("Image file not found or could not be deleted: %s (%s)", path, exc)
            return DeleteOutcome(IGNORABLE, ref or "", str(exc))
        logger.debug("Deleted blob %s", path)
        return DeleteOutcome(DELETED, ref or "")

    def list_images(self) -> list[str]:
        """Image filenames in the uploads root, sorted by name."""
        try:
            names = os.listdir(self.root)
        except FileNotFoundError:
            return []
        return sorted(
            name
            for name in names
            if os.path.splitext(name)[1].lower() in IMAGE_EXTENSIONS
            and os.path.isfile(os.path.join(self.root, name))
        )
