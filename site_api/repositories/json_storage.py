"""
JSON snapshot persistence for the site store.

Layout under the data root:
  photos.json   list of photo records
  events.json   list of event records
  content.json  site content mapping

Each file is written to a temporary sibling and renamed into place, so a
failed save leaves the previous snapshot intact.
"""

from __future__ import annotations

from pathlib import Path
import json
import os
import tempfile

from site_api.core.errors import CorruptDataError, WriteError
from site_api.core.logging_config import get_logger
from site_api.domain.models import Event, Photo
from site_api.repositories.record_store import StoreSnapshot

logger = get_logger(__name__)

PHOTOS_FILE = "photos.json"
EVENTS_FILE = "events.json"
CONTENT_FILE = "content.json"


class JsonStorage:
    def __init__(self, data_dir: str | os.PathLike) -> None:
        self.data_dir = Path(data_dir)

    def _read(self, name: str, expected: type):
        path = self.data_dir / name
        if not path.exists():
            return expected()
        try:
            with path.open("r", encoding="utf-8") as f:
                value = json.load(f)
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise CorruptDataError(f"Could not read {path}: {exc}") from exc
        if not isinstance(value, expected):
            raise CorruptDataError(f"{path} must contain a JSON {expected.__name__}")
        return value

    def load(self) -> StoreSnapshot:
        raw_photos = self._read(PHOTOS_FILE, list)
        raw_events = self._read(EVENTS_FILE, list)
        content = self._read(CONTENT_FILE, dict)
        try:
            photos = tuple(Photo.from_dict(item) for item in raw_photos)
            events = tuple(Event.from_dict(item) for item in raw_events)
        except (TypeError, ValueError) as exc:
            raise CorruptDataError(f"Malformed record in {self.data_dir}: {exc}") from exc
        logger.info(
            "Loaded %d photos, %d events and %d content keys from %s",
            len(photos), len(events), len(content), self.data_dir,
        )
        return StoreSnapshot(photos=photos, events=events, content=content)

    def _write(self, name: str, value) -> None:
        target = self.data_dir / name
        fd, tmp_name = tempfile.mkstemp(prefix=f".{name}.", suffix=".tmp", dir=self.data_dir)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(value, f, ensure_ascii=False, indent=2)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_name, target)
        except BaseException:
            try:
                os.unlink(tmp_name)
            except OSError:
                pass
            raise

    def save(self, snapshot: StoreSnapshot) -> None:
        try:
            self.data_dir.mkdir(parents=True, exist_ok=True)
            self._write(PHOTOS_FILE, [p.to_dict() for p in snapshot.photos])
            self._write(EVENTS_FILE, [e.to_dict() for e in snapshot.events])
            self._write(CONTENT_FILE, snapshot.content)
        except (OSError, TypeError, ValueError) as exc:
            logger.error("Error saving data to %s: %s", self.data_dir, exc)
            raise WriteError("Failed to save data") from exc
