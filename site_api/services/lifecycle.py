"""
Photo/event use cases that keep uploaded blobs and records consistent.

Ordering rules:
- add: the blob is stored before the record that references it is created;
- replace: the record is updated and persisted before the old blob is removed;
- delete: the record is removed and persisted, then its blob is removed.

Blob removal is best-effort and only happens after a successful save, so the
on-disk snapshot never references a file that was already deleted. Every
successful mutation triggers exactly one save of the full state.

The in-memory store is authoritative: when a save fails the mutation stays
applied and WriteError reaches the caller as "durability degraded".
"""

from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from site_api.core.errors import NotFoundError, ValidationError, WriteError
from site_api.core.logging_config import get_logger
from site_api.domain.models import Event, EventFields, Photo
from site_api.repositories.blob_store import BlobStore, DeleteOutcome
from site_api.repositories.json_storage import JsonStorage
from site_api.repositories.record_store import SiteStore

logger = get_logger(__name__)

DEFAULT_BLOB_CAPTION = "Gallery Image"


@dataclass(frozen=True)
class Upload:
    """Raw bytes of an uploaded file plus the metadata sent with it."""

    content: bytes
    filename: str
    content_type: Optional[str]


@dataclass(frozen=True)
class AuditReport:
    orphans: tuple[str, ...]
    dangling: tuple[str, ...]

    @property
    def clean(self) -> bool:
        return not self.orphans and not self.dangling


class LifecycleCoordinator:
    def __init__(self, store: SiteStore, blobs: BlobStore, storage: JsonStorage) -> None:
        self.store = store
        self.blobs = blobs
        self.storage = storage
        self._lock = threading.Lock()

    def _persist(self) -> None:
        try:
            self.storage.save(self.store.snapshot())
        except WriteError:
            logger.error("Snapshot save failed; in-memory state is ahead of disk (durability degraded)")
            raise

    def _release(self, image_url: str | None, owner: str) -> Optional[DeleteOutcome]:
        if not image_url:
            return None
        outcome = self.blobs.delete(image_url)
        if outcome.ignorable:
            logger.warning("Blob cleanup for %s skipped (%s): %s", owner, outcome.reason, image_url)
        return outcome

    # -------------------------- photos --------------------------
    def add_photo(self, caption: str | None, upload: Upload | None) -> Photo:
        if upload is None or not upload.filename:
            raise ValidationError("No image file uploaded", "missing_image")
        with self._lock:
            ref = self.blobs.store(upload.content, upload.filename, upload.content_type)
            photo = self.store.add_photo(caption, ref.url)
            self._persist()
        logger.info("Added photo %s (%s)", photo.id, ref.filename)
        return photo

    def delete_photo(self, photo_id: str) -> Photo:
        with self._lock:
            photo = self.store.delete_photo(photo_id)
            self._persist()
            self._release(photo.image_url, f"photo {photo.id}")
        logger.info("Deleted photo %s", photo.id)
        return photo

    def list_photos(self) -> list[Photo]:
        return list(self.store.get_all_photos())

    # -------------------------- events --------------------------
    def _event_fields(self, fields: EventFields | Mapping[str, Any]) -> EventFields:
        if not isinstance(fields, EventFields):
            fields = EventFields.from_mapping(fields)
        missing = fields.missing()
        if missing:
            raise ValidationError(f"Missing required field(s): {', '.join(missing)}", "missing_field")
        return fields

    def add_event(self, fields: EventFields | Mapping[str, Any], upload: Upload | None = None) -> Event:
        fields = self._event_fields(fields)
        with self._lock:
            image_url = None
            if upload is not None:
                image_url = self.blobs.store(upload.content, upload.filename, upload.content_type).url
            event = self.store.add_event(fields, image_url)
            self._persist()
        logger.info("Added event %s", event.id)
        return event

    def update_event(
        self, event_id: str, fields: EventFields | Mapping[str, Any], upload: Upload | None = None
    ) -> Event:
        with self._lock:
            current = self.store.get_event(event_id)
            if current is None:
                raise NotFoundError("Event not found")
            fields = self._event_fields(fields)
            new_url = None
            if upload is not None:
                new_url = self.blobs.store(upload.content, upload.filename, upload.content_type).url
            event = self.store.update_event(event_id, fields, new_url)
            self._persist()
            if new_url and current.image_url and current.image_url != new_url:
                self._release(current.image_url, f"event {event_id}")
        logger.info("Updated event %s", event.id)
        return event

    def delete_event(self, event_id: str) -> Event:
        with self._lock:
            event = self.store.delete_event(event_id)
            self._persist()
            self._release(event.image_url, f"event {event.id}")
        logger.info("Deleted event %s", event.id)
        return event

    def list_events(self) -> list[Event]:
        return list(self.store.get_all_events())

    # -------------------------- content --------------------------
    def get_content(self) -> dict:
        return self.store.get_content()

    def merge_content(self, partial: Mapping[str, Any]) -> dict:
        if not isinstance(partial, Mapping):
            raise ValidationError("Content must be a JSON object", "invalid_content")
        with self._lock:
            content = self.store.merge_content(partial)
            self._persist()
        return content

    # -------------------------- blobs --------------------------
    def list_all_blobs(self) -> list[dict]:
        """Every image in the uploads root, captioned by the photo that owns it."""
        captions = {}
        for photo in self.store.get_all_photos():
            name = self.blobs.filename_of(photo.image_url)
            if name and name not in captions:
                captions[name] = photo.caption
        return [
            {
                "imageUrl": self.blobs.url_for(name),
                "caption": captions.get(name) or DEFAULT_BLOB_CAPTION,
            }
            for name in self.blobs.list_images()
        ]

    def audit(self) -> AuditReport:
        """Report image files no record owns and records whose file is gone."""
        referenced = set()
        dangling = []
        records = [*self.store.get_all_photos(), *self.store.get_all_events()]
        for record in records:
            if not record.image_url:
                continue
            name = self.blobs.filename_of(record.image_url)
            if name:
                referenced.add(name)
            if not self.blobs.exists(record.image_url):
                dangling.append(record.id)
        orphans = [name for name in self.blobs.list_images() if name not in referenced]
        return AuditReport(orphans=tuple(orphans), dangling=tuple(dangling))
