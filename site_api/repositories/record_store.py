"""In-memory collections of photos, events and site content."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Mapping, Optional

from site_api.core.errors import NotFoundError, ValidationError
from site_api.core.ids import IdGenerator
from site_api.core.utils import utc_now_iso
from site_api.domain.models import Event, EventFields, Photo


@dataclass(frozen=True)
class StoreSnapshot:
    photos: tuple[Photo, ...] = ()
    events: tuple[Event, ...] = ()
    content: dict = field(default_factory=dict)


class SiteStore:
    """Owns the three collections for the lifetime of the process."""

    def __init__(
        self,
        snapshot: StoreSnapshot | None = None,
        *,
        ids: IdGenerator | None = None,
        now: Callable[[], str] = utc_now_iso,
    ) -> None:
        snapshot = snapshot or StoreSnapshot()
        self._photos: dict[str, Photo] = {p.id: p for p in snapshot.photos}
        self._events: dict[str, Event] = {e.id: e for e in snapshot.events}
        self._content: dict[str, Any] = dict(snapshot.content)
        self._ids = ids or IdGenerator()
        self._now = now

    def _new_id(self) -> str:
        # Snapshots may carry ids from an older clock; never reuse one.
        while True:
            candidate = self._ids.next_id()
            if candidate not in self._photos and candidate not in self._events:
                return candidate

    # -------------------------- photos --------------------------
    def add_photo(self, caption: str | None, image_url: str) -> Photo:
        photo = Photo(
            id=self._new_id(),
            image_url=image_url,
            caption=caption or "",
            date_added=self._now(),
        )
        self._photos[photo.id] = photo
        return photo

    def get_photo(self, photo_id: str) -> Optional[Photo]:
        return self._photos.get(photo_id)

    def delete_photo(self, photo_id: str) -> Photo:
        try:
            return self._photos.pop(photo_id)
        except KeyError:
            raise NotFoundError("Photo not found") from None

    def get_all_photos(self) -> tuple[Photo, ...]:
        return tuple(self._photos.values())

    # -------------------------- events --------------------------
    def add_event(self, fields: EventFields, image_url: str | None = None) -> Event:
        event = Event(
            id=self._new_id(),
            title=fields.title,
            date=fields.date,
            location=fields.location,
            description=fields.description,
            image_url=image_url or None,
            date_added=self._now(),
        )
        self._events[event.id] = event
        return event

    def get_event(self, event_id: str) -> Optional[Event]:
        return self._events.get(event_id)

    def update_event(self, event_id: str, fields: EventFields, image_url: str | None = None) -> Event:
        current = self._events.get(event_id)
        if current is None:
            raise NotFoundError("Event not found")
        missing = fields.missing()
        if missing:
            raise ValidationError(f"Missing required field(s): {', '.join(missing)}", "missing_field")
        updated = current.with_fields(fields, self._now(), image_url or None)
        self._events[event_id] = updated
        return updated

    def delete_event(self, event_id: str) -> Event:
        try:
            return self._events.pop(event_id)
        except KeyError:
            raise NotFoundError("Event not found") from None

    def get_all_events(self) -> tuple[Event, ...]:
        return tuple(self._events.values())

    # -------------------------- content --------------------------
    def merge_content(self, partial: Mapping[str, Any]) -> dict:
        self._content.update(partial)
        return dict(self._content)

    def get_content(self) -> dict:
        return dict(self._content)

    # -------------------------- snapshot --------------------------
    def snapshot(self) -> StoreSnapshot:
        return StoreSnapshot(
            photos=self.get_all_photos(),
            events=self.get_all_events(),
            content=self.get_content(),
        )
