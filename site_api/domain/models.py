"""Record types stored by the site and their JSON representation."""
from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Mapping, Optional

EVENT_FIELDS = ("title", "date", "location", "description")


@dataclass(frozen=True)
class Photo:
    id: str
    image_url: str
    caption: str
    date_added: str

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "imageUrl": self.image_url,
            "caption": self.caption,
            "dateAdded": self.date_added,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Photo":
        if not isinstance(data, Mapping):
            raise ValueError("photo record must be an object")
        image_url = data.get("imageUrl")
        if not data.get("id") or not isinstance(image_url, str):
            raise ValueError("photo record requires id and imageUrl")
        return cls(
            id=str(data["id"]),
            image_url=image_url,
            caption=str(data.get("caption") or ""),
            date_added=str(data.get("dateAdded") or ""),
        )


@dataclass(frozen=True)
class EventFields:
    """The four free-text fields an event is created or updated with."""

    title: str
    date: str
    location: str
    description: str

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "EventFields":
        return cls(**{name: str(data.get(name) or "") for name in EVENT_FIELDS})

    def missing(self) -> list[str]:
        return [name for name in EVENT_FIELDS if not getattr(self, name).strip()]


@dataclass(frozen=True)
class Event:
    id: str
    title: str
    date: str
    location: str
    description: str
    image_url: Optional[str]
    date_added: str
    date_updated: Optional[str] = None

    def with_fields(self, fields: EventFields, date_updated: str, image_url: Optional[str] = None) -> "Event":
        return replace(
            self,
            title=fields.title,
            date=fields.date,
            location=fields.location,
            description=fields.description,
            image_url=image_url if image_url is not None else self.image_url,
            date_updated=date_updated,
        )

    def to_dict(self) -> dict:
        data = {
            "id": self.id,
            "title": self.title,
            "date": self.date,
            "location": self.location,
            "description": self.description,
            "imageUrl": self.image_url,
            "dateAdded": self.date_added,
        }
        if self.date_updated is not None:
            data["dateUpdated"] = self.date_updated
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Event":
        if not isinstance(data, Mapping):
            raise ValueError("event record must be an object")
        if not data.get("id"):
            raise ValueError("event record requires id")
        image_url = data.get("imageUrl")
        if image_url is not None and not isinstance(image_url, str):
            raise ValueError("event imageUrl must be a string or null")
        return cls(
            id=str(data["id"]),
            title=str(data.get("title") or ""),
            date=str(data.get("date") or ""),
            location=str(data.get("location") or ""),
            description=str(data.get("description") or ""),
            image_url=image_url or None,
            date_added=str(data.get("dateAdded") or ""),
            date_updated=data.get("dateUpdated"),
        )
