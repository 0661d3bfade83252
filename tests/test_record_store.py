from __future__ import annotations

import sys
from pathlib import Path

import pytest

# Make the site_api package importable when running tests from a checkout
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from site_api.core.errors import NotFoundError, ValidationError  # noqa: E402
from site_api.core.ids import IdGenerator  # noqa: E402
from site_api.domain.models import EventFields, Photo  # noqa: E402
from site_api.repositories.record_store import SiteStore, StoreSnapshot  # noqa: E402

FIELDS = EventFields(title="Picnic", date="2026-06-01", location="Park", description="Bring food")


def _store(clock=lambda: 1000):
    return SiteStore(ids=IdGenerator(clock=clock), now=lambda: "2026-01-01T00:00:00.000Z")


def test_ids_within_the_same_millisecond_are_distinct():
    gen = IdGenerator(clock=lambda: 1700000000000)
    assert [gen.next_id() for _ in range(3)] == [
        "1700000000000",
        "1700000000000-1",
        "1700000000000-2",
    ]


def test_ids_never_go_backwards():
    ticks = iter([2000, 1500, 2001])
    gen = IdGenerator(clock=lambda: next(ticks))
    assert [gen.next_id() for _ in range(3)] == ["2000", "2000-1", "2001"]


def test_new_ids_skip_ids_loaded_from_a_snapshot():
    existing = Photo(id="1000", image_url="/uploads/a.png", caption="", date_added="")
    store = SiteStore(StoreSnapshot(photos=(existing,)), ids=IdGenerator(clock=lambda: 1000))
    photo = store.add_photo("new", "/uploads/b.png")
    assert photo.id == "1000-1"


def test_add_photo_defaults_caption_and_keeps_insertion_order():
    store = _store()
    first = store.add_photo(None, "/uploads/a.png")
    second = store.add_photo("Sunset", "/uploads/b.png")

    assert first.caption == ""
    assert first.date_added == "2026-01-01T00:00:00.000Z"
    assert first.id != second.id
    assert [p.id for p in store.get_all_photos()] == [first.id, second.id]


def test_delete_photo_and_not_found():
    store = _store()
    photo = store.add_photo("x", "/uploads/a.png")

    assert store.delete_photo(photo.id) == photo
    with pytest.raises(NotFoundError):
        store.delete_photo(photo.id)
    assert store.get_all_photos() == ()


def test_update_event_replaces_fields_and_keeps_image():
    store = _store()
    event = store.add_event(FIELDS, "/uploads/old.png")
    new_fields = EventFields(title="Picnic II", date="2026-07-01", location="Beach", description="Swim")

    updated = store.update_event(event.id, new_fields)

    assert updated.title == "Picnic II"
    assert updated.location == "Beach"
    assert updated.image_url == "/uploads/old.png"
    assert updated.date_added == event.date_added
    assert updated.date_updated == "2026-01-01T00:00:00.000Z"
    assert store.get_event(event.id) == updated


def test_update_event_with_new_image_replaces_reference():
    store = _store()
    event = store.add_event(FIELDS)
    assert event.image_url is None

    updated = store.update_event(event.id, FIELDS, "/uploads/new.png")
    assert updated.image_url == "/uploads/new.png"


def test_update_event_requires_all_fields():
    store = _store()
    event = store.add_event(FIELDS)
    partial = EventFields(title="Only title", date="", location="", description="")

    with pytest.raises(ValidationError) as err:
        store.update_event(event.id, partial)
    assert "date" in err.value.message
    assert store.get_event(event.id) == event


def test_update_and_delete_unknown_event():
    store = _store()
    with pytest.raises(NotFoundError):
        store.update_event("missing", FIELDS)
    with pytest.raises(NotFoundError):
        store.delete_event("missing")


def test_merge_content_is_shallow_and_keeps_other_keys():
    store = _store()
    store.merge_content({"a": 1})
    assert store.merge_content({"b": 2}) == {"a": 1, "b": 2}
    assert store.merge_content({"a": 3}) == {"a": 3, "b": 2}


def test_returned_content_is_a_copy():
    store = _store()
    content = store.merge_content({"heroTitle": "Welcome"})
    content["heroTitle"] = "changed"
    assert store.get_content() == {"heroTitle": "Welcome"}


def test_snapshot_reflects_current_state():
    store = _store()
    photo = store.add_photo("p", "/uploads/a.png")
    event = store.add_event(FIELDS)
    store.merge_content({"footerText": "(c) club"})

    snap = store.snapshot()
    assert snap.photos == (photo,)
    assert snap.events == (event,)
    assert snap.content == {"footerText": "(c) club"}
