from __future__ import annotations

import os
import sys
from pathlib import Path

import pytest

# Make the site_api package importable when running tests from a checkout
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from site_api.core.errors import ValidationError, WriteError  # noqa: E402
from site_api.repositories import blob_store  # noqa: E402
from site_api.repositories.blob_store import BlobStore  # noqa: E402

PNG = b"\x89PNG\r\n\x1a\n" + b"\x00" * 32


@pytest.fixture()
def blobs(tmp_path):
    return BlobStore(str(tmp_path / "uploads"), max_bytes=1024, clock=lambda: 1700000000.0)


def test_store_writes_identical_bytes_under_generated_name(blobs):
    ref = blobs.store(PNG, "Holiday.PNG", "image/png")

    assert ref.filename.startswith("1700000000000-")
    assert ref.filename.endswith(".png")
    assert ref.url == f"/uploads/{ref.filename}"
    assert blobs.exists(ref.url)
    assert blobs.read(ref.url) == PNG


def test_public_base_is_used_for_urls(tmp_path):
    store = BlobStore(str(tmp_path), public_base="https://club.example")
    ref = store.store(PNG, "a.jpg", "image/jpeg")
    assert ref.url == f"https://club.example/uploads/{ref.filename}"
    assert store.exists(ref.url)


def test_same_millisecond_uploads_get_distinct_names(blobs):
    first = blobs.store(PNG, "a.png", "image/png")
    second = blobs.store(PNG, "a.png", "image/png")
    assert first.filename != second.filename
    assert blobs.exists(first.filename) and blobs.exists(second.filename)


def test_name_collision_draws_a_new_suffix(blobs, monkeypatch):
    suffixes = iter([7, 7, 8])
    monkeypatch.setattr(blob_store.secrets, "randbelow", lambda _n: next(suffixes))

    first = blobs.store(PNG, "a.png", "image/png")
    second = blobs.store(PNG, "b.png", "image/png")

    assert first.filename == "1700000000000-7.png"
    assert second.filename == "1700000000000-8.png"


def test_extension_falls_back_to_content_type(blobs):
    ref = blobs.store(PNG, "no-extension", "image/png")
    assert ref.filename.endswith(".png")


def test_non_image_extension_is_replaced_by_content_type(blobs):
    ref = blobs.store(PNG, "x.html", "image/png")
    assert ref.filename.endswith(".png")
    assert blobs.list_images() == [ref.filename]


def test_image_extension_from_name_is_kept(blobs):
    assert blobs.store(PNG, "photo.JPEG", "image/jpeg").filename.endswith(".jpeg")


def test_unsupported_image_type_is_rejected_before_writing(blobs):
    with pytest.raises(ValidationError) as err:
        blobs.store(b"<svg/>", "a.svg", "image/svg+xml")
    assert err.value.code == "unsupported_type"
    assert not os.path.exists(blobs.root) or os.listdir(blobs.root) == []


@pytest.mark.parametrize(
    "content, content_type, code",
    [
        (PNG, "text/plain", "not_image"),
        (PNG, None, "not_image"),
        (b"", "image/png", "empty_file"),
        (b"x" * 1025, "image/png", "too_large"),
    ],
)
def test_invalid_uploads_are_rejected_before_writing(blobs, content, content_type, code):
    with pytest.raises(ValidationError) as err:
        blobs.store(content, "a.png", content_type)
    assert err.value.code == code
    assert err.value.status_code == 400
    assert blobs.list_images() == []


def test_oversize_message_names_the_limit(tmp_path):
    store = BlobStore(str(tmp_path), max_bytes=5 * 1024 * 1024)
    with pytest.raises(ValidationError) as err:
        store.validate(b"x" * (5 * 1024 * 1024 + 1), "image/png")
    assert err.value.message == "File is too large. Maximum size is 5MB."


def test_write_failure_raises_write_error(tmp_path):
    blocker = tmp_path / "uploads"
    blocker.write_text("not a directory")
    store = BlobStore(str(blocker))
    with pytest.raises(WriteError):
        store.store(PNG, "a.png", "image/png")


def test_delete_is_idempotent(blobs):
    ref = blobs.store(PNG, "a.png", "image/png")

    first = blobs.delete(ref.url)
    second = blobs.delete(ref.url)

    assert first.status == blob_store.DELETED
    assert not first.ignorable
    assert second.ignorable
    assert second.reason == "missing"
    assert not blobs.exists(ref.url)


def test_delete_of_unresolvable_reference_is_ignorable(blobs):
    outcome = blobs.delete("/uploads/../secrets.txt")
    assert outcome.ignorable
    assert outcome.reason == "unresolvable reference"


@pytest.mark.parametrize(
    "ref, expected",
    [
        ("http://localhost:3000/uploads/1-2.png", "1-2.png"),
        ("/uploads/1-2.png?v=abc", "1-2.png"),
        ("1-2.png", "1-2.png"),
        ("/uploads/../data/photos.json", None),
        ("..", None),
        ("", None),
        (None, None),
    ],
)
def test_filename_of(blobs, ref, expected):
    assert blobs.filename_of(ref) == expected


def test_list_images_filters_non_images(blobs):
    os.makedirs(blobs.root, exist_ok=True)
    for name in ("b.JPG", "a.webp", "notes.txt", "c.gif"):
        (Path(blobs.root) / name).write_bytes(b"x")
    (Path(blobs.root) / "nested.png").mkdir()

    assert blobs.list_images() == ["a.webp", "b.JPG", "c.gif"]


def test_list_images_without_root(tmp_path):
    assert BlobStore(str(tmp_path / "missing")).list_images() == []
