"""Unit tests: explorer_core.blob_store (validation, naming, local storage)."""
import re

import pytest

from explorer_core.blob_store import (
    MAX_FILE_SIZE,
    LocalBlobStore,
    generate_storage_file_name,
    validate_image,
)
from explorer_core.errors import ErrorKind, ExplorerError, InvalidImage, StorageFailure

pytestmark = pytest.mark.unit

PNG = b"\x89PNG\r\n\x1a\n" + b"\x00" * 32


@pytest.fixture
def store(tmp_path):
    return LocalBlobStore(tmp_path, base_url="/media")


def test_validate_image_accepts_known_types():
    for content_type in ("image/jpeg", "image/png", "image/webp", "image/gif"):
        assert validate_image(content_type, 1024) == (True, "")


def test_validate_image_rejects_type():
    ok, err = validate_image("application/pdf", 1024)
    assert not ok
    assert "not allowed" in err


def test_validate_image_size_checked_first():
    ok, err = validate_image("application/pdf", MAX_FILE_SIZE + 1)
    assert not ok
    assert "5MB" in err


def test_validate_image_rejects_empty():
    assert validate_image("image/png", 0) == (False, "Empty file")


def test_generate_storage_file_name():
    name = generate_storage_file_name("image/png", "loc-7")
    assert re.fullmatch(r"loc-7-\d{13}-[a-z0-9]{13}\.png", name)
    assert generate_storage_file_name("image/jpeg").startswith("unknown-")
    assert generate_storage_file_name("image/jpeg", "   ").startswith("unknown-")


def test_generate_storage_file_name_keeps_name_flat():
    assert re.fullmatch(r"a-b-\d{13}-[a-z0-9]{13}\.png", generate_storage_file_name("image/png", "a/b"))
    assert generate_storage_file_name("image/png", "../../x").startswith("x-")
    assert generate_storage_file_name("image/png", "../..").startswith("unknown-")
    assert "/" not in generate_storage_file_name("image/png", "loc\\1/..")


def test_upload_with_unsafe_location_id_stays_under_storage_path(store, tmp_path):
    result = store.upload(PNG, "image/png", "foto.png", location_id="../../evil")
    assert result.full_path.startswith("locations/evil-")
    assert result.full_path.count("/") == 1
    assert (tmp_path / result.full_path).read_bytes() == PNG


def test_upload_writes_file_and_returns_url(store, tmp_path):
    result = store.upload(PNG, "image/png", "foto.png", location_id="loc-1")
    assert result.full_path.startswith("locations/loc-1-")
    assert result.download_url == f"/media/{result.full_path}"
    assert result.size == len(PNG)
    assert (tmp_path / result.full_path).read_bytes() == PNG


def test_upload_rejects_large_file(tmp_path):
    store = LocalBlobStore(tmp_path, max_size=10)
    with pytest.raises(InvalidImage):
        store.upload(PNG, "image/png")


def test_upload_rejects_bad_type(store):
    with pytest.raises(InvalidImage):
        store.upload(b"%PDF-1.4", "application/pdf")


def test_delete(store):
    result = store.upload(PNG, "image/png")
    assert store.delete(result.full_path) is True
    assert store.delete(result.full_path) is False


def test_path_traversal_rejected(store):
    with pytest.raises(StorageFailure):
        store.delete("../outside.png")


def test_managed_urls(store):
    assert store.is_managed_url("/media/locations/a.png")
    assert store.is_managed_url("http://localhost:8001/media/locations/a.png")
    assert store.extract_path("/media/locations/a%20b.png") == "locations/a b.png"
    assert not store.is_managed_url("restaurant-jenny.jpg")
    assert not store.is_managed_url("https://cdn.example.com/x.png")
    assert not store.is_managed_url(None)


def test_cleanup_old_image_deletes_replaced_file(store, tmp_path):
    old = store.upload(PNG, "image/png")
    new = store.upload(PNG, "image/png")
    store.cleanup_old_image(old.download_url, new.download_url)
    assert not (tmp_path / old.full_path).exists()
    assert (tmp_path / new.full_path).exists()


def test_cleanup_old_image_ignores_unmanaged_and_unchanged(store, tmp_path):
    kept = store.upload(PNG, "image/png")
    store.cleanup_old_image(kept.download_url, kept.download_url)
    store.cleanup_old_image("restaurant-jenny.jpg", kept.download_url)
    store.cleanup_old_image("/media/locations/missing.png", None)
    assert (tmp_path / kept.full_path).exists()


def test_error_kinds():
    assert ExplorerError("unclassified").kind is None
    assert InvalidImage("too big").kind == ErrorKind.InvalidImage
    assert StorageFailure("disk full").kind == ErrorKind.StorageFailure
