"""
Tests for the image archivers.
"""
from unittest.mock import MagicMock

import pytest
import requests

from product_sync import image_archiver
from product_sync.image_archiver import (
    ImageArchiver,
    LocalImageArchiver,
    SupabaseImageArchiver,
    looks_like_http_url,
)

IMAGE_URL = "https://assets.example.co.nz/images/P123.jpg"
IMAGE_BYTES = b"\xff\xd8\xff\xe0fake-jpeg"


@pytest.fixture
def fake_get(monkeypatch):
    get = MagicMock(return_value=MagicMock(ok=True, status_code=200, content=IMAGE_BYTES))
    monkeypatch.setattr(image_archiver.requests, "get", get)
    return get


@pytest.mark.parametrize(
    "url, expected",
    [
        ("https://example.com/a.jpg", True),
        ("http://example.com/a.jpg", True),
        ("not-a-url", False),
        ("ftp://example.com/a.jpg", False),
        ("", False),
        (None, False),
        (5, False),
        (["https://example.com/a.jpg"], False),
    ],
)
def test_looks_like_http_url(url, expected):
    assert looks_like_http_url(url) is expected


class TestLocalImageArchiver:
    def test_writes_image_named_after_product(self, tmp_path, fake_get, make_product):
        archiver = LocalImageArchiver(tmp_path / "images", timeout_seconds=3)

        assert archiver.archive(IMAGE_URL, make_product()) is True

        assert (tmp_path / "images" / "P123.jpg").read_bytes() == IMAGE_BYTES
        fake_get.assert_called_once_with(IMAGE_URL, timeout=3)

    def test_invalid_url_skips_fetch(self, tmp_path, fake_get, make_product):
        archiver = LocalImageArchiver(tmp_path)

        assert archiver.archive("not-a-url", make_product()) is False
        fake_get.assert_not_called()

    def test_missing_url_skips_fetch(self, tmp_path, fake_get, make_product):
        assert LocalImageArchiver(tmp_path).archive(None, make_product()) is False
        fake_get.assert_not_called()

    @pytest.mark.parametrize("bad_url", [5, ["https://x.test/a.jpg"], {"url": IMAGE_URL}])
    def test_non_string_url_is_rejected(self, tmp_path, fake_get, make_product, bad_url):
        assert LocalImageArchiver(tmp_path).archive(bad_url, make_product()) is False
        fake_get.assert_not_called()

    def test_http_error_writes_nothing(self, tmp_path, fake_get, make_product):
        fake_get.return_value = MagicMock(ok=False, status_code=404)
        target = tmp_path / "images"

        assert LocalImageArchiver(target).archive(IMAGE_URL, make_product()) is False
        assert not target.exists()

    def test_request_exception_is_absorbed(self, tmp_path, fake_get, make_product):
        fake_get.side_effect = requests.ConnectionError("refused")
        assert LocalImageArchiver(tmp_path).archive(IMAGE_URL, make_product()) is False

    def test_filesystem_error_is_absorbed(self, tmp_path, fake_get, make_product):
        blocker = tmp_path / "file"
        blocker.write_text("not a directory")

        assert LocalImageArchiver(blocker).archive(IMAGE_URL, make_product()) is False


class TestSupabaseImageArchiver:
    def test_uploads_with_cache_and_overwrite(self, fake_get, make_product):
        client = MagicMock()
        archiver = SupabaseImageArchiver(client, bucket="images", cache_seconds=600)

        assert archiver.archive(IMAGE_URL, make_product()) is True

        client.storage.from_.assert_called_once_with("images")
        upload = client.storage.from_.return_value.upload
        upload.assert_called_once()
        kwargs = upload.call_args.kwargs
        assert kwargs["path"] == "P123.jpg"
        assert kwargs["file"] == IMAGE_BYTES
        assert kwargs["file_options"]["cache-control"] == "600"
        assert kwargs["file_options"]["upsert"] == "true"

    def test_storage_error_is_absorbed(self, fake_get, make_product):
        client = MagicMock()
        client.storage.from_.return_value.upload.side_effect = RuntimeError("bucket not found")

        assert SupabaseImageArchiver(client).archive(IMAGE_URL, make_product()) is False

    def test_http_error_skips_upload(self, fake_get, make_product):
        fake_get.return_value = MagicMock(ok=False, status_code=500)
        client = MagicMock()

        assert SupabaseImageArchiver(client).archive(IMAGE_URL, make_product()) is False
        client.storage.from_.assert_not_called()


def test_base_archiver_needs_a_store():
    with pytest.raises(TypeError):
        ImageArchiver()
