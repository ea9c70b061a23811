"""Tests for the local and S3 asset stores."""

from __future__ import annotations

from types import SimpleNamespace
from unittest.mock import MagicMock, patch

import pytest

from app.services.storage import (
    PDFS,
    PHOTOS,
    QRCODES,
    LocalAssetStore,
    S3AssetStore,
    build_asset_store,
    guess_extension,
    unique_filename,
)


class TestFilenames:

    def test_extension_from_content_type(self):
        assert guess_extension("image/png") == ".png"
        assert guess_extension("image/jpeg") == ".jpg"
        assert guess_extension("application/pdf") == ".pdf"

    def test_unknown_content_type_has_no_extension(self):
        assert guess_extension("application/x-unknown-thing") == ""

    def test_unique_filename_uses_category_prefix(self):
        assert unique_filename(PHOTOS, "image/png").startswith("photo-")
        assert unique_filename(QRCODES, "image/png").startswith("qrcode-")

    def test_unique_filenames_differ(self):
        assert unique_filename(PHOTOS, "image/png") != unique_filename(PHOTOS, "image/png")


class TestLocalAssetStore:

    def test_store_writes_under_category(self, upload_dir):
        store = LocalAssetStore(str(upload_dir))
        location = store.store(PHOTOS, b"abc", "image/png")

        assert location.startswith("/uploads/photos/photo-")
        assert location.endswith(".png")
        written = list((upload_dir / PHOTOS).iterdir())
        assert len(written) == 1
        assert written[0].read_bytes() == b"abc"

    def test_explicit_filename(self, upload_dir):
        store = LocalAssetStore(str(upload_dir))
        location = store.store(PDFS, b"%PDF", "application/pdf", filename="NOC-25-01-01-000001.pdf")

        assert location == "/uploads/pdfs/NOC-25-01-01-000001.pdf"
        assert (upload_dir / PDFS / "NOC-25-01-01-000001.pdf").read_bytes() == b"%PDF"

    def test_local_path_round_trip(self, upload_dir):
        store = LocalAssetStore(str(upload_dir))
        location = store.store(QRCODES, b"qr", "image/png")

        path = store.local_path(location)
        assert path is not None
        assert path.read_bytes() == b"qr"

    def test_local_path_rejects_traversal(self, upload_dir):
        store = LocalAssetStore(str(upload_dir))
        assert store.local_path("/uploads/../secret.txt") is None
        assert store.local_path("/uploads/photos/../../secret.txt") is None

    def test_local_path_rejects_foreign_location(self, upload_dir):
        store = LocalAssetStore(str(upload_dir))
        assert store.local_path("https://bucket.s3.us-east-1.amazonaws.com/photos/a.png") is None
        assert store.local_path("") is None
        assert store.local_path(None) is None


class TestS3AssetStore:

    def test_store_uploads_object(self):
        client = MagicMock()
        store = S3AssetStore("noc-assets", "ap-south-1", client=client)

        location = store.store(PHOTOS, b"abc", "image/jpeg")

        client.put_object.assert_called_once()
        kwargs = client.put_object.call_args.kwargs
        assert kwargs["Bucket"] == "noc-assets"
        assert kwargs["Key"].startswith("photos/photo-")
        assert kwargs["Key"].endswith(".jpg")
        assert kwargs["Body"] == b"abc"
        assert kwargs["ContentType"] == "image/jpeg"
        assert location == f"https://noc-assets.s3.ap-south-1.amazonaws.com/{kwargs['Key']}"

    def test_public_base_url_override(self):
        client = MagicMock()
        store = S3AssetStore("noc-assets", "ap-south-1", client=client, public_base_url="https://cdn.example.org/")

        location = store.store(PDFS, b"%PDF", "application/pdf", filename="NOC-25-01-01-000001.pdf")

        assert location == "https://cdn.example.org/pdfs/NOC-25-01-01-000001.pdf"

    def test_upload_failure_propagates(self):
        client = MagicMock()
        client.put_object.side_effect = RuntimeError("access denied")
        store = S3AssetStore("noc-assets", "ap-south-1", client=client)

        with pytest.raises(RuntimeError):
            store.store(PHOTOS, b"abc", "image/png")

    def test_no_local_path(self):
        store = S3AssetStore("noc-assets", "ap-south-1", client=MagicMock())
        assert store.local_path("https://noc-assets.s3.ap-south-1.amazonaws.com/photos/a.png") is None


class TestBuildAssetStore:

    def _settings(self, **overrides):
        values = dict(
            storage_type="local",
            upload_dir="./uploads",
            s3_bucket_name=None,
            s3_region="us-east-1",
            s3_public_base_url=None,
        )
        values.update(overrides)
        return SimpleNamespace(**values)

    def test_local(self):
        store = build_asset_store(self._settings())
        assert isinstance(store, LocalAssetStore)

    def test_s3(self):
        with patch("app.services.storage.boto3") as boto3:
            store = build_asset_store(self._settings(storage_type="s3", s3_bucket_name="noc-assets"))

        assert isinstance(store, S3AssetStore)
        assert store.bucket == "noc-assets"
        boto3.client.assert_called_once()
        assert boto3.client.call_args.args == ("s3",)

    def test_s3_requires_bucket(self):
        with pytest.raises(ValueError):
            build_asset_store(self._settings(storage_type="s3"))

    def test_unknown_type(self):
        with pytest.raises(ValueError):
            build_asset_store(self._settings(storage_type="gcs"))
