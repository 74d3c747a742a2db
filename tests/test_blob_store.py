"""Blob 저장소 (local / minio) 테스트."""

import pytest
import urllib3
from minio.error import MinioException

from core.exceptions import BlobWriteError
from storage.blob_store import LocalBlobStore, MinioBlobStore, make_key


class FakeMinio:
    """put_object 호출만 기록하는 MinIO 클라이언트 대역."""

    def __init__(self, error: Exception | None = None, buckets: set | None = None):
        self.error = error
        self.buckets = buckets if buckets is not None else set()
        self.objects: dict[str, bytes] = {}

    def bucket_exists(self, bucket):
        return bucket in self.buckets

    def make_bucket(self, bucket):
        self.buckets.add(bucket)

    def put_object(self, bucket, object_name, data, length, content_type):
        if self.error:
            raise self.error
        self.objects[f"{bucket}/{object_name}"] = data.read(length)


def test_make_key_sanitizes_filename():
    key = make_key("../my photo!.png")
    assert key.endswith("-my_photo_.png")
    assert "/" not in key


def test_make_key_without_filename():
    assert make_key(None).endswith("-upload")


def test_make_key_is_unique():
    assert make_key("a.png") != make_key("a.png")


class TestLocalBlobStore:
    def test_put_writes_file(self, tmp_path):
        store = LocalBlobStore(str(tmp_path / "blobs"), "http://cdn.local/blobs/")

        location = store.put(b"\x89PNG data", "image/png", "cat.png")

        assert location.startswith("http://cdn.local/blobs/")
        key = location.rsplit("/", 1)[1]
        assert (tmp_path / "blobs" / key).read_bytes() == b"\x89PNG data"

    def test_write_failure_raises(self, tmp_path):
        blocker = tmp_path / "file"
        blocker.write_text("x")
        store = LocalBlobStore(str(blocker), "http://cdn.local/blobs")

        with pytest.raises(BlobWriteError):
            store.put(b"data", "image/png", "cat.png")


class TestMinioBlobStore:
    def test_put_returns_public_location(self):
        client = FakeMinio()
        store = MinioBlobStore(client, "images", "http://s3.local/")

        location = store.put(b"bytes", "image/png", "dog.png")

        assert location.startswith("http://s3.local/images/uploads/")
        assert location.endswith("-dog.png")
        object_path = location.removeprefix("http://s3.local/")
        assert client.objects[object_path] == b"bytes"

    @pytest.mark.parametrize(
        "error",
        [MinioException("bucket policy"), urllib3.exceptions.ProtocolError("connection reset")],
    )
    def test_put_failure_raises_blob_write_error(self, error):
        store = MinioBlobStore(FakeMinio(error=error), "images", "http://s3.local")

        with pytest.raises(BlobWriteError):
            store.put(b"bytes", "image/png", "dog.png")

    def test_ensure_bucket_creates_missing(self):
        client = FakeMinio()
        MinioBlobStore(client, "images", "http://s3.local").ensure_bucket()
        assert client.buckets == {"images"}

    def test_ensure_bucket_existing(self):
        client = FakeMinio(buckets={"images"})
        MinioBlobStore(client, "images", "http://s3.local").ensure_bucket()
        assert client.buckets == {"images"}
