from __future__ import annotations

from datetime import timedelta
from typing import Any

import pytest
from google.api_core.exceptions import NotFound

from upload_provider.config import Settings
from upload_provider.schemas import FileDescriptor


class FakeBlob:
    def __init__(self, bucket: "FakeBucket", name: str) -> None:
        self.bucket = bucket
        self.name = name
        self.content_disposition: str | None = None
        self.chunk_size: int | None = None

    def _store(self, data: bytes, **kwargs: Any) -> None:
        if self.bucket.fail_with is not None:
            raise self.bucket.fail_with
        self.bucket.objects[self.name] = data
        self.bucket.writes.append(
            {
                "name": self.name,
                "content_disposition": self.content_disposition,
                "chunk_size": self.chunk_size,
                **kwargs,
            }
        )

    def upload_from_string(self, data: bytes, content_type: str = "text/plain", predefined_acl: str | None = None) -> None:
        self._store(data, content_type=content_type, predefined_acl=predefined_acl, method="string")

    def upload_from_file(self, file_obj, content_type: str | None = None, predefined_acl: str | None = None) -> None:
        self._store(file_obj.read(), content_type=content_type, predefined_acl=predefined_acl, method="file")

    def delete(self) -> None:
        if self.bucket.fail_with is not None:
            raise self.bucket.fail_with
        if self.name not in self.bucket.objects:
            raise NotFound(f"No such object: {self.bucket.name}/{self.name}")
        del self.bucket.objects[self.name]

    def generate_signed_url(self, version: str, expiration: timedelta, method: str) -> str:
        self.bucket.signed.append({"name": self.name, "version": version, "expiration": expiration, "method": method})
        return f"https://signed.example/{self.bucket.name}/{self.name}?ttl={int(expiration.total_seconds())}"


class FakeBucket:
    def __init__(self, name: str) -> None:
        self.name = name
        self.objects: dict[str, bytes] = {}
        self.writes: list[dict[str, Any]] = []
        self.signed: list[dict[str, Any]] = []
        self.fail_with: Exception | None = None

    def blob(self, name: str) -> FakeBlob:
        return FakeBlob(self, name)


class FakeGCSClient:
    def __init__(self) -> None:
        self.buckets: dict[str, FakeBucket] = {}

    def bucket(self, name: str) -> FakeBucket:
        return self.buckets.setdefault(name, FakeBucket(name))


class FakeMinioClient:
    def __init__(self, existing_buckets: tuple[str, ...] = ()) -> None:
        self.buckets = set(existing_buckets)
        self.objects: dict[tuple[str, str], bytes] = {}
        self.puts: list[dict[str, Any]] = []
        self.made: list[str] = []
        self.removed: list[tuple[str, str]] = []
        self.fail_with: Exception | None = None

    def bucket_exists(self, bucket: str) -> bool:
        return bucket in self.buckets

    def make_bucket(self, bucket: str) -> None:
        self.buckets.add(bucket)
        self.made.append(bucket)

    def put_object(self, bucket: str, key: str, data, length: int, **kwargs: Any) -> None:
        if self.fail_with is not None:
            raise self.fail_with
        self.objects[(bucket, key)] = data.read()
        self.puts.append({"bucket": bucket, "key": key, "length": length, **kwargs})

    def remove_object(self, bucket: str, key: str) -> None:
        if self.fail_with is not None:
            raise self.fail_with
        # S3 semantics: removing a missing key succeeds.
        self.objects.pop((bucket, key), None)
        self.removed.append((bucket, key))

    def presigned_get_object(self, bucket: str, key: str, expires: timedelta) -> str:
        return f"http://minio.local/{bucket}/{key}?X-Amz-Expires={int(expires.total_seconds())}"


@pytest.fixture()
def make_settings():
    def _make(**overrides: Any) -> Settings:
        values: dict[str, Any] = {"storage_provider": "gcs", "gcs_bucket_name": "media"}
        values.update(overrides)
        return Settings(_env_file=None, **values)

    return _make


@pytest.fixture()
def gcs_client() -> FakeGCSClient:
    return FakeGCSClient()


@pytest.fixture()
def minio_client() -> FakeMinioClient:
    return FakeMinioClient()


@pytest.fixture()
def image_file() -> FileDescriptor:
    return FileDescriptor(
        name="cat.png",
        hash="abc123",
        ext=".png",
        mime="image/png",
        size=4,
        buffer=b"\x89PNG",
    )
