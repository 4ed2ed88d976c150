"""MinIO (S3-compatible) upload provider: self-hosted object storage."""

from __future__ import annotations

import time
from datetime import timedelta
from io import BytesIO
from typing import Any

from upload_provider.config import DEFAULT_SIGNED_URL_EXPIRY_SECONDS, Settings
from upload_provider.key_policy import content_disposition
from upload_provider.providers.base import UploadProvider
from upload_provider.schemas import FileDescriptor, StorageConfig
from upload_provider.storage_logging import log_storage_event

# Streams have unknown length; minio needs a fixed part size for multipart upload.
STREAM_PART_SIZE = 10 * 1024 * 1024


def build_minio_client(settings: Settings):
    from minio import Minio

    return Minio(
        settings.minio_endpoint,
        access_key=settings.minio_access_key,
        secret_key=settings.minio_secret_key,
        secure=settings.minio_secure,
    )


def _public_host(settings: Settings) -> str:
    scheme = "https" if settings.minio_secure else "http"
    return f"{scheme}://{settings.minio_endpoint}"


class MinIOUploadProvider(UploadProvider):
    """Storage using MinIO. No per-object ACLs: visibility is the bucket policy, so uniform access is forced."""

    name = "minio"

    def __init__(
        self,
        config: StorageConfig,
        client: Any,
        *,
        signed_url_expiry_seconds: int = DEFAULT_SIGNED_URL_EXPIRY_SECONDS,
    ) -> None:
        if not config.use_uniform_access:
            config = config.model_copy(update={"use_uniform_access": True})
        super().__init__(config)
        self.client = client
        self.signed_url_expiry_seconds = signed_url_expiry_seconds
        self._bucket_ready = False

    @classmethod
    def from_settings(cls, settings: Settings, client: Any | None = None) -> "MinIOUploadProvider":
        config = settings.storage_config().model_copy(update={"public_host": _public_host(settings)})
        return cls(
            config,
            client if client is not None else build_minio_client(settings),
            signed_url_expiry_seconds=settings.signed_url_expiry_seconds,
        )

    def _ensure_bucket(self) -> None:
        """Create the bucket if it does not exist (once per provider)."""
        if self._bucket_ready:
            return
        if not self.client.bucket_exists(self.config.bucket):
            self.client.make_bucket(self.config.bucket)
        self._bucket_ready = True

    def _put(self, key: str, file: FileDescriptor, data: Any, length: int, **kwargs: Any) -> None:
        self._ensure_bucket()
        started = time.monotonic()
        try:
            self.client.put_object(
                self.config.bucket,
                key,
                data,
                length,
                content_type=file.mime_type,
                metadata={"Content-Disposition": content_disposition(file)},
                **kwargs,
            )
        except Exception as e:
            log_storage_event("upload_failed", self.name, self.config.bucket, key, error=str(e))
            raise
        log_storage_event(
            "uploaded",
            self.name,
            self.config.bucket,
            key,
            size_bytes=length if length >= 0 else None,
            duration_ms=int((time.monotonic() - started) * 1000),
            public=False,
        )

    def upload(self, file: FileDescriptor) -> None:
        plan = self.plan(file)
        data = self._require_buffer(file)
        self._put(plan.key, file, BytesIO(data), len(data))
        file.url = plan.url

    def upload_stream(self, file: FileDescriptor) -> None:
        plan = self.plan(file)
        stream = self._require_stream(file)
        self._put(plan.key, file, stream, -1, part_size=STREAM_PART_SIZE)
        file.url = plan.url

    def delete(self, file: FileDescriptor) -> None:
        from minio.error import S3Error

        key = self.object_key(file)
        try:
            self.client.remove_object(self.config.bucket, key)
        except S3Error as e:
            if e.code in ("NoSuchKey", "NoSuchBucket"):
                log_storage_event("delete_missing", self.name, self.config.bucket, key)
                return
            log_storage_event("delete_failed", self.name, self.config.bucket, key, error=str(e))
            raise
        log_storage_event("deleted", self.name, self.config.bucket, key)

    def get_signed_url(self, file: FileDescriptor, expiration_seconds: int | None = None) -> dict[str, str]:
        key = self.object_key(file)
        seconds = expiration_seconds or self.signed_url_expiry_seconds
        url = self.client.presigned_get_object(
            self.config.bucket,
            key,
            expires=timedelta(seconds=seconds),
        )
        log_storage_event("signed_url_issued", self.name, self.config.bucket, key)
        return {"url": url}
