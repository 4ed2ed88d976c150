"""GCS upload provider: forwards writes, deletes and signing to google-cloud-storage."""

from __future__ import annotations

import json
import time
from datetime import timedelta
from typing import TYPE_CHECKING, Any

from google.api_core.exceptions import NotFound

from upload_provider.config import (
    DEFAULT_RESUMABLE_THRESHOLD_BYTES,
    DEFAULT_SIGNED_URL_EXPIRY_SECONDS,
    Settings,
)
from upload_provider.key_policy import content_disposition
from upload_provider.providers.base import UploadProvider
from upload_provider.schemas import FileDescriptor, StorageConfig
from upload_provider.storage_logging import log_storage_event

if TYPE_CHECKING:
    from google.cloud import storage

# A blob with chunk_size set uploads through a resumable session. Must be a multiple of 256 KiB.
RESUMABLE_CHUNK_SIZE = 5 * 1024 * 1024
PUBLIC_READ_ACL = "publicRead"


def build_gcs_client(settings: Settings) -> "storage.Client":
    """GCS client from inline service-account JSON when given, else application default credentials."""
    from google.cloud import storage

    project = settings.gcp_project_id or None
    raw = (settings.gcs_credentials or "").strip()
    if raw:
        return storage.Client.from_service_account_info(json.loads(raw), project=project)
    return storage.Client(project=project)


class GCSUploadProvider(UploadProvider):
    """Storage using Google Cloud Storage. One client per provider, injected or built from settings."""

    name = "gcs"

    def __init__(
        self,
        config: StorageConfig,
        client: Any,
        *,
        resumable_threshold_bytes: int = DEFAULT_RESUMABLE_THRESHOLD_BYTES,
        signed_url_expiry_seconds: int = DEFAULT_SIGNED_URL_EXPIRY_SECONDS,
    ) -> None:
        super().__init__(config)
        self.client = client
        self.bucket = client.bucket(config.bucket)
        self.resumable_threshold_bytes = resumable_threshold_bytes
        self.signed_url_expiry_seconds = signed_url_expiry_seconds

    @classmethod
    def from_settings(cls, settings: Settings, client: Any | None = None) -> "GCSUploadProvider":
        return cls(
            settings.storage_config(),
            client if client is not None else build_gcs_client(settings),
            resumable_threshold_bytes=settings.resumable_threshold_bytes,
            signed_url_expiry_seconds=settings.signed_url_expiry_seconds,
        )

    def _write_kwargs(self, file: FileDescriptor, public: bool) -> dict[str, Any]:
        kwargs: dict[str, Any] = {"content_type": file.mime_type}
        # Visibility goes out with the write itself; no separate make_public() call.
        if public:
            kwargs["predefined_acl"] = PUBLIC_READ_ACL
        return kwargs

    def _blob(self, key: str, file: FileDescriptor, resumable: bool):
        blob = self.bucket.blob(key)
        blob.content_disposition = content_disposition(file)
        if resumable:
            blob.chunk_size = RESUMABLE_CHUNK_SIZE
        return blob

    def upload(self, file: FileDescriptor) -> None:
        plan = self.plan(file)
        data = self._require_buffer(file)
        blob = self._blob(plan.key, file, resumable=len(data) > self.resumable_threshold_bytes)
        started = time.monotonic()
        try:
            blob.upload_from_string(data, **self._write_kwargs(file, plan.public))
        except Exception as e:
            log_storage_event("upload_failed", self.name, self.config.bucket, plan.key, error=str(e))
            raise
        file.url = plan.url
        log_storage_event(
            "uploaded",
            self.name,
            self.config.bucket,
            plan.key,
            size_bytes=len(data),
            duration_ms=int((time.monotonic() - started) * 1000),
            public=plan.public,
        )

    def upload_stream(self, file: FileDescriptor) -> None:
        plan = self.plan(file)
        stream = self._require_stream(file)
        blob = self._blob(plan.key, file, resumable=True)
        started = time.monotonic()
        try:
            blob.upload_from_file(stream, **self._write_kwargs(file, plan.public))
        except Exception as e:
            log_storage_event("upload_failed", self.name, self.config.bucket, plan.key, error=str(e))
            raise
        file.url = plan.url
        log_storage_event(
            "uploaded",
            self.name,
            self.config.bucket,
            plan.key,
            size_bytes=file.size_bytes or None,
            duration_ms=int((time.monotonic() - started) * 1000),
            public=plan.public,
        )

    def delete(self, file: FileDescriptor) -> None:
        key = self.object_key(file)
        try:
            self.bucket.blob(key).delete()
        except NotFound:
            log_storage_event("delete_missing", self.name, self.config.bucket, key)
            return
        except Exception as e:
            log_storage_event("delete_failed", self.name, self.config.bucket, key, error=str(e))
            raise
        log_storage_event("deleted", self.name, self.config.bucket, key)

    def get_signed_url(self, file: FileDescriptor, expiration_seconds: int | None = None) -> dict[str, str]:
        key = self.object_key(file)
        seconds = expiration_seconds or self.signed_url_expiry_seconds
        url = self.bucket.blob(key).generate_signed_url(
            version="v4",
            expiration=timedelta(seconds=seconds),
            method="GET",
        )
        log_storage_event("signed_url_issued", self.name, self.config.bucket, key)
        return {"url": url}
