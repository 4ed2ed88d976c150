"""Local filesystem upload provider: no cloud. Files under a base directory, served by the host app."""

from __future__ import annotations

import os
import shutil
from pathlib import Path

from upload_provider.config import Settings
from upload_provider.exceptions import InvalidFileError
from upload_provider.providers.base import UploadProvider
from upload_provider.schemas import FileDescriptor, StorageConfig
from upload_provider.storage_logging import log_storage_event


def _base_dir(settings: Settings) -> Path:
    raw = (settings.local_storage_path or "").strip() or "data/storage"
    p = Path(raw)
    if not p.is_absolute():
        p = Path.cwd() / p
    return p


class LocalUploadProvider(UploadProvider):
    """Storage on the local filesystem. Never public: URLs are base_url/key or /key."""

    name = "local"

    def __init__(self, config: StorageConfig, base_dir: Path) -> None:
        if config.is_public:
            config = config.model_copy(update={"is_public": False})
        super().__init__(config)
        self.base_dir = Path(base_dir).resolve()

    @classmethod
    def from_settings(cls, settings: Settings) -> "LocalUploadProvider":
        return cls(settings.storage_config(), _base_dir(settings))

    def _path(self, key: str) -> Path:
        full = (self.base_dir / key).resolve()
        if not full.is_relative_to(self.base_dir):
            raise InvalidFileError(f"Object key {key!r} resolves outside {self.base_dir}")
        return full

    @staticmethod
    def _write_atomic(full: Path, write) -> None:
        """Write through a sibling .part file and rename it onto full, so a failed write leaves nothing at the key."""
        full.parent.mkdir(parents=True, exist_ok=True)
        tmp = full.with_name(full.name + ".part")
        try:
            with tmp.open("wb") as out:
                write(out)
            os.replace(tmp, full)
        finally:
            tmp.unlink(missing_ok=True)

    def upload(self, file: FileDescriptor) -> None:
        plan = self.plan(file)
        data = self._require_buffer(file)
        self._write_atomic(self._path(plan.key), lambda out: out.write(data))
        file.url = plan.url
        log_storage_event("uploaded", self.name, self.config.bucket, plan.key, size_bytes=len(data))

    def upload_stream(self, file: FileDescriptor) -> None:
        plan = self.plan(file)
        stream = self._require_stream(file)
        full = self._path(plan.key)
        self._write_atomic(full, lambda out: shutil.copyfileobj(stream, out))
        file.url = plan.url
        log_storage_event("uploaded", self.name, self.config.bucket, plan.key, size_bytes=full.stat().st_size)

    def delete(self, file: FileDescriptor) -> None:
        key = self.object_key(file)
        full = self._path(key)
        if not full.exists():
            log_storage_event("delete_missing", self.name, self.config.bucket, key)
            return
        full.unlink()
        log_storage_event("deleted", self.name, self.config.bucket, key)

    def get_signed_url(self, file: FileDescriptor, expiration_seconds: int | None = None) -> dict[str, str]:
        """Local: no real signing. Returns the same URL upload assigns; the host app serves it."""
        return {"url": self.plan(file).url}
