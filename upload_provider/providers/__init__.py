"""Upload providers: gcs (Google Cloud Storage), minio (S3-compatible), local (filesystem)."""

from upload_provider.config import Settings, get_settings
from upload_provider.providers.base import UploadProvider
from upload_provider.providers.gcs import GCSUploadProvider
from upload_provider.providers.local import LocalUploadProvider
from upload_provider.providers.minio import MinIOUploadProvider
from upload_provider.storage_logging import configure_logging

_PROVIDER: UploadProvider | None = None


def build_upload_provider(settings: Settings) -> UploadProvider:
    """Build the provider selected by settings.storage_provider, with its own storage client."""
    name = settings.storage_provider
    if name == "local":
        return LocalUploadProvider.from_settings(settings)
    if name == "minio":
        return MinIOUploadProvider.from_settings(settings)
    return GCSUploadProvider.from_settings(settings)


def get_upload_provider() -> UploadProvider:
    """Return the configured upload provider (gcs | minio | local). Built once per process."""
    global _PROVIDER
    if _PROVIDER is not None:
        return _PROVIDER
    settings = get_settings()
    configure_logging(settings.log_level)
    _PROVIDER = build_upload_provider(settings)
    return _PROVIDER


__all__ = [
    "UploadProvider",
    "build_upload_provider",
    "get_upload_provider",
    "GCSUploadProvider",
    "LocalUploadProvider",
    "MinIOUploadProvider",
]
