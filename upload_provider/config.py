"""
Provider configuration loaded from environment variables.
Use .env file or export variables; see .env.example for the keys.
The storage backend is selectable (gcs | minio | local); only the selected backend's keys are required.
"""

from functools import lru_cache

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from upload_provider.schemas import StorageConfig

DEFAULT_RESUMABLE_THRESHOLD_BYTES = 5 * 1024 * 1024
DEFAULT_SIGNED_URL_EXPIRY_SECONDS = 15 * 60

PROVIDERS = ("gcs", "minio", "local")


class Settings(BaseSettings):
    """Environment-based settings. Validates on load."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    storage_provider: str = "gcs"  # gcs | minio | local

    # Google Cloud Storage (required when storage_provider=gcs)
    gcs_bucket_name: str = ""
    gcp_project_id: str = ""
    # Optional inline service-account JSON; application default credentials otherwise
    gcs_credentials: str = ""

    # Visibility and URL policy (all providers)
    public_files: bool = False
    uniform_bucket_access: bool = True  # most modern buckets use uniform bucket-level access
    base_url: str = ""
    base_path: str = ""

    resumable_threshold_bytes: int = DEFAULT_RESUMABLE_THRESHOLD_BYTES
    signed_url_expiry_seconds: int = DEFAULT_SIGNED_URL_EXPIRY_SECONDS

    # Local storage (used when storage_provider=local)
    local_storage_path: str = "data/storage"

    # MinIO (required when storage_provider=minio)
    minio_endpoint: str = ""  # e.g. localhost:9000
    minio_access_key: str = ""
    minio_secret_key: str = ""
    minio_bucket: str = ""
    minio_secure: bool = False  # True for HTTPS

    log_level: str = "INFO"

    @field_validator("storage_provider")
    @classmethod
    def known_provider(cls, v: str) -> str:
        name = (v or "gcs").strip().lower()
        if name not in PROVIDERS:
            raise ValueError(f"STORAGE_PROVIDER must be one of {', '.join(PROVIDERS)}; got {v!r}")
        return name

    @field_validator("gcs_bucket_name", "gcp_project_id", "base_url", "base_path", "minio_endpoint", "minio_bucket")
    @classmethod
    def strip_optional(cls, v: str) -> str:
        return (v or "").strip()

    @field_validator("resumable_threshold_bytes", "signed_url_expiry_seconds")
    @classmethod
    def positive(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("must be a positive integer")
        return v

    @model_validator(mode="after")
    def require_provider_specific_settings(self) -> "Settings":
        sp = self.storage_provider

        if sp == "gcs" and not self.gcs_bucket_name:
            raise ValueError("GCS_BUCKET_NAME is required when STORAGE_PROVIDER=gcs")

        if sp == "minio":
            for name, val in [
                ("MINIO_ENDPOINT", self.minio_endpoint),
                ("MINIO_ACCESS_KEY", self.minio_access_key),
                ("MINIO_SECRET_KEY", self.minio_secret_key),
                ("MINIO_BUCKET", self.minio_bucket),
            ]:
                if not (val and str(val).strip()):
                    raise ValueError(f"{name} is required when STORAGE_PROVIDER=minio")

        if sp == "local" and not (self.local_storage_path and self.local_storage_path.strip()):
            raise ValueError("LOCAL_STORAGE_PATH must be set when STORAGE_PROVIDER=local")

        return self

    @property
    def bucket_name(self) -> str:
        """Bucket for the selected provider ('local' for the filesystem backend)."""
        if self.storage_provider == "minio":
            return self.minio_bucket
        if self.storage_provider == "local":
            return "local"
        return self.gcs_bucket_name

    def storage_config(self) -> StorageConfig:
        """Immutable key/URL policy configuration for the selected provider."""
        return StorageConfig(
            bucket=self.bucket_name,
            is_public=self.public_files,
            use_uniform_access=self.uniform_bucket_access,
            base_url=self.base_url or None,
            base_path=self.base_path,
        )


@lru_cache
def get_settings() -> Settings:
    """Cached settings instance (env read once)."""
    return Settings()
