"""File descriptor and storage configuration models."""

from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

GCS_PUBLIC_HOST = "https://storage.googleapis.com"


class FileDescriptor(BaseModel):
    """File handed over by the CMS. Read-only here, except `url` which is set after a successful upload.
    Accepts the host's field names (ext, path, mime, size) as well as the long ones."""

    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(..., description="Original filename")
    hash: str = Field(default="", description="Content-derived identifier, stable for the same logical file")
    extension: str = Field(default="", validation_alias=AliasChoices("extension", "ext"))
    relative_path: str | None = Field(default=None, validation_alias=AliasChoices("relative_path", "path"))
    mime_type: str = Field(default="application/octet-stream", validation_alias=AliasChoices("mime_type", "mime"))
    size_bytes: int = Field(default=0, ge=0, validation_alias=AliasChoices("size_bytes", "size"))
    buffer: bytes | None = Field(default=None, repr=False)
    stream: Any = Field(default=None, repr=False, description="Binary file-like object for streamed uploads")
    url: str | None = None


class StorageConfig(BaseModel):
    """Immutable provider configuration, resolved once at startup."""

    model_config = ConfigDict(frozen=True)

    bucket: str = Field(..., description="Bucket identifier")
    is_public: bool = False
    # Bucket enforces one access policy; per-object ACLs must not be sent.
    use_uniform_access: bool = True
    base_url: str | None = Field(default=None, description="Externally visible root for non-public files")
    base_path: str = Field(default="", description="Object key prefix")
    public_host: str = Field(default=GCS_PUBLIC_HOST, description="Canonical public endpoint of the store")

    @field_validator("base_path")
    @classmethod
    def strip_base_path(cls, v: str) -> str:
        return (v or "").strip().strip("/")

    @field_validator("base_url")
    @classmethod
    def strip_base_url(cls, v: str | None) -> str | None:
        if v is None:
            return None
        return v.strip().rstrip("/") or None

    @field_validator("public_host")
    @classmethod
    def strip_public_host(cls, v: str) -> str:
        return (v or "").strip().rstrip("/") or GCS_PUBLIC_HOST
