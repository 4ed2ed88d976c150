"""
Object key and URL policy. Pure functions: no network, no filesystem.

Keys are rebuilt from the same descriptor at delete/sign time, so the key must depend only on
(base_path, relative_path, hash, extension). Nothing time-based goes into it.
"""

from typing import NamedTuple

from upload_provider.exceptions import InvalidFileError, SizeLimitExceeded
from upload_provider.schemas import FileDescriptor, StorageConfig


class UploadPlan(NamedTuple):
    """Key, URL and per-object public flag for one write, decided before the write is issued."""

    key: str
    url: str
    public: bool


def compute_key(config: StorageConfig, file: FileDescriptor) -> str:
    """Return base_path/relative_path/hash+extension, each prefix followed by exactly one '/' when non-empty."""
    base = config.base_path.strip("/")
    relative = (file.relative_path or "").strip("/")
    prefix = f"{base}/" if base else ""
    if relative:
        prefix += f"{relative}/"
    return f"{prefix}{file.hash}{file.extension or ''}"


def decide_visibility_flag(config: StorageConfig) -> bool:
    """True when the write request must carry a per-object public flag. Never under uniform access."""
    if config.use_uniform_access:
        return False
    return config.is_public


def resolve_url(config: StorageConfig, key: str) -> str:
    """URL assigned to the file after upload: public endpoint, then base_url, then a root-relative path."""
    if config.is_public:
        return f"{config.public_host}/{config.bucket}/{key}"
    if config.base_url:
        return f"{config.base_url}/{key}"
    return f"/{key}"


def check_size(file: FileDescriptor, limit_bytes: int) -> None:
    if file.size_bytes > limit_bytes:
        raise SizeLimitExceeded(file.size_bytes, limit_bytes)


def is_private(config: StorageConfig) -> bool:
    """Private files need signed URLs to be read."""
    return not config.is_public


def content_disposition(file: FileDescriptor) -> str:
    # quoted-string: backslash and double quote must be escaped
    name = file.name.replace("\\", "\\\\").replace('"', '\\"')
    return f'inline; filename="{name}"'


def plan_upload(config: StorageConfig, file: FileDescriptor) -> UploadPlan:
    """Compute the (key, url, public) triple for a write. Raises InvalidFileError when the file has no hash.

    The URL reflects the configured visibility, not what the bucket actually enforces: with
    is_public and uniform access, the flag is suppressed and bucket IAM decides reachability.
    """
    if not (file.hash and file.hash.strip()):
        raise InvalidFileError(f"File {file.name!r} has no hash; cannot build an object key")
    key = compute_key(config, file)
    return UploadPlan(key=key, url=resolve_url(config, key), public=decide_visibility_flag(config))
