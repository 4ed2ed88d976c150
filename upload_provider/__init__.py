"""
Upload provider: delegates CMS file persistence to an object store (GCS, MinIO) or the local filesystem.
Key construction, visibility and URL resolution live in key_policy; providers forward to the client library.
"""

from upload_provider.exceptions import InvalidFileError, SizeLimitExceeded, UploadProviderError
from upload_provider.key_policy import (
    UploadPlan,
    check_size,
    compute_key,
    decide_visibility_flag,
    plan_upload,
    resolve_url,
)
from upload_provider.schemas import FileDescriptor, StorageConfig

__version__ = "0.3.0"

__all__ = [
    "__version__",
    "FileDescriptor",
    "StorageConfig",
    "UploadPlan",
    "compute_key",
    "decide_visibility_flag",
    "resolve_url",
    "check_size",
    "plan_upload",
    "UploadProviderError",
    "SizeLimitExceeded",
    "InvalidFileError",
]
