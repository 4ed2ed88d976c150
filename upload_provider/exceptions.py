"""Errors raised by the upload provider. Storage client errors are not wrapped."""


class UploadProviderError(Exception):
    """Base error for the upload provider."""


class SizeLimitExceeded(UploadProviderError):
    """File is larger than the caller-supplied limit. Not retried."""

    def __init__(self, size_bytes: int, limit_bytes: int) -> None:
        super().__init__(f"File size exceeds the limit of {limit_bytes} bytes")
        self.size_bytes = size_bytes
        self.limit_bytes = limit_bytes


class InvalidFileError(UploadProviderError):
    """File descriptor cannot be stored as given (no hash, no content, bad path)."""
