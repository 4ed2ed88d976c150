"""Upload provider base: key/URL policy shared by all backends; subclasses do the I/O."""

from upload_provider import key_policy
from upload_provider.exceptions import InvalidFileError
from upload_provider.key_policy import UploadPlan
from upload_provider.schemas import FileDescriptor, StorageConfig


class UploadProvider:
    """Abstract upload provider. Implementations: gcs, minio, local.

    upload/upload_stream set file.url only after the backend reports success.
    delete and get_signed_url rebuild the key from the same descriptor used at upload time.
    """

    name = "base"

    def __init__(self, config: StorageConfig) -> None:
        self.config = config

    def upload(self, file: FileDescriptor) -> None:
        """Store file.buffer under the computed key and set file.url."""
        raise NotImplementedError

    def upload_stream(self, file: FileDescriptor) -> None:
        """Store file.stream under the computed key and set file.url."""
        raise NotImplementedError

    def delete(self, file: FileDescriptor) -> None:
        """Delete the object for this file. A missing object is not an error."""
        raise NotImplementedError

    def get_signed_url(self, file: FileDescriptor, expiration_seconds: int | None = None) -> dict[str, str]:
        """Return {"url": ...}, a time-limited read URL for the file."""
        raise NotImplementedError

    def check_file_size(self, file: FileDescriptor, size_limit: int) -> None:
        key_policy.check_size(file, size_limit)

    def is_private(self) -> bool:
        return key_policy.is_private(self.config)

    def object_key(self, file: FileDescriptor) -> str:
        return self.plan(file).key

    def plan(self, file: FileDescriptor) -> UploadPlan:
        return key_policy.plan_upload(self.config, file)

    @staticmethod
    def _require_buffer(file: FileDescriptor) -> bytes:
        if file.buffer is None:
            raise InvalidFileError(f"File {file.name!r} has no buffer to upload")
        return file.buffer

    @staticmethod
    def _require_stream(file: FileDescriptor):
        if file.stream is None:
            raise InvalidFileError(f"File {file.name!r} has no stream to upload")
        return file.stream
