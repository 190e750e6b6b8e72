"""
Base object store interface.

An ObjectStore is bound to one bucket. Implementations translate their
client library failures into StorageOperationError.
"""

from abc import ABC, abstractmethod
from pathlib import Path

from tf_module_publisher.core.models import RemoteObject

PUBLIC_HOST = "storage.googleapis.com"


class ObjectStore(ABC):
    """
    Abstract base class for bucket-scoped object stores.

    All stores must implement:
    - upload(): Store a local file under a key with metadata
    - list(): Enumerate objects under a prefix
    - delete(): Remove a previously listed object
    - exists(): Check whether a key is present
    - make_public(): Grant anonymous read access to a key
    """

    store_type: str = "base"

    def __init__(self, bucket_name: str):
        """
        Initialize the store.

        Args:
            bucket_name: Bucket every operation targets
        """
        self.bucket_name = bucket_name

    @abstractmethod
    def upload(
        self,
        local_path: Path,
        key: str,
        metadata: dict[str, str],
        *,
        content_type: str = "application/octet-stream",
        cache_control: str | None = None,
    ) -> RemoteObject:
        """
        Upload a local file.

        Args:
            local_path: File to upload
            key: Destination object key
            metadata: Custom metadata fields attached to the object
            content_type: MIME type of the object
            cache_control: Cache-Control header value

        Returns:
            RemoteObject describing the stored object
        """

    @abstractmethod
    def list(self, prefix: str) -> list[RemoteObject]:
        """Return every object whose key starts with ``prefix``."""

    @abstractmethod
    def delete(self, obj: RemoteObject) -> None:
        """Delete the listed object."""

    @abstractmethod
    def exists(self, key: str) -> bool:
        """Return True if ``key`` is present in the bucket."""

    @abstractmethod
    def make_public(self, key: str) -> None:
        """Make ``key`` readable without credentials."""

    def public_url(self, key: str) -> str:
        """Stable public HTTPS URL of ``key``."""
        return f"https://{PUBLIC_HOST}/{self.bucket_name}/{key}"

    def object_url(self, key: str) -> str:
        """gs:// URL of ``key``."""
        return f"gs://{self.bucket_name}/{key}"
