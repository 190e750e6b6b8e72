"""
Google Cloud Storage object store.

Wraps ``google-cloud-storage`` behind the ObjectStore interface. Client
library errors surface as StorageOperationError with the failing
operation and key attached; nothing is retried here.
"""

import logging
from pathlib import Path

from google.api_core import exceptions as gcs_exceptions
from google.auth import exceptions as auth_exceptions
from google.cloud import storage

from tf_module_publisher.core.exceptions import StorageOperationError
from tf_module_publisher.core.models import RemoteObject

from .base import ObjectStore

logger = logging.getLogger(__name__)

_CLIENT_ERRORS = (gcs_exceptions.GoogleAPIError, auth_exceptions.GoogleAuthError)


class GCSObjectStore(ObjectStore):
    """
    Object store backed by a Google Cloud Storage bucket.

    Deletes are conditioned on the listed object generation so a delete
    never removes an object that was replaced after the listing.
    """

    store_type = "gcs"

    def __init__(self, bucket_name: str, client: storage.Client):
        """
        Initialize the GCS store.

        Args:
            bucket_name: Target bucket
            client: Authenticated storage client
        """
        super().__init__(bucket_name)
        self._client = client
        self._bucket = client.bucket(bucket_name)

    @classmethod
    def from_credentials_file(cls, bucket_name: str, credentials_path: Path) -> "GCSObjectStore":
        """
        Create a store authenticated with a service account key file.

        Raises:
            StorageOperationError: If the key file cannot be used
        """
        try:
            client = storage.Client.from_service_account_json(str(credentials_path))
        except (ValueError, *_CLIENT_ERRORS) as e:
            raise StorageOperationError(
                f"Failed to create storage client: {e}",
                operation="authenticate",
                bucket=bucket_name,
            ) from e
        return cls(bucket_name, client)

    @classmethod
    def from_environment(cls, bucket_name: str) -> "GCSObjectStore":
        """Create a store using application default credentials."""
        try:
            client = storage.Client()
        except _CLIENT_ERRORS as e:
            raise StorageOperationError(
                f"Failed to create storage client: {e}",
                operation="authenticate",
                bucket=bucket_name,
            ) from e
        return cls(bucket_name, client)

    def _to_remote(self, blob: storage.Blob) -> RemoteObject:
        return RemoteObject(
            name=blob.name,
            bucket=self.bucket_name,
            generation=blob.generation,
            size=blob.size,
            updated=blob.updated,
        )

    def upload(
        self,
        local_path: Path,
        key: str,
        metadata: dict[str, str],
        *,
        content_type: str = "application/octet-stream",
        cache_control: str | None = None,
    ) -> RemoteObject:
        """Upload ``local_path`` to ``key`` with a CRC32C checked, non-resumable upload."""
        blob = self._bucket.blob(key)
        blob.metadata = dict(metadata)
        if cache_control:
            blob.cache_control = cache_control

        logger.debug(f"Uploading {local_path} to gs://{self.bucket_name}/{key}")
        try:
            blob.upload_from_filename(
                str(local_path),
                content_type=content_type,
                checksum="crc32c",
            )
        except (OSError, *_CLIENT_ERRORS) as e:
            raise StorageOperationError(
                f"Upload failed: {e}",
                operation="upload",
                bucket=self.bucket_name,
                key=key,
            ) from e
        return self._to_remote(blob)

    def list(self, prefix: str) -> list[RemoteObject]:
        """List objects under ``prefix``."""
        try:
            blobs = list(self._client.list_blobs(self.bucket_name, prefix=prefix))
        except _CLIENT_ERRORS as e:
            raise StorageOperationError(
                f"Listing failed: {e}",
                operation="list",
                bucket=self.bucket_name,
                key=prefix,
            ) from e
        return [self._to_remote(blob) for blob in blobs]

    def delete(self, obj: RemoteObject) -> None:
        """Delete the object, matching its generation when known."""
        try:
            self._bucket.delete_blob(obj.name, if_generation_match=obj.generation)
        except _CLIENT_ERRORS as e:
            raise StorageOperationError(
                f"Delete failed: {e}",
                operation="delete",
                bucket=self.bucket_name,
                key=obj.name,
            ) from e

    def exists(self, key: str) -> bool:
        """Check whether ``key`` exists."""
        try:
            return self._bucket.blob(key).exists()
        except _CLIENT_ERRORS as e:
            raise StorageOperationError(
                f"Existence check failed: {e}",
                operation="exists",
                bucket=self.bucket_name,
                key=key,
            ) from e

    def make_public(self, key: str) -> None:
        """Grant allUsers read access to ``key``."""
        try:
            self._bucket.blob(key).make_public()
        except _CLIENT_ERRORS as e:
            raise StorageOperationError(
                f"Failed to make object public: {e}",
                operation="make_public",
                bucket=self.bucket_name,
                key=key,
            ) from e
