"""
Upload coordination.

Uploads a module archive with integrity metadata, verifies the object is
present afterwards and makes it publicly readable.
"""

import logging
from collections.abc import Callable
from datetime import datetime, timezone
from pathlib import Path

from tf_module_publisher.core.exceptions import UploadVerificationError
from tf_module_publisher.core.models import UploadResult
from tf_module_publisher.storage.base import ObjectStore

logger = logging.getLogger(__name__)

CONTENT_TYPE = "application/zip"
CACHE_CONTROL = "public, max-age=31536000"
UPLOADED_BY = "terraform-module-gcs-publisher"


def build_upload_metadata(
    file_hash: str,
    clock: Callable[[], datetime] | None = None,
) -> dict[str, str]:
    """Custom metadata fields attached to every uploaded archive."""
    now = (clock or (lambda: datetime.now(timezone.utc)))()
    return {
        "sha256Hash": file_hash,
        "uploadedBy": UPLOADED_BY,
        "uploadTimestamp": now.isoformat(),
    }


class UploadCoordinator:
    """
    Upload stage of a publish run.

    An upload only counts as done once the store reports the object;
    a successful upload call alone is not accepted as proof.
    """

    def __init__(
        self,
        store: ObjectStore,
        clock: Callable[[], datetime] | None = None,
    ):
        """
        Initialize the coordinator.

        Args:
            store: Object store bound to the destination bucket
            clock: Source of the upload timestamp (UTC now by default)
        """
        self._store = store
        self._clock = clock

    def upload(self, local_path: Path, destination: str, file_hash: str) -> UploadResult:
        """
        Upload an archive, verify it and make it public.

        Args:
            local_path: Archive to upload
            destination: Destination object key
            file_hash: SHA-256 hex digest of the archive

        Returns:
            UploadResult with the gs:// and public URLs

        Raises:
            StorageOperationError: If any store call fails
            UploadVerificationError: If the object is missing after upload
        """
        logger.info(f"Uploading to: {destination}")
        remote = self._store.upload(
            local_path,
            destination,
            build_upload_metadata(file_hash, self._clock),
            content_type=CONTENT_TYPE,
            cache_control=CACHE_CONTROL,
        )

        if not self._store.exists(destination):
            raise UploadVerificationError(
                f"Upload verification failed: File {destination} not found in bucket after upload",
                bucket=self._store.bucket_name,
                key=destination,
            )

        self._store.make_public(destination)
        public_url = self._store.public_url(destination)
        logger.info(f"Upload verified; public URL {public_url}")

        return UploadResult(
            bucket=self._store.bucket_name,
            key=destination,
            module_url=self._store.object_url(destination),
            public_url=public_url,
            sha256=file_hash,
            generation=remote.generation,
        )
