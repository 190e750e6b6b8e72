"""
Publish pipeline.

Runs one publish end to end: archive, digest, upload and verify, then
the optional retention pass. Any failure aborts the remaining steps, so
no retention scan runs after a failed or unverified upload.
"""

import logging
from pathlib import Path

from tf_module_publisher.bundle import calculate_file_hash, create_zip_archive
from tf_module_publisher.core.config import PublishOptions
from tf_module_publisher.core.exceptions import ConfigurationError
from tf_module_publisher.core.models import PublishResult
from tf_module_publisher.retention.cleanup import cleanup_old_versions
from tf_module_publisher.storage.base import ObjectStore

from .upload import UploadCoordinator

logger = logging.getLogger(__name__)


def publish_module(
    options: PublishOptions,
    store: ObjectStore,
    work_dir: Path,
    dry_run_cleanup: bool = False,
) -> PublishResult:
    """
    Publish a module version and prune old versions if requested.

    Args:
        options: Validated publish options
        store: Object store bound to ``options.bucket_name``
        work_dir: Directory for the temporary archive
        dry_run_cleanup: Report old versions instead of deleting them

    Returns:
        PublishResult with the module URL and cleanup outcome

    Raises:
        ConfigurationError: If ``work_dir`` is the module directory itself
        ArchiveError: If the module cannot be packaged
        StorageOperationError: If a store call fails
        UploadVerificationError: If the upload cannot be verified
        RetentionError: If deleting an old version fails
    """
    if work_dir.resolve() == options.module_path.resolve():
        raise ConfigurationError(
            f"Work directory {work_dir} must not be the module directory",
            field="work_dir",
        )

    archive_path = work_dir / options.archive_name

    try:
        logger.info(
            f"Creating zip file for module {options.module_name} v{options.module_version}..."
        )
        create_zip_archive(options.module_path, archive_path)

        file_hash = calculate_file_hash(archive_path)
        logger.info(f"File integrity hash (SHA-256): {file_hash}")

        logger.info(f"Uploading {options.archive_name} to GCS bucket {options.bucket_name}...")
        upload = UploadCoordinator(store).upload(
            archive_path,
            options.destination_key,
            file_hash,
        )
    finally:
        archive_path.unlink(missing_ok=True)

    cleanup = None
    if options.delete_old_versions:
        cleanup = cleanup_old_versions(
            store,
            options.module_name,
            options.module_version,
            options.keep_versions,
            dry_run=dry_run_cleanup,
        )

    logger.info(f"Successfully published module to {upload.module_url}")
    return PublishResult(
        module_url=upload.module_url,
        version=options.module_version,
        upload=upload,
        cleanup=cleanup,
    )
