"""
Deletion executor for retention decisions.

Deletes are issued one at a time in the order the selector produced.
The first failure stops the pass: nothing is retried or rolled back, and
re-running the retention pass resumes where it stopped.
"""

import logging

from tf_module_publisher.core.exceptions import RetentionError, StorageOperationError
from tf_module_publisher.core.models import RetentionDecision
from tf_module_publisher.storage.base import ObjectStore

logger = logging.getLogger(__name__)


def execute_deletions(
    store: ObjectStore,
    decision: RetentionDecision,
    dry_run: bool = False,
) -> list[str]:
    """
    Delete every object the decision marks for deletion.

    Args:
        store: Object store holding the archives
        decision: Output of the retention selector
        dry_run: If True, log the planned deletions and delete nothing

    Returns:
        Keys deleted (or that would be deleted on a dry run), in order

    Raises:
        RetentionError: On the first failed delete, with the keys deleted so far
    """
    deleted: list[str] = []

    for obj in decision.to_delete:
        if dry_run:
            logger.info(f"[dry-run] Would delete old version {obj.version}: {obj.name}")
            deleted.append(obj.name)
            continue

        logger.info(f"Deleting old version {obj.version}: {obj.name}")
        try:
            store.delete(obj.remote)
        except StorageOperationError as e:
            raise RetentionError(
                f"Failed to delete old version {obj.version}: {e.message}",
                key=obj.name,
                deleted=deleted,
            ) from e
        deleted.append(obj.name)
        logger.info(f"Deleted old version {obj.version}")

    return deleted
