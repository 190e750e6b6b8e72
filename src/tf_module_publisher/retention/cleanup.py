"""
Retention pass for a published module.

Lists the module folder, parses version archives, selects the versions
beyond the keep count and deletes them.
"""

import logging

from tf_module_publisher.core.models import CleanupResult
from tf_module_publisher.storage.base import ObjectStore

from .executor import execute_deletions
from .naming import collect_versioned_objects, module_folder
from .selector import select_versions_to_delete

logger = logging.getLogger(__name__)


def cleanup_old_versions(
    store: ObjectStore,
    module_name: str,
    current_version: str,
    keep_versions: int,
    dry_run: bool = False,
) -> CleanupResult:
    """
    Delete old versions of a module, keeping the most recent ones.

    The current version is never deleted and does not count towards
    ``keep_versions``.

    Args:
        store: Object store bound to the module bucket
        module_name: Module whose versions are pruned
        current_version: Version just published
        keep_versions: Prior versions to keep
        dry_run: If True, report what would be deleted without deleting

    Returns:
        CleanupResult describing kept and deleted versions
    """
    folder = module_folder(module_name)
    listing = store.list(f"{folder}/")
    candidates = collect_versioned_objects(listing, folder, module_name)
    logger.debug(
        f"Found {len(candidates)} version archive(s) among {len(listing)} object(s) in {folder}/"
    )

    decision = select_versions_to_delete(candidates, current_version, keep_versions)
    result = CleanupResult(
        module_name=module_name,
        current_version=current_version,
        keep_versions=keep_versions,
        candidates_found=decision.candidate_count,
        kept_versions=[obj.version for obj in decision.kept],
        dry_run=dry_run,
    )

    if decision.nothing_to_delete:
        message = decision.summary()
        logger.info(message)
        return result.model_copy(update={"nothing_to_do": True, "message": message})

    logger.info(decision.summary())
    deleted_keys = execute_deletions(store, decision, dry_run=dry_run)

    if dry_run:
        message = f"Dry run: {len(deleted_keys)} old version(s) would be deleted"
    else:
        message = (
            f"Successfully cleaned up old versions, keeping the {keep_versions} most recent."
        )
    logger.info(message)

    return result.model_copy(
        update={
            "deleted_versions": [obj.version for obj in decision.to_delete],
            "deleted_keys": deleted_keys,
            "message": message,
        }
    )
