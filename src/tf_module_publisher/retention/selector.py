"""
Retention selection.

Pure decision logic: given the stored versions of a module, decide which
ones to delete. No I/O happens here.

``keep_versions`` counts prior versions only. The version being published
is never a candidate and is always retained on top of the
``keep_versions`` most recent prior versions.
"""

from collections.abc import Iterable

from tf_module_publisher.core.exceptions import ConfigurationError
from tf_module_publisher.core.models import RetentionDecision, VersionedObject


def sort_newest_first(objects: Iterable[VersionedObject]) -> list[VersionedObject]:
    """
    Order versions by semantic version precedence, newest first.

    Numeric components compare numerically and pre-releases rank below
    their release. Entries of equal precedence keep their input order.
    """
    # list.sort stays stable with reverse=True
    return sorted(objects, key=lambda obj: obj.version_info, reverse=True)


def select_versions_to_delete(
    candidates: Iterable[VersionedObject],
    current_version: str,
    keep_versions: int,
) -> RetentionDecision:
    """
    Split stored versions into kept and to-delete sets.

    Args:
        candidates: Parsed version archives found in the module folder
        current_version: Version being published; never deleted
        keep_versions: Number of most recent prior versions to retain

    Returns:
        RetentionDecision with both lists ordered newest first

    Raises:
        ConfigurationError: If keep_versions is not a positive integer
    """
    if isinstance(keep_versions, bool) or not isinstance(keep_versions, int) or keep_versions < 1:
        raise ConfigurationError(
            f"Invalid keep-versions value: {keep_versions}. Must be a positive integer.",
            field="keep_versions",
        )

    prior = [obj for obj in candidates if obj.version != current_version]
    ordered = sort_newest_first(prior)

    return RetentionDecision(
        current_version=current_version,
        keep_versions=keep_versions,
        kept=ordered[:keep_versions],
        to_delete=ordered[keep_versions:],
    )
