"""
Version retention.

Parses stored archive names, decides which old versions to drop and
deletes them.
"""

from .cleanup import cleanup_old_versions
from .executor import execute_deletions
from .naming import (
    collect_versioned_objects,
    module_folder,
    parse_version_key,
    version_object_key,
)
from .selector import select_versions_to_delete, sort_newest_first

__all__ = [
    # Naming
    "module_folder",
    "version_object_key",
    "parse_version_key",
    "collect_versioned_objects",
    # Selection
    "select_versions_to_delete",
    "sort_newest_first",
    # Execution
    "execute_deletions",
    "cleanup_old_versions",
]
