"""
Object naming for module archives.

Archives live at ``modules/<module>/<module>-<version>.zip``. This module
builds those keys and recognises them again when scanning a bucket listing.
"""

import logging
import re
from collections.abc import Iterable

import semver

from tf_module_publisher.core.models import RemoteObject, VersionedObject, VersionMatch

logger = logging.getLogger(__name__)

MODULES_ROOT = "modules"
ARCHIVE_SUFFIX = ".zip"

# Structural match only; strict semver parsing happens afterwards.
_VERSION_SEGMENT = r"(?P<version>[0-9A-Za-z.+-]+)"


def module_folder(module_name: str) -> str:
    """Return the folder that holds every version of ``module_name``."""
    return f"{MODULES_ROOT}/{module_name}"


def version_object_key(folder: str, module_name: str, version: str) -> str:
    """Return the object key of ``version`` of ``module_name`` inside ``folder``."""
    return f"{folder}/{module_name}-{version}{ARCHIVE_SUFFIX}"


def _key_pattern(folder: str, module_name: str) -> re.Pattern[str]:
    return re.compile(
        rf"^{re.escape(folder)}/{re.escape(module_name)}-{_VERSION_SEGMENT}"
        rf"{re.escape(ARCHIVE_SUFFIX)}$"
    )


def parse_version_key(key: str, folder: str, module_name: str) -> VersionMatch | None:
    """
    Recognise ``key`` as a version archive of ``module_name``.

    The key must be exactly ``<folder>/<module_name>-<version>.zip`` with no
    extra path segments. ``None`` means the object is unrelated to this
    module and is not an error.

    Args:
        key: Object key from a bucket listing
        folder: Module folder prefix, without trailing slash
        module_name: Configured module name

    Returns:
        VersionMatch with the raw version string, or None
    """
    match = _key_pattern(folder, module_name).match(key)
    if match is None:
        return None
    return VersionMatch(key=key, version=match.group("version"))


def collect_versioned_objects(
    objects: Iterable[RemoteObject],
    folder: str,
    module_name: str,
) -> list[VersionedObject]:
    """
    Keep the listed objects that are well-formed version archives of the module.

    Keys that do not match the naming pattern, or whose version segment is not
    a strict semantic version (legacy or malformed names), are skipped.
    Listing order is preserved.
    """
    pattern = _key_pattern(folder, module_name)
    versioned: list[VersionedObject] = []
    for obj in objects:
        match = pattern.match(obj.name)
        if match is None:
            continue
        version = match.group("version")
        try:
            version_info = semver.Version.parse(version)
        except ValueError:
            logger.debug(f"Skipping {obj.name}: {version!r} is not a semantic version")
            continue
        versioned.append(VersionedObject(remote=obj, version=version, version_info=version_info))
    return versioned
