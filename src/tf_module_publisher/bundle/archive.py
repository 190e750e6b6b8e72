"""
Module archive creation.

Packages a module directory into a zip file, leaving out version-control
and OS metadata files.
"""

import logging
import zipfile
from collections.abc import Iterator
from pathlib import Path

from tf_module_publisher.core.exceptions import ArchiveError

logger = logging.getLogger(__name__)

EXCLUDED_NAMES = frozenset({".DS_Store"})
EXCLUDED_PREFIXES = (".git",)


def _is_excluded(relative: Path) -> bool:
    for part in relative.parts:
        if part in EXCLUDED_NAMES or part.startswith(EXCLUDED_PREFIXES):
            return True
    return False


def iter_module_files(source_dir: Path, skip_dir: Path | None = None) -> Iterator[Path]:
    """
    Yield the files of ``source_dir`` to archive, sorted, relative to it.

    ``skip_dir`` is a subdirectory of ``source_dir`` left out entirely.
    """
    for candidate in sorted(p for p in source_dir.rglob("*") if p.is_file()):
        relative = candidate.relative_to(source_dir)
        if _is_excluded(relative):
            continue
        if skip_dir is not None and relative.is_relative_to(skip_dir):
            continue
        yield relative


def _work_dir_inside(source_dir: Path, output_path: Path) -> Path | None:
    """Return the output directory relative to ``source_dir`` if it lies inside it."""
    source = source_dir.resolve()
    work_dir = output_path.parent.resolve()
    if work_dir == source:
        return None
    if work_dir.is_relative_to(source):
        return work_dir.relative_to(source)
    return None


def create_zip_archive(source_dir: Path, output_path: Path) -> Path:
    """
    Create a zip archive of a module directory.

    Args:
        source_dir: Module directory to package
        output_path: Where the archive is written; replaced if present

    Returns:
        Path to the created archive

    Raises:
        ArchiveError: If the source is missing, or the archive cannot be
            written or is not present afterwards
    """
    if not source_dir.is_dir():
        raise ArchiveError(
            f"Source path {source_dir} does not exist",
            source_path=str(source_dir),
        )

    output_path.parent.mkdir(parents=True, exist_ok=True)
    if output_path.exists():
        output_path.unlink()

    # The work dir also holds staged credentials
    skip_dir = _work_dir_inside(source_dir, output_path)
    output = output_path.resolve()

    file_count = 0
    try:
        with zipfile.ZipFile(output_path, "w", compression=zipfile.ZIP_DEFLATED) as zf:
            for relative in iter_module_files(source_dir, skip_dir):
                if (source_dir / relative).resolve() == output:
                    continue
                zf.write(source_dir / relative, relative.as_posix())
                file_count += 1
    except (OSError, zipfile.BadZipFile) as e:
        raise ArchiveError(
            f"Failed to create zip file at {output_path}: {e}",
            source_path=str(source_dir),
            output_path=str(output_path),
        ) from e

    if not output_path.is_file():
        raise ArchiveError(
            f"Failed to create zip file at {output_path}",
            source_path=str(source_dir),
            output_path=str(output_path),
        )

    logger.info(f"Created {output_path.name} with {file_count} file(s)")
    return output_path
