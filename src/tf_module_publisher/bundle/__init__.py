"""
Module bundling.

Archive creation and content digests for module uploads.
"""

from .archive import create_zip_archive, iter_module_files
from .hashing import calculate_file_hash

__all__ = [
    "calculate_file_hash",
    "create_zip_archive",
    "iter_module_files",
]
