"""File digests for upload integrity metadata."""

import hashlib
from pathlib import Path

CHUNK_SIZE = 1024 * 1024


def calculate_file_hash(file_path: Path) -> str:
    """Compute the SHA-256 hex digest of a file, reading it in chunks."""
    hasher = hashlib.sha256()
    with open(file_path, "rb") as f:
        for chunk in iter(lambda: f.read(CHUNK_SIZE), b""):
            hasher.update(chunk)
    return hasher.hexdigest()
