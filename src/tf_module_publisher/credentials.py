"""
Service account credential staging.

The storage client reads credentials from a file, so the JSON payload is
written to a temporary file for the duration of the run and removed on
every exit path.
"""

import json
import logging
import os
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from tf_module_publisher.core.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

CREDENTIALS_FILENAME = "google-credentials.json"


@contextmanager
def staged_credentials(payload: str, directory: Path) -> Iterator[Path]:
    """
    Write credentials to ``directory`` and remove them on exit.

    Args:
        payload: Service account credentials JSON
        directory: Directory for the temporary file

    Yields:
        Path to the credentials file

    Raises:
        ConfigurationError: If the payload is not a JSON object
    """
    try:
        parsed = json.loads(payload)
    except json.JSONDecodeError as e:
        raise ConfigurationError(
            f"Invalid Google credentials JSON: {e.msg}",
            input_name="google-credentials",
        ) from None
    if not isinstance(parsed, dict):
        raise ConfigurationError(
            "Invalid Google credentials JSON: expected an object",
            input_name="google-credentials",
        )

    directory.mkdir(parents=True, exist_ok=True)
    credentials_path = directory / CREDENTIALS_FILENAME
    fd = os.open(credentials_path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(payload)
        logger.info(f"Created temporary credentials file at {credentials_path}")
        yield credentials_path
    finally:
        credentials_path.unlink(missing_ok=True)
        logger.debug(f"Removed temporary credentials file {credentials_path}")
