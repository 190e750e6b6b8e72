"""
Publisher Core Module.

Provides the exception hierarchy and data types shared by every stage.
"""

__all__ = [
    # Exceptions
    "PublisherError",
    "ConfigurationError",
    "ArchiveError",
    "StorageOperationError",
    "UploadVerificationError",
    "RetentionError",
    "format_exception",
    "exit_code_for",
    # Models
    "RemoteObject",
    "VersionMatch",
    "VersionedObject",
    "RetentionDecision",
    "CleanupResult",
    "UploadResult",
    "PublishResult",
]

from tf_module_publisher.core.exceptions import (
    ArchiveError,
    ConfigurationError,
    PublisherError,
    RetentionError,
    StorageOperationError,
    UploadVerificationError,
    exit_code_for,
    format_exception,
)
from tf_module_publisher.core.models import (
    CleanupResult,
    PublishResult,
    RemoteObject,
    RetentionDecision,
    UploadResult,
    VersionedObject,
    VersionMatch,
)
