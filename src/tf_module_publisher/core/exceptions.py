"""
Publisher Exception Hierarchy.

Defines all custom exceptions raised while publishing a module.
Every error carries structured details and the process exit code the
CLI reports for it.
"""

from typing import Any


class PublisherError(Exception):
    """
    Base exception for failures while publishing a module version.

    Each subclass names the pipeline stage that failed and sets the
    process exit code the CLI reports for it; uncategorised failures
    exit with 1.
    """

    exit_code: int = 1

    def __init__(self, message: str, *, details: dict[str, Any] | None = None):
        """
        Initialize a PublisherError.

        Args:
            message: Human-readable error message
            details: Optional structured data for debugging
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        """Return string representation with details."""
        base = self.message
        if self.details:
            details_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{base} ({details_str})"
        return base

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary for serialization."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "details": self.details,
            "exit_code": self.exit_code,
        }


class ConfigurationError(PublisherError, ValueError):
    """
    Errors in configuration loading or validation.

    Subclasses ValueError so the validators can run inside pydantic
    field validators. Raised before any I/O when:
    - Bucket or module names break the naming rules
    - The module version is not a semantic version
    - The keep-versions count is not a positive integer
    - Required inputs are missing or the credentials are not valid JSON
    """

    exit_code = 2

    def __init__(
        self,
        message: str,
        *,
        field: str | None = None,
        input_name: str | None = None,
        validation_errors: list[str] | None = None,
        details: dict[str, Any] | None = None,
    ):
        """
        Initialize a ConfigurationError.

        Args:
            message: Human-readable error message
            field: Option field that failed validation
            input_name: CI input name if applicable
            validation_errors: List of specific validation failures
            details: Optional structured data for debugging
        """
        details = details or {}
        if field:
            details["field"] = field
        if input_name:
            details["input"] = input_name

        super().__init__(message, details=details)
        self.field = field
        self.input_name = input_name
        self.validation_errors = validation_errors or []


class ArchiveError(PublisherError):
    """Raised when the module directory cannot be packaged."""

    exit_code = 3

    def __init__(
        self,
        message: str,
        *,
        source_path: str | None = None,
        output_path: str | None = None,
    ):
        details = {}
        if source_path:
            details["source_path"] = source_path
        if output_path:
            details["output_path"] = output_path
        super().__init__(message, details=details)
        self.source_path = source_path
        self.output_path = output_path


class StorageOperationError(PublisherError):
    """
    Errors from object store interactions.

    Raised when an upload, listing, existence check, ACL change or
    deletion fails at the transport or API level. Never retried.
    """

    exit_code = 4

    def __init__(
        self,
        message: str,
        *,
        operation: str | None = None,
        bucket: str | None = None,
        key: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        """
        Initialize a StorageOperationError.

        Args:
            message: Human-readable error message
            operation: Store operation being performed
            bucket: Bucket involved
            key: Object key involved
            details: Optional structured data for debugging
        """
        details = details or {}
        if operation:
            details["operation"] = operation
        if bucket:
            details["bucket"] = bucket
        if key:
            details["key"] = key

        super().__init__(message, details=details)
        self.operation = operation
        self.bucket = bucket
        self.key = key


class UploadVerificationError(PublisherError):
    """
    Raised when an uploaded object is not found right after the upload.

    Distinct from StorageOperationError: the transport succeeded but
    the store does not report the object, which is a consistency problem.
    """

    exit_code = 5

    def __init__(
        self,
        message: str = "Upload verification failed",
        *,
        bucket: str | None = None,
        key: str | None = None,
    ):
        details = {}
        if bucket:
            details["bucket"] = bucket
        if key:
            details["key"] = key
        super().__init__(message, details=details)
        self.bucket = bucket
        self.key = key


class RetentionError(PublisherError):
    """
    Raised when deleting an old version fails.

    Deletion stops at the first failure; ``deleted`` lists the keys
    removed before it so the pass can be resumed by re-running.
    """

    exit_code = 6

    def __init__(
        self,
        message: str,
        *,
        key: str | None = None,
        deleted: list[str] | None = None,
    ):
        details: dict[str, Any] = {}
        if key:
            details["key"] = key
        details["deleted_before_failure"] = len(deleted or [])
        super().__init__(message, details=details)
        self.key = key
        self.deleted = deleted or []


def format_exception(error: Exception) -> str:
    """
    Format an exception for user-friendly display.

    Args:
        error: The exception to format

    Returns:
        Formatted error message string
    """
    if isinstance(error, PublisherError):
        return str(error)
    return f"{error.__class__.__name__}: {error}"


def exit_code_for(error: Exception) -> int:
    """Return the process exit code for an error."""
    if isinstance(error, PublisherError):
        return error.exit_code
    return 1
