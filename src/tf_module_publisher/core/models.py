"""
Core data types for the publisher.

Lightweight descriptors (remote objects, parsed versions, retention
decisions) are dataclasses; operation results that get reported or
serialized are pydantic models.
"""

from dataclasses import dataclass, field
from datetime import datetime

import semver
from pydantic import BaseModel, Field


@dataclass(frozen=True)
class RemoteObject:
    """Descriptor of a stored object as returned by the object store."""

    name: str
    bucket: str
    generation: int | None = None
    size: int | None = None
    updated: datetime | None = None


@dataclass(frozen=True)
class VersionMatch:
    """A key recognised as a version archive of the configured module."""

    key: str
    version: str


@dataclass(frozen=True)
class VersionedObject:
    """A stored module archive together with its parsed semantic version."""

    remote: RemoteObject
    version: str
    version_info: semver.Version

    @property
    def name(self) -> str:
        """Object key of the archive."""
        return self.remote.name


@dataclass
class RetentionDecision:
    """
    Outcome of the retention selector.

    ``kept`` and ``to_delete`` are both ordered newest first. The current
    version never appears in either list: it is always retained on top of
    the ``keep_versions`` prior versions.
    """

    current_version: str
    keep_versions: int
    kept: list[VersionedObject] = field(default_factory=list)
    to_delete: list[VersionedObject] = field(default_factory=list)

    @property
    def candidate_count(self) -> int:
        """Number of prior versions considered."""
        return len(self.kept) + len(self.to_delete)

    @property
    def nothing_to_delete(self) -> bool:
        """True when the retention floor was not exceeded."""
        return not self.to_delete

    def summary(self) -> str:
        """One-line description of the decision."""
        if self.nothing_to_delete:
            return (
                f"No old versions to clean up (keeping {self.keep_versions}, "
                f"found {self.candidate_count})"
            )
        return (
            f"Cleaning up {len(self.to_delete)} old version(s), keeping the "
            f"{self.keep_versions} most recent besides {self.current_version}"
        )


class CleanupResult(BaseModel):
    """Result of a retention pass."""

    module_name: str = Field(description="Module the pass ran for")
    current_version: str = Field(description="Version being published, never deleted")
    keep_versions: int = Field(description="Prior versions retained")
    candidates_found: int = Field(default=0, description="Prior versions found in the bucket")
    kept_versions: list[str] = Field(
        default_factory=list, description="Prior versions kept, newest first"
    )
    deleted_versions: list[str] = Field(
        default_factory=list, description="Versions deleted (or planned on dry run)"
    )
    deleted_keys: list[str] = Field(
        default_factory=list, description="Object keys deleted (or planned on dry run)"
    )
    dry_run: bool = Field(default=False, description="Whether deletions were skipped")
    nothing_to_do: bool = Field(default=False, description="Whether no deletion was needed")
    message: str = Field(default="", description="Human-readable outcome")


class UploadResult(BaseModel):
    """Result of uploading a module archive."""

    bucket: str = Field(description="Destination bucket")
    key: str = Field(description="Destination object key")
    module_url: str = Field(description="gs:// URL of the archive")
    public_url: str = Field(description="Public HTTPS URL of the archive")
    sha256: str = Field(description="SHA-256 hex digest of the archive")
    generation: int | None = Field(default=None, description="Object generation if known")


class PublishResult(BaseModel):
    """Outcome of a full publish run."""

    module_url: str = Field(description="gs:// URL of the published archive")
    version: str = Field(description="Published module version")
    upload: UploadResult = Field(description="Upload details")
    cleanup: CleanupResult | None = Field(
        default=None, description="Retention pass result if old versions were pruned"
    )
