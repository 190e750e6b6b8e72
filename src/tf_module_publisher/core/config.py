"""
Publish configuration.

PublishOptions is built once at the entry boundary (CLI or CI inputs) and
passed explicitly into the pipeline. Nothing below this module reads the
environment.
"""

import json
import re
from pathlib import Path
from typing import Any

import semver
from pydantic import BaseModel, Field, SecretStr, ValidationError, field_validator

from tf_module_publisher.core.exceptions import ConfigurationError
from tf_module_publisher.retention.naming import module_folder, version_object_key

# GCS bucket naming rules: 3-63 chars, lowercase, numbers, hyphens, underscores, periods
BUCKET_NAME_PATTERN = re.compile(r"^[a-z0-9][a-z0-9_.-]{1,61}[a-z0-9]$")
MODULE_NAME_PATTERN = re.compile(r"^[a-zA-Z0-9_-]+$")

DEFAULT_KEEP_VERSIONS = 5


def validate_bucket_name(name: str) -> str:
    """Return ``name`` if it is a valid bucket name, raise ConfigurationError otherwise."""
    if not BUCKET_NAME_PATTERN.match(name or ""):
        raise ConfigurationError(
            f"Invalid bucket name: {name}. Must be 3-63 characters, lowercase, and can "
            "only contain letters, numbers, hyphens, underscores, and periods."
        )
    return name


def validate_module_name(name: str) -> str:
    """Return ``name`` if it is a valid module name, raise ConfigurationError otherwise."""
    if not MODULE_NAME_PATTERN.match(name or ""):
        raise ConfigurationError(
            f"Invalid module name: {name}. Only letters, numbers, hyphens, and "
            "underscores are allowed."
        )
    return name


def validate_module_version(version: str) -> str:
    """Return ``version`` if it is a strict semantic version."""
    if not semver.Version.is_valid(version or ""):
        raise ConfigurationError(
            f"Invalid module version: {version}. Must be a valid semantic version."
        )
    return version


def validate_keep_versions(keep_versions: int) -> int:
    """Return ``keep_versions`` if it is a positive integer."""
    if isinstance(keep_versions, bool) or not isinstance(keep_versions, int) or keep_versions <= 0:
        raise ConfigurationError(
            f"Invalid keep-versions value: {keep_versions}. Must be a positive integer."
        )
    return keep_versions


class PublishOptions(BaseModel):
    """Validated options for one publish run."""

    bucket_name: str = Field(description="GCS bucket that stores module archives")
    module_name: str = Field(description="Terraform module name used in keys")
    module_version: str = Field(description="Semantic version being published")
    module_path: Path = Field(default=Path("."), description="Module directory to package")
    credentials_json: SecretStr = Field(description="Service account credentials (JSON)")
    delete_old_versions: bool = Field(
        default=False, description="Prune older versions after upload"
    )
    keep_versions: int = Field(
        default=DEFAULT_KEEP_VERSIONS,
        description="Prior versions to keep when pruning; the current version is extra",
    )

    model_config = {"frozen": True}

    @field_validator("bucket_name")
    @classmethod
    def check_bucket_name(cls, v: str) -> str:
        """Enforce bucket naming rules."""
        return validate_bucket_name(v)

    @field_validator("module_name")
    @classmethod
    def check_module_name(cls, v: str) -> str:
        """Enforce module naming rules."""
        return validate_module_name(v)

    @field_validator("module_version")
    @classmethod
    def check_module_version(cls, v: str) -> str:
        """Require a strict semantic version."""
        return validate_module_version(v)

    @field_validator("module_path")
    @classmethod
    def check_module_path(cls, v: Path) -> Path:
        """Require an existing module directory."""
        if not v.is_dir():
            raise ValueError(f"Module path {v} does not exist")
        return v

    @field_validator("credentials_json")
    @classmethod
    def check_credentials(cls, v: SecretStr) -> SecretStr:
        """Require a JSON object without echoing its content."""
        try:
            payload = json.loads(v.get_secret_value())
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid Google credentials JSON: {e.msg}") from None
        if not isinstance(payload, dict):
            raise ValueError("Invalid Google credentials JSON: expected an object")
        return v

    @field_validator("keep_versions")
    @classmethod
    def check_keep_versions(cls, v: int) -> int:
        """Require a positive keep count."""
        return validate_keep_versions(v)

    @property
    def module_folder(self) -> str:
        """Folder holding every version of the module."""
        return module_folder(self.module_name)

    @property
    def archive_name(self) -> str:
        """File name of the archive for this version."""
        return f"{self.module_name}-{self.module_version}.zip"

    @property
    def destination_key(self) -> str:
        """Object key the archive is uploaded to."""
        return version_object_key(self.module_folder, self.module_name, self.module_version)


def load_options(**raw: Any) -> PublishOptions:
    """
    Build PublishOptions, converting validation failures to ConfigurationError.

    Args:
        **raw: Field values as read from the CLI or CI inputs

    Returns:
        Validated PublishOptions

    Raises:
        ConfigurationError: If any field is missing or invalid
    """
    try:
        return PublishOptions(**raw)
    except ValidationError as e:
        errors = []
        for err in e.errors():
            location = ".".join(str(part) for part in err["loc"]) or "options"
            errors.append(f"{location}: {err['msg']}")
        first = e.errors()[0]
        field = str(first["loc"][0]) if first["loc"] else None
        raise ConfigurationError(
            f"Invalid configuration: {'; '.join(errors)}",
            field=field,
            validation_errors=errors,
        ) from None
