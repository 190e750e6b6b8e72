"""Pytest configuration and fixtures."""

import tempfile
from pathlib import Path
from typing import Generator

import pytest
import semver

from tf_module_publisher.core.exceptions import StorageOperationError
from tf_module_publisher.core.models import RemoteObject, VersionedObject
from tf_module_publisher.storage.base import ObjectStore

CREDENTIALS_JSON = '{"type": "service_account", "project_id": "demo"}'


class InMemoryObjectStore(ObjectStore):
    """Object store fake that keeps objects in a dict and records every call."""

    store_type = "memory"

    def __init__(self, bucket_name: str = "test-bucket", keys: list[str] | None = None):
        super().__init__(bucket_name)
        self.objects: dict[str, RemoteObject] = {}
        self.metadata: dict[str, dict[str, str]] = {}
        self.uploaded_content: dict[str, bytes] = {}
        self.public: set[str] = set()
        self.calls: list[tuple[str, str]] = []
        self.fail_delete: set[str] = set()
        self.report_missing = False
        self._generation = 0
        for key in keys or []:
            self.add(key)

    def add(self, key: str) -> RemoteObject:
        self._generation += 1
        obj = RemoteObject(name=key, bucket=self.bucket_name, generation=self._generation, size=0)
        self.objects[key] = obj
        return obj

    def operations(self) -> list[str]:
        """Names of the calls made, in order."""
        return [operation for operation, _ in self.calls]

    def upload(self, local_path, key, metadata, *, content_type="application/octet-stream",
               cache_control=None):
        self.calls.append(("upload", key))
        self.uploaded_content[key] = Path(local_path).read_bytes()
        self.metadata[key] = {
            **metadata,
            "contentType": content_type,
            "cacheControl": cache_control or "",
        }
        return self.add(key)

    def list(self, prefix):
        self.calls.append(("list", prefix))
        return [obj for key, obj in self.objects.items() if key.startswith(prefix)]

    def delete(self, obj):
        self.calls.append(("delete", obj.name))
        if obj.name in self.fail_delete:
            raise StorageOperationError(
                "Delete failed: 503 Service Unavailable",
                operation="delete",
                bucket=self.bucket_name,
                key=obj.name,
            )
        del self.objects[obj.name]

    def exists(self, key):
        self.calls.append(("exists", key))
        if self.report_missing:
            return False
        return key in self.objects

    def make_public(self, key):
        self.calls.append(("make_public", key))
        self.public.add(key)


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Provide a temporary directory that is cleaned up after the test."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def module_dir(temp_dir: Path) -> Path:
    """Provide a small Terraform module with VCS and OS noise around it."""
    module = temp_dir / "network"
    module.mkdir()

    (module / "main.tf").write_text('resource "null_resource" "this" {}\n')
    (module / "variables.tf").write_text('variable "name" {}\n')
    (module / "modules" / "subnet").mkdir(parents=True)
    (module / "modules" / "subnet" / "main.tf").write_text("# subnet\n")

    (module / ".git").mkdir()
    (module / ".git" / "HEAD").write_text("ref: refs/heads/main\n")
    (module / ".gitignore").write_text(".terraform/\n")
    (module / ".DS_Store").write_bytes(b"\x00\x01")

    return module


@pytest.fixture
def work_dir(temp_dir: Path) -> Path:
    """Provide a scratch directory standing in for the runner temp dir."""
    path = temp_dir / "work"
    path.mkdir()
    return path


def make_versioned(version: str, module: str = "network") -> VersionedObject:
    """Build a parsed version archive for ``version`` of ``module``."""
    key = f"modules/{module}/{module}-{version}.zip"
    return VersionedObject(
        remote=RemoteObject(name=key, bucket="test-bucket"),
        version=version,
        version_info=semver.Version.parse(version),
    )


def version_keys(module: str, versions: list[str]) -> list[str]:
    """Object keys for each of ``versions`` of ``module``."""
    return [f"modules/{module}/{module}-{v}.zip" for v in versions]
