"""Tests for module archiving and hashing."""

import hashlib
import zipfile
from pathlib import Path

import pytest

from tf_module_publisher.bundle import calculate_file_hash, create_zip_archive, iter_module_files
from tf_module_publisher.core.exceptions import ArchiveError


class TestIterModuleFiles:
    """Tests for iter_module_files."""

    def test_excludes_vcs_and_os_files(self, module_dir: Path) -> None:
        files = [p.as_posix() for p in iter_module_files(module_dir)]
        assert files == ["main.tf", "modules/subnet/main.tf", "variables.tf"]

    def test_excludes_nested_git_directories(self, module_dir: Path) -> None:
        nested = module_dir / "modules" / "subnet" / ".git"
        nested.mkdir()
        (nested / "config").write_text("[core]\n")
        files = [p.as_posix() for p in iter_module_files(module_dir)]
        assert "modules/subnet/.git/config" not in files

    def test_keeps_other_dotfiles(self, module_dir: Path) -> None:
        (module_dir / ".terraform-version").write_text("1.7.0\n")
        files = [p.as_posix() for p in iter_module_files(module_dir)]
        assert ".terraform-version" in files


class TestCreateZipArchive:
    """Tests for create_zip_archive."""

    def test_creates_archive(self, module_dir: Path, temp_dir: Path) -> None:
        output = temp_dir / "out" / "network-1.0.0.zip"

        result = create_zip_archive(module_dir, output)

        assert result == output
        with zipfile.ZipFile(output) as zf:
            assert sorted(zf.namelist()) == ["main.tf", "modules/subnet/main.tf", "variables.tf"]
            assert zf.read("main.tf") == b'resource "null_resource" "this" {}\n'

    def test_replaces_existing_archive(self, module_dir: Path, temp_dir: Path) -> None:
        output = temp_dir / "network.zip"
        output.write_bytes(b"stale")

        create_zip_archive(module_dir, output)

        assert zipfile.is_zipfile(output)

    def test_empty_module(self, temp_dir: Path) -> None:
        empty = temp_dir / "empty"
        empty.mkdir()
        output = create_zip_archive(empty, temp_dir / "empty.zip")
        with zipfile.ZipFile(output) as zf:
            assert zf.namelist() == []

    def test_output_inside_source_not_archived(self, module_dir: Path) -> None:
        work_dir = module_dir / "build"
        work_dir.mkdir()
        (work_dir / "google-credentials.json").write_text("{}")

        output = create_zip_archive(module_dir, work_dir / "network-1.0.0.zip")

        with zipfile.ZipFile(output) as zf:
            names = zf.namelist()
        assert not any(name.startswith("build/") for name in names)
        assert "main.tf" in names

    def test_output_in_source_root_not_archived(self, module_dir: Path) -> None:
        output = create_zip_archive(module_dir, module_dir / "network-1.0.0.zip")

        with zipfile.ZipFile(output) as zf:
            assert "network-1.0.0.zip" not in zf.namelist()

    def test_missing_source(self, temp_dir: Path) -> None:
        with pytest.raises(ArchiveError) as exc_info:
            create_zip_archive(temp_dir / "missing", temp_dir / "out.zip")
        assert exc_info.value.exit_code == 3
        assert "does not exist" in exc_info.value.message


class TestCalculateFileHash:
    """Tests for calculate_file_hash."""

    def test_matches_sha256(self, temp_dir: Path) -> None:
        path = temp_dir / "data.bin"
        content = b"terraform" * 300_000
        path.write_bytes(content)
        assert calculate_file_hash(path) == hashlib.sha256(content).hexdigest()

    def test_empty_file(self, temp_dir: Path) -> None:
        path = temp_dir / "empty"
        path.write_bytes(b"")
        assert calculate_file_hash(path) == hashlib.sha256(b"").hexdigest()
