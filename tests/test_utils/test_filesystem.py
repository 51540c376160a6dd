from __future__ import annotations

import sys
import json
import stat
from pathlib import Path
from unittest.mock import patch

import pytest

from verlimit.exceptions import FileOperationError, ParseError
from verlimit.utils.filesystem import (
    _atomic_write,
    _create_backup_internal,
    _validated_file,
    find_project_files,
    read_json_object,
    safe_read_file,
    safe_write_file,
)


@pytest.fixture
def temp_file(tmp_path: Path) -> Path:
    """Create a temporary file with sample content."""
    file_path = tmp_path / "package.json"
    file_path.write_text('{"name": "demo"}\n', encoding="utf-8")
    return file_path


@pytest.mark.unit
class TestValidatedFile:
    """Tests for _validated_file internal helper."""

    def test_validates_existing_file(self, temp_file: Path) -> None:
        result = _validated_file(temp_file)

        assert result.is_file()
        assert result.is_absolute()

    def test_rejects_nonexistent_file(self, tmp_path: Path) -> None:
        missing = tmp_path / "missing.json"

        with pytest.raises(FileOperationError) as exc_info:
            _validated_file(missing)

        assert "not found" in str(exc_info.value).lower()
        assert exc_info.value.file_path == str(missing)
        assert exc_info.value.operation == "read"

    def test_rejects_directory(self, tmp_path: Path) -> None:
        with pytest.raises(FileOperationError) as exc_info:
            _validated_file(tmp_path)

        assert "not a file" in str(exc_info.value).lower()


@pytest.mark.unit
class TestSafeReadFile:
    """Tests for safe_read_file."""

    def test_reads_content(self, temp_file: Path) -> None:
        assert safe_read_file(temp_file) == '{"name": "demo"}\n'

    def test_rejects_oversized_file(self, temp_file: Path) -> None:
        with pytest.raises(FileOperationError) as exc_info:
            safe_read_file(temp_file, max_size=4)

        assert "too large" in str(exc_info.value).lower()

    def test_size_limit_can_be_disabled(self, temp_file: Path) -> None:
        assert safe_read_file(temp_file, max_size=None).startswith("{")

    def test_decode_error_is_normalized(self, tmp_path: Path) -> None:
        binary = tmp_path / "binary.json"
        binary.write_bytes(b"\xff\xfe\xfa")

        with pytest.raises(FileOperationError) as exc_info:
            safe_read_file(binary)

        assert exc_info.value.operation == "read"
        assert exc_info.value.original_error is not None


@pytest.mark.unit
class TestReadJsonObject:
    """Tests for read_json_object."""

    def test_returns_object_preserving_key_order(self, tmp_path: Path) -> None:
        path = tmp_path / "package.json"
        path.write_text('{"z": 1, "a": 2, "m": 3}', encoding="utf-8")

        assert list(read_json_object(path)) == ["z", "a", "m"]

    def test_invalid_json_raises_parse_error(self, tmp_path: Path) -> None:
        path = tmp_path / "package.json"
        path.write_text("{ not json", encoding="utf-8")

        with pytest.raises(ParseError) as exc_info:
            read_json_object(path)

        assert exc_info.value.file_path == str(path)
        assert "invalid json" in str(exc_info.value).lower()

    def test_non_object_raises_parse_error(self, tmp_path: Path) -> None:
        path = tmp_path / "package.json"
        path.write_text("[1, 2, 3]", encoding="utf-8")

        with pytest.raises(ParseError) as exc_info:
            read_json_object(path)

        assert "list" in str(exc_info.value)

    def test_missing_file_raises_file_operation_error(self, tmp_path: Path) -> None:
        with pytest.raises(FileOperationError):
            read_json_object(tmp_path / "package.json")


@pytest.mark.unit
class TestAtomicWrite:
    """Tests for _atomic_write internal helper."""

    def test_writes_content(self, tmp_path: Path) -> None:
        target = tmp_path / "out.json"

        _atomic_write(target, "{}\n")

        assert target.read_text(encoding="utf-8") == "{}\n"

    def test_replaces_existing_content(self, temp_file: Path) -> None:
        _atomic_write(temp_file, "new")

        assert temp_file.read_text(encoding="utf-8") == "new"

    def test_leaves_no_temporary_files(self, tmp_path: Path) -> None:
        target = tmp_path / "out.json"

        _atomic_write(target, "{}")

        assert [p.name for p in tmp_path.iterdir()] == ["out.json"]

    @pytest.mark.skipif(sys.platform == "win32", reason="POSIX permissions")
    @pytest.mark.parametrize("mode", [0o644, 0o664, 0o600])
    def test_keeps_file_mode(self, temp_file: Path, mode: int) -> None:
        temp_file.chmod(mode)

        _atomic_write(temp_file, "{}")

        assert stat.S_IMODE(temp_file.stat().st_mode) == mode

    @pytest.mark.skipif(sys.platform == "win32", reason="symlinks need privileges")
    def test_writes_through_symlink(self, tmp_path: Path) -> None:
        real = tmp_path / "real.json"
        real.write_text("{}", encoding="utf-8")
        link = tmp_path / "package.json"
        link.symlink_to(real)

        _atomic_write(link, "new")

        assert link.is_symlink()
        assert real.read_text(encoding="utf-8") == "new"
        assert sorted(p.name for p in tmp_path.iterdir()) == [
            "package.json",
            "real.json",
        ]

    def test_failure_raises_and_cleans_up(self, tmp_path: Path) -> None:
        target = tmp_path / "out.json"

        with patch.object(Path, "replace", side_effect=OSError("disk full")):
            with pytest.raises(FileOperationError) as exc_info:
                _atomic_write(target, "{}")

        assert exc_info.value.operation == "write"
        assert list(tmp_path.iterdir()) == []


@pytest.mark.unit
class TestSafeWriteFile:
    """Tests for safe_write_file."""

    def test_no_backup_by_default(self, temp_file: Path) -> None:
        result = safe_write_file(temp_file, "{}")

        assert result is None
        assert len(list(temp_file.parent.iterdir())) == 1

    def test_creates_backup_when_requested(self, temp_file: Path) -> None:
        original = temp_file.read_text(encoding="utf-8")

        backup = safe_write_file(temp_file, "{}", create_backup=True)

        assert backup is not None
        assert backup.name.startswith("package.json.")
        assert backup.name.endswith(".backup")
        assert backup.read_text(encoding="utf-8") == original
        assert temp_file.read_text(encoding="utf-8") == "{}"

    def test_restores_backup_on_failure(self, temp_file: Path) -> None:
        original = temp_file.read_text(encoding="utf-8")

        with patch(
            "verlimit.utils.filesystem._atomic_write",
            side_effect=FileOperationError("boom", operation="write"),
        ):
            with pytest.raises(FileOperationError):
                safe_write_file(temp_file, "{}", create_backup=True)

        assert temp_file.read_text(encoding="utf-8") == original

    def test_backup_of_missing_file_is_skipped(self, tmp_path: Path) -> None:
        target = tmp_path / "new.json"

        assert safe_write_file(target, "{}", create_backup=True) is None
        assert target.read_text(encoding="utf-8") == "{}"


@pytest.mark.unit
class TestCreateBackupInternal:
    """Tests for _create_backup_internal."""

    def test_copy_failure_is_normalized(self, temp_file: Path) -> None:
        with patch("shutil.copy2", side_effect=OSError("denied")):
            with pytest.raises(FileOperationError) as exc_info:
                _create_backup_internal(temp_file)

        assert exc_info.value.operation == "backup"


@pytest.mark.unit
class TestFindProjectFiles:
    """Tests for find_project_files."""

    def test_finds_both(self, tmp_path: Path) -> None:
        (tmp_path / "package.json").write_text("{}", encoding="utf-8")
        (tmp_path / "package-lock.json").write_text("{}", encoding="utf-8")

        manifest, lockfile = find_project_files(tmp_path)

        assert manifest == (tmp_path / "package.json").resolve()
        assert lockfile == (tmp_path / "package-lock.json").resolve()

    def test_missing_files_are_none(self, tmp_path: Path) -> None:
        assert find_project_files(tmp_path) == (None, None)

    def test_directory_named_like_manifest_is_ignored(self, tmp_path: Path) -> None:
        (tmp_path / "package.json").mkdir()

        assert find_project_files(tmp_path) == (None, None)
