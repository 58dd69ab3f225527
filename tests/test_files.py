"""Tests for file primitives."""

from __future__ import annotations

import pytest

from entity_audit.base import FileOperationError
from entity_audit.files import LocalFileSystem, MemoryFileSystem


class TestMemoryFileSystem:
    """Tests for MemoryFileSystem."""

    def test_write_and_read(self):
        files = MemoryFileSystem()
        files.write("a/B.java", "class B {}")

        assert files.read("a/B.java") == "class B {}"
        assert files.exists("a/B.java")
        assert files.written == ["a/B.java"]

    def test_read_missing(self):
        with pytest.raises(FileOperationError) as exc_info:
            MemoryFileSystem().read("missing.java")
        assert exc_info.value.path == "missing.java"

    def test_edit_records_changes(self):
        files = MemoryFileSystem({"A.java": "class A {}"})

        assert files.edit("A.java", lambda text: text.replace("A", "B")) is True
        assert files.read("A.java") == "class B {}"
        assert files.edited == ["A.java"]

    def test_edit_without_change(self):
        files = MemoryFileSystem({"A.java": "class A {}"})

        assert files.edit("A.java", lambda text: text) is False
        assert files.edited == []

    def test_from_directory(self, tmp_path):
        (tmp_path / "src" / "pkg").mkdir(parents=True)
        (tmp_path / "src" / "pkg" / "A.java").write_text("class A {}")
        (tmp_path / "README.md").write_text("readme")

        files = MemoryFileSystem.from_directory(tmp_path)

        assert list(files) == ["src/pkg/A.java"]


class TestLocalFileSystem:
    """Tests for LocalFileSystem."""

    def test_write_creates_parents(self, tmp_path):
        files = LocalFileSystem(tmp_path)
        files.write("src/main/java/A.java", "class A {}")

        assert (tmp_path / "src" / "main" / "java" / "A.java").read_text() == "class A {}"
        assert files.exists("src/main/java/A.java")

    def test_edit(self, tmp_path):
        (tmp_path / "A.java").write_text("class A {}")
        files = LocalFileSystem(tmp_path)

        files.edit("A.java", lambda text: text + "\n")

        assert (tmp_path / "A.java").read_text() == "class A {}\n"
        assert files.edited == ["A.java"]

    def test_read_missing_names_file(self, tmp_path):
        files = LocalFileSystem(tmp_path)

        with pytest.raises(FileOperationError, match="Missing.java"):
            files.read("Missing.java")

    def test_write_failure(self, tmp_path):
        (tmp_path / "blocker").write_text("a file, not a directory")
        files = LocalFileSystem(tmp_path)

        with pytest.raises(FileOperationError):
            files.write("blocker/A.java", "class A {}")
