"""Tests for content providers."""

import os

import pytest

from fuzzy_diff.diff_content_provider import DryRunContentProvider, FilesystemContentProvider
from fuzzy_diff.diff_exceptions import DiffContentError


class TestFilesystemContentProvider:
    """Test the filesystem-backed provider."""

    def test_resolve_relative(self, tmp_path):
        """Test relative filenames resolve under the root."""
        provider = FilesystemContentProvider(str(tmp_path))

        assert provider.resolve_path("src/../a.txt") == os.path.join(str(tmp_path), "a.txt")

    def test_resolve_absolute(self, tmp_path):
        """Test absolute filenames are used as given."""
        provider = FilesystemContentProvider(str(tmp_path))
        absolute = str(tmp_path / "elsewhere" / "b.txt")

        assert provider.resolve_path(absolute) == absolute

    def test_resolve_not_confined_to_root(self, tmp_path):
        """Test parent-directory components may resolve outside the root."""
        provider = FilesystemContentProvider(str(tmp_path / "root"))

        assert provider.resolve_path("../outside.txt") == os.path.join(str(tmp_path), "outside.txt")

    def test_read_write(self, tmp_path):
        """Test content written can be read back."""
        provider = FilesystemContentProvider(str(tmp_path))
        path = provider.resolve_path("f.txt")

        provider.write_content(path, "hello\n")

        assert provider.path_exists(path)
        assert provider.read_content(path) == "hello\n"

    def test_line_endings_untranslated(self, tmp_path):
        """Test CRLF content is neither translated on read nor on write."""
        provider = FilesystemContentProvider(str(tmp_path))
        path = str(tmp_path / "crlf.txt")
        (tmp_path / "crlf.txt").write_bytes(b"a\r\nb\r\n")

        assert provider.read_content(path) == "a\r\nb\r\n"

        provider.write_content(path, "x\r\ny\r\n")

        assert (tmp_path / "crlf.txt").read_bytes() == b"x\r\ny\r\n"

    def test_path_exists_ignores_directories(self, tmp_path):
        """Test a directory does not count as an existing file."""
        provider = FilesystemContentProvider(str(tmp_path))
        (tmp_path / "sub").mkdir()

        assert provider.path_exists(str(tmp_path / "sub")) is False
        assert provider.path_exists(str(tmp_path / "missing.txt")) is False

    def test_read_missing(self, tmp_path):
        """Test reading a missing file raises a content error."""
        provider = FilesystemContentProvider(str(tmp_path))
        path = str(tmp_path / "missing.txt")

        with pytest.raises(DiffContentError, match="File not found") as exc_info:
            provider.read_content(path)

        assert exc_info.value.error_details == {'path': path}

    def test_read_undecodable(self, tmp_path):
        """Test bytes that are not valid text raise a content error."""
        provider = FilesystemContentProvider(str(tmp_path))
        (tmp_path / "bin.dat").write_bytes(b"\xff\xfe\x00\x80")

        with pytest.raises(DiffContentError, match="Failed to read file"):
            provider.read_content(str(tmp_path / "bin.dat"))

    def test_write_into_missing_directory(self, tmp_path):
        """Test writing without creating the directory first raises a content error."""
        provider = FilesystemContentProvider(str(tmp_path))

        with pytest.raises(DiffContentError, match="Failed to write file"):
            provider.write_content(str(tmp_path / "no" / "such" / "f.txt"), "x")

    def test_ensure_parent_directory(self, tmp_path):
        """Test parent directories are created as needed."""
        provider = FilesystemContentProvider(str(tmp_path))
        path = provider.resolve_path("a/b/c.txt")

        provider.ensure_parent_directory(path)
        provider.write_content(path, "x\n")

        assert (tmp_path / "a" / "b" / "c.txt").read_text() == "x\n"

    def test_ensure_parent_directory_blocked_by_file(self, tmp_path):
        """Test a file in the way of a directory raises a content error."""
        provider = FilesystemContentProvider(str(tmp_path))
        (tmp_path / "blocker").write_text("")

        with pytest.raises(DiffContentError, match="Failed to create directory"):
            provider.ensure_parent_directory(str(tmp_path / "blocker" / "f.txt"))


class TestDryRunContentProvider:
    """Test the provider that holds writes in memory."""

    def test_writes_held_back(self, tmp_path):
        """Test writes never reach the wrapped provider."""
        (tmp_path / "f.txt").write_text("old\n")
        provider = DryRunContentProvider(FilesystemContentProvider(str(tmp_path)))
        path = provider.resolve_path("f.txt")

        provider.write_content(path, "new\n")

        assert (tmp_path / "f.txt").read_text() == "old\n"
        assert provider.pending_writes() == {path: "new\n"}
        assert provider.pending_paths() == [path]

    def test_reads_see_pending_writes(self, tmp_path):
        """Test a pending write is visible to later reads and existence checks."""
        provider = DryRunContentProvider(FilesystemContentProvider(str(tmp_path)))
        path = provider.resolve_path("new.txt")

        assert provider.path_exists(path) is False

        provider.write_content(path, "content\n")

        assert provider.path_exists(path) is True
        assert provider.read_content(path) == "content\n"

    def test_reads_fall_through(self, tmp_path):
        """Test files without pending writes are read from the wrapped provider."""
        (tmp_path / "f.txt").write_text("on disk\n")
        provider = DryRunContentProvider(FilesystemContentProvider(str(tmp_path)))

        assert provider.read_content(provider.resolve_path("f.txt")) == "on disk\n"

    def test_no_directories_created(self, tmp_path):
        """Test directory creation is suppressed."""
        provider = DryRunContentProvider(FilesystemContentProvider(str(tmp_path)))

        provider.ensure_parent_directory(str(tmp_path / "a" / "f.txt"))

        assert not (tmp_path / "a").exists()

    def test_dry_run_apply(self, applier, tmp_path):
        """Test applying a diff through a dry run leaves files untouched."""
        (tmp_path / "f.txt").write_text("a\nb\n")
        provider = DryRunContentProvider(FilesystemContentProvider(str(tmp_path)))

        results = applier.apply_diff(
            "--- a/f.txt\n+++ b/f.txt\n@@ -2 +2 @@\n-b\n+B\n--- /dev/null\n+++ b/d/new.txt\n@@ -0,0 +1 @@\n+n\n",
            provider
        )

        assert [r.status.value for r in results] == ["SUCCESS", "CREATED"]
        assert (tmp_path / "f.txt").read_text() == "a\nb\n"
        assert not (tmp_path / "d").exists()
        assert provider.pending_writes()[str(tmp_path / "f.txt")] == "a\nB\n"
