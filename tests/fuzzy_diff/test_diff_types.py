"""Tests for diff data types."""

from fuzzy_diff.diff_types import (
    ContentPatchResult,
    DiffHunk,
    DiffOperation,
    FailedHunk,
    FileResult,
    FileStatus,
    MatchCandidate,
    OperationType,
)


class TestDiffHunk:
    """Test hunk helpers."""

    def test_is_context_only(self, helpers):
        """Test context-only detection."""
        assert helpers.hunk(helpers.context("a"), helpers.context("b")).is_context_only() is True
        assert helpers.hunk(helpers.context("a"), helpers.add("b")).is_context_only() is False

    def test_operations_compare_by_value(self):
        """Test operations are plain values."""
        assert DiffOperation(OperationType.ADD, "x") == DiffOperation(OperationType.ADD, "x")
        assert DiffHunk([DiffOperation(OperationType.ADD, "x")]) == DiffHunk([DiffOperation(OperationType.ADD, "x")])


class TestMatchCandidate:
    """Test candidate scoring."""

    def test_score(self):
        """Test the score sums matched context and removal lines."""
        assert MatchCandidate(5, context_line_count=3, remove_match_count=2, total_operations=9).score == 5


class TestFailedHunk:
    """Test failed hunk descriptors."""

    def test_describe_with_line_and_context(self):
        """Test a descriptor with both header parts."""
        assert FailedHunk(0, 12, "def f():", "r").describe() == "@@ -12,... +12,... @@ def f():"

    def test_describe_with_line_only(self):
        """Test a descriptor with only a line number."""
        assert FailedHunk(0, 12, None, "r").describe() == "@@ -12,... +12,... @@"

    def test_describe_with_context_only(self):
        """Test a descriptor with only header context."""
        assert FailedHunk(0, None, "class A:", "r").describe() == "@@ ... @@ class A:"

    def test_describe_with_nothing(self):
        """Test a descriptor falls back to the hunk position."""
        assert FailedHunk(2, None, None, "r").describe() == "Hunk #3"


class TestFileResult:
    """Test result serialization."""

    def test_to_dict_success(self):
        """Test optional fields are omitted when empty."""
        data = FileResult("f.txt", FileStatus.SUCCESS, 2, 2, target_path="/w/f.txt").to_dict()

        assert data == {
            "filename": "f.txt",
            "status": "SUCCESS",
            "hunks_applied": 2,
            "total_hunks": 2,
            "hunks_skipped": 0,
            "target_path": "/w/f.txt",
        }

    def test_to_dict_failure(self):
        """Test errors and failed hunks are included when present."""
        result = FileResult(
            "f.txt",
            FileStatus.FAILED,
            0,
            1,
            error="1 hunk(s) failed to apply",
            failed_hunks=[FailedHunk(0, 3, None, "No context matches found")]
        )

        data = result.to_dict()

        assert data["error"] == "1 hunk(s) failed to apply"
        assert data["failed_hunks"] == [
            {"hunk_index": 0, "line_number": 3, "header_context": None, "reason": "No context matches found"}
        ]


class TestContentPatchResult:
    """Test content patch results."""

    def test_success(self):
        """Test success depends only on failed hunks."""
        assert ContentPatchResult("x", 0, 1, []).success is True
        assert ContentPatchResult("x", 1, 0, [FailedHunk(0, None, None, "r")]).success is False
