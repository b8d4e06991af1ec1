"""Shared dataclasses for diff operations."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List


class OperationType(Enum):
    """Kind of line operation inside a hunk."""

    CONTEXT = "context"
    ADD = "add"
    REMOVE = "remove"


# Marker characters used when writing operations back out as diff text
OPERATION_MARKERS = {
    OperationType.CONTEXT: ' ',
    OperationType.ADD: '+',
    OperationType.REMOVE: '-',
}


@dataclass(frozen=True)
class DiffOperation:
    """A single line operation (without its leading marker character)."""

    type: OperationType
    line: str


@dataclass
class DiffHunk:
    """Represents a single hunk from a unified diff."""

    operations: List[DiffOperation]
    header_context: str | None = None  # Free text after the closing @@
    line_number: int | None = None  # Claimed original start line, used only for ordering

    def is_context_only(self) -> bool:
        """Check if the hunk contains nothing but context lines."""
        return all(op.type == OperationType.CONTEXT for op in self.operations)


@dataclass
class FileChange:
    """All hunks that target a single file."""

    filename: str
    hunks: List[DiffHunk] = field(default_factory=list)
    is_new_file: bool = False


@dataclass
class MatchCandidate:
    """A buffer offset at which a hunk might apply."""

    start_pos: int
    context_line_count: int
    remove_match_count: int
    total_operations: int

    @property
    def score(self) -> int:
        """Quality score used to rank candidates."""
        return self.remove_match_count + self.context_line_count


@dataclass
class HunkApplyOutcome:
    """Result of attempting to apply one hunk."""

    result_lines: List[str]
    success: bool
    skipped: bool = False
    error_reason: str | None = None


@dataclass
class FailedHunk:
    """Details of a hunk that could not be applied."""

    hunk_index: int
    line_number: int | None
    header_context: str | None
    reason: str

    def describe(self) -> str:
        """Get a short human readable descriptor for the hunk."""
        if self.line_number and self.header_context:
            return f"@@ -{self.line_number},... +{self.line_number},... @@ {self.header_context}"

        if self.line_number:
            return f"@@ -{self.line_number},... +{self.line_number},... @@"

        if self.header_context:
            return f"@@ ... @@ {self.header_context}"

        return f"Hunk #{self.hunk_index + 1}"


class FileStatus(Enum):
    """Outcome of processing one file."""

    SUCCESS = "SUCCESS"
    CREATED = "CREATED"
    FAILED = "FAILED"


@dataclass
class FileResult:
    """Result of applying all hunks for one file."""

    filename: str
    status: FileStatus
    hunks_applied: int
    total_hunks: int
    hunks_skipped: int = 0
    error: str | None = None
    failed_hunks: List[FailedHunk] = field(default_factory=list)
    target_path: str | None = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert the result to a JSON-serializable dictionary."""
        data: Dict[str, Any] = {
            "filename": self.filename,
            "status": self.status.value,
            "hunks_applied": self.hunks_applied,
            "total_hunks": self.total_hunks,
            "hunks_skipped": self.hunks_skipped,
            "target_path": self.target_path,
        }

        if self.error is not None:
            data["error"] = self.error

        if self.failed_hunks:
            data["failed_hunks"] = [
                {
                    "hunk_index": failed.hunk_index,
                    "line_number": failed.line_number,
                    "header_context": failed.header_context,
                    "reason": failed.reason,
                }
                for failed in self.failed_hunks
            ]

        return data


@dataclass
class ContentPatchResult:
    """Result of applying a file's hunks to its in-memory content."""

    content: str
    hunks_applied: int
    hunks_skipped: int
    failed_hunks: List[FailedHunk]

    @property
    def success(self) -> bool:
        """True if no hunk failed."""
        return not self.failed_hunks
