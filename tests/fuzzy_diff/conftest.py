"""Shared fixtures and utilities for fuzzy diff tests."""

import pytest
from typing import Dict, List

from fuzzy_diff.diff_applier import DiffApplier
from fuzzy_diff.diff_content_provider import DiffContentProvider
from fuzzy_diff.diff_exceptions import DiffContentError
from fuzzy_diff.diff_hunk_applier import DiffHunkApplier
from fuzzy_diff.diff_locator import DiffLocator
from fuzzy_diff.diff_parser import DiffParser
from fuzzy_diff.diff_tracer import DiffTraceEvent, DiffTraceEventType, DiffTracer
from fuzzy_diff.diff_types import DiffHunk, DiffOperation, OperationType


class InMemoryContentProvider(DiffContentProvider):
    """Content provider backed by a dictionary, for testing."""

    def __init__(self, files: Dict[str, str] | None = None):
        self.files: Dict[str, str] = dict(files or {})
        self.writes: List[str] = []
        self.directories: List[str] = []
        self.fail_reads: set = set()
        self.fail_writes: set = set()

    def resolve_path(self, filename: str) -> str:
        return filename

    def path_exists(self, path: str) -> bool:
        return path in self.files

    def read_content(self, path: str) -> str:
        if path in self.fail_reads:
            raise DiffContentError(f"Permission denied: {path}")

        if path not in self.files:
            raise DiffContentError(f"File not found: {path}")

        return self.files[path]

    def write_content(self, path: str, content: str) -> None:
        if path in self.fail_writes:
            raise DiffContentError(f"Disk full: {path}")

        self.files[path] = content
        self.writes.append(path)

    def ensure_parent_directory(self, path: str) -> None:
        self.directories.append(path)


class RecordingDiffTracer(DiffTracer):
    """Tracer that keeps every event, for testing."""

    def __init__(self):
        self.events: List[DiffTraceEvent] = []

    def trace(self, event: DiffTraceEvent) -> None:
        self.events.append(event)

    def of_type(self, event_type: DiffTraceEventType) -> List[DiffTraceEvent]:
        """Get the recorded events of one type."""
        return [e for e in self.events if e.type == event_type]


@pytest.fixture
def parser():
    """Create a diff parser."""
    return DiffParser()


@pytest.fixture
def tracer():
    """Create a recording tracer."""
    return RecordingDiffTracer()


@pytest.fixture
def locator(tracer):
    """Create a locator with default settings."""
    return DiffLocator(tracer=tracer)


@pytest.fixture
def hunk_applier(tracer):
    """Create a hunk applier with default settings."""
    return DiffHunkApplier(tracer=tracer)


@pytest.fixture
def applier(tracer):
    """Create a diff applier that records its trace events."""
    return DiffApplier(tracer=tracer)


@pytest.fixture
def provider_factory():
    """Factory for in-memory content providers."""
    def _create_provider(files: Dict[str, str] | None = None):
        return InMemoryContentProvider(files)
    return _create_provider


class DiffTestHelpers:
    """Helper utilities for diff testing."""

    @staticmethod
    def context(line: str) -> DiffOperation:
        """Build a context operation."""
        return DiffOperation(OperationType.CONTEXT, line)

    @staticmethod
    def add(line: str) -> DiffOperation:
        """Build an add operation."""
        return DiffOperation(OperationType.ADD, line)

    @staticmethod
    def remove(line: str) -> DiffOperation:
        """Build a remove operation."""
        return DiffOperation(OperationType.REMOVE, line)

    @staticmethod
    def hunk(*operations: DiffOperation, header_context: str | None = None, line_number: int | None = None) -> DiffHunk:
        """Create a hunk from operations."""
        return DiffHunk(list(operations), header_context, line_number)

    @staticmethod
    def document_to_string(document: List[str]) -> str:
        """Convert document to newline-terminated string."""
        return '\n'.join(document) + '\n'


@pytest.fixture
def helpers():
    """Provide test helper utilities."""
    return DiffTestHelpers
