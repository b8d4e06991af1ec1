"""
Tolerant unified diff application.

This package applies unified diffs by content rather than by line number, so
patches with malformed headers, stale offsets or reformatted whitespace still
apply where the intended location can be recognised.
"""

from fuzzy_diff.diff_applier import DiffApplier, apply_diff
from fuzzy_diff.diff_content_provider import (
    DiffContentProvider,
    DryRunContentProvider,
    FilesystemContentProvider,
)
from fuzzy_diff.diff_exceptions import (
    DiffContentError,
    DiffError,
    DiffParseError,
    DiffSettingsError,
)
from fuzzy_diff.diff_hunk_applier import DiffHunkApplier
from fuzzy_diff.diff_locator import DiffLocator
from fuzzy_diff.diff_normalizer import normalize_line
from fuzzy_diff.diff_parser import DiffParser
from fuzzy_diff.diff_reporter import DiffReporter
from fuzzy_diff.diff_settings import DiffApplierSettings
from fuzzy_diff.diff_tracer import (
    DiffTraceEvent,
    DiffTraceEventType,
    DiffTracer,
    LoggingDiffTracer,
    NullDiffTracer,
)
from fuzzy_diff.diff_types import (
    ContentPatchResult,
    DiffHunk,
    DiffOperation,
    FailedHunk,
    FileChange,
    FileResult,
    FileStatus,
    HunkApplyOutcome,
    MatchCandidate,
    OperationType,
)

__version__ = "1.0.0"

__all__ = [
    # Exceptions
    'DiffError',
    'DiffParseError',
    'DiffContentError',
    'DiffSettingsError',
    # Types
    'OperationType',
    'DiffOperation',
    'DiffHunk',
    'FileChange',
    'MatchCandidate',
    'HunkApplyOutcome',
    'FailedHunk',
    'FileStatus',
    'FileResult',
    'ContentPatchResult',
    # Tracing
    'DiffTraceEvent',
    'DiffTraceEventType',
    'DiffTracer',
    'LoggingDiffTracer',
    'NullDiffTracer',
    # Content providers
    'DiffContentProvider',
    'FilesystemContentProvider',
    'DryRunContentProvider',
    # Core classes
    'normalize_line',
    'DiffApplierSettings',
    'DiffParser',
    'DiffLocator',
    'DiffHunkApplier',
    'DiffApplier',
    'DiffReporter',
    'apply_diff',
]
