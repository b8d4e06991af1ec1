"""Multi-file diff application with per-file all-or-nothing commits."""

import logging
from typing import List, Sequence

from fuzzy_diff.diff_content_provider import DiffContentProvider
from fuzzy_diff.diff_exceptions import DiffContentError
from fuzzy_diff.diff_hunk_applier import DiffHunkApplier
from fuzzy_diff.diff_locator import DiffLocator
from fuzzy_diff.diff_parser import DiffParser
from fuzzy_diff.diff_settings import DiffApplierSettings
from fuzzy_diff.diff_tracer import DiffTraceEventType, DiffTracer, LoggingDiffTracer
from fuzzy_diff.diff_types import (
    ContentPatchResult,
    DiffHunk,
    DiffOperation,
    FailedHunk,
    FileChange,
    FileResult,
    FileStatus,
    OperationType,
)


class DiffApplier:
    """
    Applies a parsed diff to the files supplied by a content provider.

    Files are processed one at a time in diff order. Within a file, hunks are
    applied bottom-to-top (by their claimed line numbers) so that hunks not yet
    applied still see their context at the original offsets. A file is only
    written if every hunk for it applied or was skipped.
    """

    def __init__(self, settings: DiffApplierSettings | None = None, tracer: DiffTracer | None = None):
        """
        Initialize the diff applier.

        Args:
            settings: Heuristic settings; defaults are used if not provided
            tracer: Receiver for trace events; defaults to logging them
        """
        self._settings = settings or DiffApplierSettings()
        self._tracer = tracer or LoggingDiffTracer()
        self._parser = DiffParser()
        self._locator = DiffLocator(self._settings, self._tracer)
        self._hunk_applier = DiffHunkApplier(self._settings, self._tracer, self._locator)
        self._logger = logging.getLogger("DiffApplier")

    def apply_diff(self, diff_text: str, provider: DiffContentProvider) -> List[FileResult]:
        """
        Parse a diff and apply it to every file it names.

        Failures are reported per file; processing continues with the next file.

        Args:
            diff_text: Raw diff text
            provider: Source and sink for file content

        Returns:
            One result per file change, in diff order

        Raises:
            DiffParseError: If the diff text is not usable at all
        """
        file_changes = self._parser.parse(diff_text)
        self._logger.info("Found %d file(s) to process", len(file_changes))

        return [self.apply_file_change(change, provider) for change in file_changes]

    def apply_file_change(self, change: FileChange, provider: DiffContentProvider) -> FileResult:
        """
        Apply the hunks for one file.

        Args:
            change: Parsed changes for the file
            provider: Source and sink for file content

        Returns:
            Result for the file
        """
        target_path = provider.resolve_path(change.filename)

        if change.is_new_file:
            return self._create_file(change, target_path, provider)

        return self._patch_file(change, target_path, provider)

    def patch_content(self, content: str, hunks: Sequence[DiffHunk]) -> ContentPatchResult:
        """
        Apply hunks to file content held in memory.

        Args:
            content: Current file content
            hunks: Hunks for this file, in diff order

        Returns:
            The patched content and per-hunk tallies; on any failure the content
            reflects only the hunks that did apply and must not be committed
        """
        line_ending = self._detect_line_ending(content)

        # Lines keep any \r of their own ending; normalization ignores it
        separator = '\r' if line_ending == '\r' else '\n'
        lines = content.split(separator)
        has_trailing_newline = content.endswith(separator)
        if has_trailing_newline:
            lines.pop()

        if content == '':
            lines = []

        if line_ending == '\r\n':
            hunks = [self._with_line_suffix(hunk, '\r') for hunk in hunks]

        applied = 0
        skipped = 0
        failed: List[FailedHunk] = []

        for index, hunk in enumerate(self.sort_hunks(hunks)):
            label = f"@{hunk.line_number}" if hunk.line_number is not None else f"#{index + 1}"
            outcome = self._hunk_applier.apply_hunk(lines, hunk)

            if outcome.skipped:
                skipped += 1

            elif outcome.success:
                lines = outcome.result_lines
                applied += 1
                self._tracer.emit(DiffTraceEventType.HUNK_APPLIED, f"Hunk {label} applied successfully")

            else:
                failed.append(FailedHunk(
                    hunk_index=index,
                    line_number=hunk.line_number,
                    header_context=hunk.header_context,
                    reason=outcome.error_reason or "Unknown error"
                ))

        new_content = separator.join(lines)
        if has_trailing_newline:
            new_content += separator

        return ContentPatchResult(new_content, applied, skipped, failed)

    @staticmethod
    def sort_hunks(hunks: Sequence[DiffHunk]) -> List[DiffHunk]:
        """
        Order hunks bottom-to-top by claimed line number, unnumbered hunks last.

        Args:
            hunks: Hunks in diff order

        Returns:
            New list in application order
        """
        return sorted(
            hunks,
            key=lambda h: (h.line_number is None, -h.line_number if h.line_number is not None else 0)
        )

    @staticmethod
    def new_file_lines(hunks: Sequence[DiffHunk]) -> List[str]:
        """Collect every added line across the hunks, in diff order."""
        return [
            op.line
            for hunk in hunks
            for op in hunk.operations
            if op.type == OperationType.ADD
        ]

    @staticmethod
    def _with_line_suffix(hunk: DiffHunk, suffix: str) -> DiffHunk:
        """Copy a hunk with `suffix` appended to each added line."""
        operations = [
            DiffOperation(op.type, op.line + suffix) if op.type == OperationType.ADD else op
            for op in hunk.operations
        ]
        return DiffHunk(operations, hunk.header_context, hunk.line_number)

    def _patch_file(self, change: FileChange, target_path: str, provider: DiffContentProvider) -> FileResult:
        """Apply hunks to an existing file."""
        total = len(change.hunks)
        self._logger.info("Processing existing file: %s (%d hunks)", change.filename, total)

        try:
            if not provider.path_exists(target_path):
                return self._file_failed(change, target_path, f"File not found: {target_path}")

            original = provider.read_content(target_path)
            patched = self.patch_content(original, change.hunks)

            if not patched.success:
                self._tracer.emit(
                    DiffTraceEventType.FILE_BLOCKED,
                    f"File NOT updated due to failed hunks ({len(patched.failed_hunks)}/{total} failed): "
                    f"{change.filename}",
                    filename=change.filename
                )
                return FileResult(
                    filename=change.filename,
                    status=FileStatus.FAILED,
                    hunks_applied=patched.hunks_applied,
                    total_hunks=total,
                    hunks_skipped=patched.hunks_skipped,
                    error=f"{len(patched.failed_hunks)} hunk(s) failed to apply",
                    failed_hunks=patched.failed_hunks,
                    target_path=target_path
                )

            provider.write_content(target_path, patched.content)

        except DiffContentError as e:
            return self._file_failed(change, target_path, f"Failed to process file: {e}")

        self._tracer.emit(
            DiffTraceEventType.FILE_UPDATED,
            f"File updated successfully ({patched.hunks_applied}/{total} hunks applied, "
            f"{patched.hunks_skipped} skipped): {change.filename}",
            filename=change.filename
        )
        return FileResult(
            filename=change.filename,
            status=FileStatus.SUCCESS,
            hunks_applied=patched.hunks_applied,
            total_hunks=total,
            hunks_skipped=patched.hunks_skipped,
            target_path=target_path
        )

    def _create_file(self, change: FileChange, target_path: str, provider: DiffContentProvider) -> FileResult:
        """Create a new file from the added lines of every hunk."""
        total = len(change.hunks)
        self._logger.info("Creating new file: %s (%d hunks)", change.filename, total)

        lines = self.new_file_lines(change.hunks)
        if not lines:
            return self._file_failed(change, target_path, "No content to write")

        try:
            provider.ensure_parent_directory(target_path)

            if provider.path_exists(target_path):
                self._tracer.emit(
                    DiffTraceEventType.FILE_OVERWRITE,
                    f"File already exists: {target_path}, will overwrite",
                    path=target_path
                )

            provider.write_content(target_path, '\n'.join(lines) + '\n')

        except DiffContentError as e:
            return self._file_failed(change, target_path, f"Failed to create new file: {e}")

        self._tracer.emit(
            DiffTraceEventType.FILE_CREATED,
            f"New file created with {len(lines)} lines: {change.filename}",
            filename=change.filename
        )
        return FileResult(
            filename=change.filename,
            status=FileStatus.CREATED,
            hunks_applied=total,
            total_hunks=total,
            target_path=target_path
        )

    def _file_failed(self, change: FileChange, target_path: str, error: str) -> FileResult:
        """Build a failed result for a file where no hunk was applied."""
        self._tracer.emit(DiffTraceEventType.FILE_FAILED, error, filename=change.filename)
        return FileResult(
            filename=change.filename,
            status=FileStatus.FAILED,
            hunks_applied=0,
            total_hunks=len(change.hunks),
            error=error,
            target_path=target_path
        )

    def _detect_line_ending(self, content: str) -> str:
        """
        Detect line ending style from file content.

        Args:
            content: File content

        Returns:
            The most common line ending ('\\n', '\\r\\n', or '\\r'); '\\r' only when
            the content has no '\\n' at all
        """
        if '\n' not in content:
            return '\r' if '\r' in content else '\n'

        crlf_count = content.count('\r\n')
        lf_count = content.count('\n') - crlf_count
        return '\r\n' if crlf_count > lf_count else '\n'


def apply_diff(
    diff_text: str,
    provider: DiffContentProvider,
    settings: DiffApplierSettings | None = None,
    tracer: DiffTracer | None = None
) -> List[FileResult]:
    """
    Apply a diff using a freshly configured applier.

    Args:
        diff_text: Raw diff text
        provider: Source and sink for file content
        settings: Heuristic settings; defaults are used if not provided
        tracer: Receiver for trace events; defaults to logging them

    Returns:
        One result per file change, in diff order
    """
    return DiffApplier(settings, tracer).apply_diff(diff_text, provider)
