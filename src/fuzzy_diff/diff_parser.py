"""
Tolerant unified diff parsing.

Handles standard `diff --git` / `---` / `+++` / `@@` headers as well as the
malformed variants produced when a header line picks up one or more stray
leading `+` characters (for example `+--- a/file.py` or `++@@ -1,2 +1,2 @@`).
"""

import re
from typing import List

from fuzzy_diff.diff_exceptions import DiffParseError
from fuzzy_diff.diff_types import (
    OPERATION_MARKERS,
    DiffHunk,
    DiffOperation,
    FileChange,
    OperationType,
)


class DiffParser:
    """Parser for (possibly malformed) multi-file unified diffs."""

    # Header patterns; a leading run of '+' is tolerated on every one of them
    DIFF_GIT_PATTERN = re.compile(r'^\+*diff --git\b')
    DIFF_GIT_NAMES_PATTERN = re.compile(r'^\+*diff --git a/(.+) b/(.+)$')
    OLD_FILE_PATTERN = re.compile(r'^\+*--- a/(.+)$')
    OLD_NULL_PATTERN = re.compile(r'^\+*--- /dev/null')
    NEW_FILE_PATTERN = re.compile(r'^\+*\+\+\+ b/(.+)$')
    HUNK_START_PATTERN = re.compile(r'^\+*@@')
    HUNK_HEADER_PATTERN = re.compile(r'^@@ -(\d+),?\d* \+(\d+),?\d* @@\s*(.+)?')

    # Lines that look like content but are really (malformed) headers
    HEADER_LOOKALIKE_PATTERN = re.compile(r'^(?:\++--- |\++\+\+ |\++@@|--- a/|--- /dev/null|\+\+\+ b/)')

    OPERATION_TYPES = {
        ' ': OperationType.CONTEXT,
        '+': OperationType.ADD,
        '-': OperationType.REMOVE,
    }

    def parse(self, diff_text: str) -> List[FileChange]:
        """
        Parse diff text into per-file change records.

        Files without any hunks and hunks without any operations are dropped.

        Args:
            diff_text: Raw diff text

        Returns:
            File changes in the order they appear in the diff

        Raises:
            DiffParseError: If the input is not text
        """
        if not isinstance(diff_text, str):
            raise DiffParseError(
                f"Diff must be text, got {type(diff_text).__name__}",
                {'input_type': type(diff_text).__name__}
            )

        files: List[FileChange] = []
        current_file: FileChange | None = None
        operations: List[DiffOperation] = []
        header_context: str | None = None
        line_number: int | None = None
        in_hunk = False

        for raw_line in diff_text.replace('\xa0', ' ').split('\n'):
            line = raw_line.rstrip()

            if self._is_file_start(line):
                self._finish_hunk(current_file, operations, header_context, line_number)
                self._finish_file(files, current_file)

                current_file = self._start_file(line)
                operations = []
                header_context = None
                line_number = None
                in_hunk = False
                continue

            new_file_match = self.NEW_FILE_PATTERN.match(line)
            if new_file_match:
                if current_file is not None:
                    current_file.filename = self._clean_filename(new_file_match.group(1))

                continue

            if line.startswith('new file mode'):
                if current_file is not None:
                    current_file.is_new_file = True

                continue

            if self.HUNK_START_PATTERN.match(line):
                self._finish_hunk(current_file, operations, header_context, line_number)
                operations = []
                line_number, header_context = self._parse_hunk_header(line)
                in_hunk = True
                continue

            if line.startswith('index '):
                continue

            if not line:
                # A marker space followed by nothing is a blank context line
                if in_hunk and raw_line.startswith(' '):
                    operations.append(DiffOperation(OperationType.CONTEXT, ''))

                continue

            op_type = self.OPERATION_TYPES.get(line[0])
            if op_type is None:
                continue

            if self.HEADER_LOOKALIKE_PATTERN.match(line):
                continue

            operations.append(DiffOperation(op_type, line[1:]))

        self._finish_hunk(current_file, operations, header_context, line_number)
        self._finish_file(files, current_file)
        return files

    def format(self, file_changes: List[FileChange]) -> str:
        """
        Serialize file changes back into well-formed unified diff text.

        Args:
            file_changes: File changes to serialize

        Returns:
            Unified diff text
        """
        out: List[str] = []

        for change in file_changes:
            out.append('--- /dev/null' if change.is_new_file else f'--- a/{change.filename}')
            out.append(f'+++ b/{change.filename}')

            for hunk in change.hunks:
                out.append(self._format_hunk_header(hunk))
                for op in hunk.operations:
                    out.append(f'{OPERATION_MARKERS[op.type]}{op.line}')

        return '\n'.join(out) + '\n' if out else ''

    def _is_file_start(self, line: str) -> bool:
        """Check if a line starts a new file section."""
        return bool(
            self.DIFF_GIT_PATTERN.match(line) or
            self.OLD_FILE_PATTERN.match(line) or
            self.OLD_NULL_PATTERN.match(line)
        )

    def _start_file(self, line: str) -> FileChange:
        """Create the file record for a file-start header line."""
        if self.OLD_NULL_PATTERN.match(line):
            return FileChange(filename='unknown', is_new_file=True)

        match = self.DIFF_GIT_NAMES_PATTERN.match(line)
        if match:
            return FileChange(filename=self._clean_filename(match.group(2) or match.group(1)))

        match = self.OLD_FILE_PATTERN.match(line)
        if match:
            return FileChange(filename=self._clean_filename(match.group(1)))

        return FileChange(filename='unknown')

    def _clean_filename(self, path: str) -> str:
        """Drop any tab-separated timestamp from a header filename."""
        return path.split('\t')[0].strip()

    def _parse_hunk_header(self, line: str) -> tuple[int | None, str | None]:
        """
        Extract the original start line and trailing context from an @@ header.

        Args:
            line: Header line, possibly with stray leading '+' characters

        Returns:
            Tuple of (line number, header context); both None if the header is unparseable
        """
        match = self.HUNK_HEADER_PATTERN.match(line.lstrip('+'))
        if not match:
            return None, None

        context = match.group(3).strip() if match.group(3) else None
        return int(match.group(1)), context or None

    def _format_hunk_header(self, hunk: DiffHunk) -> str:
        """Build an @@ header line for a hunk."""
        if hunk.line_number is None:
            return '@@ @@'

        old_count = sum(1 for op in hunk.operations if op.type != OperationType.ADD)
        new_count = sum(1 for op in hunk.operations if op.type != OperationType.REMOVE)
        header = f'@@ -{hunk.line_number},{old_count} +{hunk.line_number},{new_count} @@'
        if hunk.header_context:
            header += f' {hunk.header_context}'

        return header

    def _finish_hunk(
        self,
        current_file: FileChange | None,
        operations: List[DiffOperation],
        header_context: str | None,
        line_number: int | None
    ) -> None:
        """Record the hunk in progress if it has any operations."""
        if current_file is not None and operations:
            current_file.hunks.append(DiffHunk(list(operations), header_context, line_number))

    def _finish_file(self, files: List[FileChange], current_file: FileChange | None) -> None:
        """Record the file in progress if it has any hunks."""
        if current_file is not None and current_file.hunks:
            files.append(current_file)
