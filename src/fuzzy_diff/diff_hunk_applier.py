"""Replay of a single hunk against a line buffer."""

from typing import List, Sequence

from fuzzy_diff.diff_locator import DiffLocator
from fuzzy_diff.diff_normalizer import normalize_line, normalize_lines
from fuzzy_diff.diff_settings import DiffApplierSettings
from fuzzy_diff.diff_tracer import DiffTraceEventType, DiffTracer, NullDiffTracer
from fuzzy_diff.diff_types import DiffHunk, DiffOperation, HunkApplyOutcome, OperationType


NO_MATCHES_REASON = "No context matches found"
ALL_MATCHES_FAILED_REASON = "All context matches failed during application"


class DiffHunkApplier:
    """
    Applies one hunk to a buffer, trying ranked candidate positions in turn.

    The caller's buffer is never modified: each attempt works on its own copy and
    the copy is only returned when the attempt succeeds.
    """

    def __init__(
        self,
        settings: DiffApplierSettings | None = None,
        tracer: DiffTracer | None = None,
        locator: DiffLocator | None = None
    ):
        """
        Initialize the hunk applier.

        Args:
            settings: Heuristic settings; defaults are used if not provided
            tracer: Receiver for trace events; events are discarded if not provided
            locator: Locator used to rank start positions
        """
        self._settings = settings or DiffApplierSettings()
        self._tracer = tracer or NullDiffTracer()
        self._locator = locator or DiffLocator(self._settings, self._tracer)

    def apply_hunk(self, lines: Sequence[str], hunk: DiffHunk) -> HunkApplyOutcome:
        """
        Apply a hunk at the best position that accepts it.

        Args:
            lines: Current buffer
            hunk: Hunk to apply

        Returns:
            Outcome holding the new buffer on success, or the unchanged buffer and a reason
        """
        if hunk.is_context_only():
            self._tracer.emit(DiffTraceEventType.HUNK_SKIPPED, "Context-only hunk detected - skipping")
            return HunkApplyOutcome(list(lines), success=True, skipped=True)

        anchor = self._locator.find_anchor(lines, hunk.header_context)
        candidates = self._locator.find_candidates(lines, hunk.operations, anchor)

        if not candidates:
            return self._failure(lines, NO_MATCHES_REASON, self._diagnose(lines, hunk.operations, anchor))

        first_reason = None
        for candidate in candidates:
            outcome = self.attempt_at(lines, hunk.operations, candidate.start_pos)
            if outcome.success:
                return outcome

            if first_reason is None:
                first_reason = outcome.error_reason

            self._tracer.emit(
                DiffTraceEventType.ATTEMPT_FAILED,
                f"Match at line {candidate.start_pos + 1} failed: {outcome.error_reason}",
                start_pos=candidate.start_pos,
                reason=outcome.error_reason
            )

        return self._failure(lines, ALL_MATCHES_FAILED_REASON, first_reason)

    def attempt_at(self, lines: Sequence[str], operations: Sequence[DiffOperation], start_pos: int) -> HunkApplyOutcome:
        """
        Replay the operations in order starting from one buffer position.

        Args:
            lines: Current buffer
            operations: Operations to replay
            start_pos: Buffer index to start from

        Returns:
            Outcome with the new buffer on success, or the original buffer and a reason
        """
        result = list(lines)
        keys = normalize_lines(result)
        current_pos = start_pos
        applied = 0

        for op in operations:
            if op.type == OperationType.CONTEXT:
                found = self._search(
                    keys,
                    normalize_line(op.line),
                    current_pos,
                    self._settings.context_search_forward,
                    self._settings.context_search_backward
                )
                if found is None:
                    return HunkApplyOutcome(list(lines), False, error_reason=f'Context line not found: "{op.line.strip()}"')

                current_pos = found + 1

            elif op.type == OperationType.REMOVE:
                found = self._search(
                    keys,
                    normalize_line(op.line),
                    current_pos,
                    self._settings.removal_search_forward,
                    self._settings.removal_search_backward
                )
                if found is None:
                    return HunkApplyOutcome(list(lines), False, error_reason=f'Line to remove not found: "{op.line.strip()}"')

                del result[found]
                del keys[found]
                current_pos = found
                applied += 1

            else:
                result.insert(current_pos, op.line)
                keys.insert(current_pos, normalize_line(op.line))
                current_pos += 1
                applied += 1

        if applied == 0:
            return HunkApplyOutcome(list(lines), False, error_reason="No changes applied")

        return HunkApplyOutcome(result, True)

    def _search(self, keys: List[str], wanted: str, pos: int, forward: int, backward: int) -> int | None:
        """Look forward from `pos` first, then a little way back."""
        for i in range(pos, min(len(keys), pos + forward)):
            if keys[i] == wanted:
                return i

        for i in range(max(0, pos - backward), min(pos, len(keys))):
            if keys[i] == wanted:
                return i

        return None

    def _diagnose(self, lines: Sequence[str], operations: Sequence[DiffOperation], anchor: int) -> str | None:
        """Name the first hunk line that is missing from the buffer, if any."""
        keys = normalize_lines(list(lines))
        available = set(keys)

        for op in operations:
            if op.type == OperationType.REMOVE and normalize_line(op.line) not in available:
                return f'Line to remove not found: "{op.line.strip()}"'

        following = set(keys[anchor:])
        for op in operations:
            if op.type == OperationType.CONTEXT and normalize_line(op.line) not in following:
                return f'Context line not found: "{op.line.strip()}"'

        return None

    def _failure(self, lines: Sequence[str], reason: str, detail: str | None) -> HunkApplyOutcome:
        """Build a failed outcome, appending the detail to the reason when there is one."""
        if detail:
            reason = f"{reason}: {detail}"

        self._tracer.emit(DiffTraceEventType.HUNK_FAILED, f"Hunk failed: {reason}", reason=reason)
        return HunkApplyOutcome(list(lines), False, error_reason=reason)
