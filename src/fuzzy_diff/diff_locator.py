"""Content-based location of hunks within a line buffer."""

import math
from typing import List, Sequence

from fuzzy_diff.diff_normalizer import normalize_line, normalize_lines
from fuzzy_diff.diff_settings import DiffApplierSettings
from fuzzy_diff.diff_tracer import DiffTraceEventType, DiffTracer, NullDiffTracer
from fuzzy_diff.diff_types import DiffOperation, MatchCandidate, OperationType


class DiffLocator:
    """
    Finds plausible apply offsets for a hunk without trusting its line numbers.

    Every comparison is made between normalized keys (see `normalize_line`), so
    re-indented or re-spaced source still matches.
    """

    def __init__(self, settings: DiffApplierSettings | None = None, tracer: DiffTracer | None = None):
        """
        Initialize the locator.

        Args:
            settings: Heuristic settings; defaults are used if not provided
            tracer: Receiver for trace events; events are discarded if not provided
        """
        self._settings = settings or DiffApplierSettings()
        self._tracer = tracer or NullDiffTracer()

    def find_anchor(self, lines: Sequence[str], header_context: str | None) -> int:
        """
        Find the search start position implied by a hunk's header context.

        An exact (normalized) match is preferred; failing that, the first line that
        contains the header context is used.

        Args:
            lines: Current buffer
            header_context: Text that followed the hunk's @@ marker, if any

        Returns:
            Index just after the matched header line, or 0 if there is no match
        """
        if not header_context:
            return 0

        wanted = normalize_line(header_context)
        if not wanted:
            return 0

        keys = normalize_lines(list(lines))

        for i, key in enumerate(keys):
            if key == wanted:
                self._tracer.emit(
                    DiffTraceEventType.ANCHOR_FOUND,
                    f"Found exact header match at line {i + 1}",
                    line=i + 1,
                    exact=True
                )
                return i + 1

        for i, key in enumerate(keys):
            if wanted in key:
                self._tracer.emit(
                    DiffTraceEventType.ANCHOR_FOUND,
                    f"Found partial header match at line {i + 1}",
                    line=i + 1,
                    exact=False
                )
                return i + 1

        self._tracer.emit(
            DiffTraceEventType.ANCHOR_NOT_FOUND,
            f"Header anchor not found, using start of file: {header_context!r}",
            header_context=header_context
        )
        return 0

    def find_candidates(
        self,
        lines: Sequence[str],
        operations: Sequence[DiffOperation],
        anchor: int = 0
    ) -> List[MatchCandidate]:
        """
        Find and rank every plausible start position for a hunk.

        Args:
            lines: Current buffer
            operations: The hunk's operations
            anchor: Position from which to start searching

        Returns:
            Candidates ordered best first; empty if the hunk cannot be placed
        """
        context_keys = [normalize_line(op.line) for op in operations if op.type == OperationType.CONTEXT]
        remove_keys = [normalize_line(op.line) for op in operations if op.type == OperationType.REMOVE]
        total = len(operations)

        if not context_keys and not remove_keys:
            return [MatchCandidate(anchor, 0, 0, total)]

        keys = normalize_lines(list(lines))

        if context_keys:
            candidates = self._find_context_candidates(keys, context_keys, remove_keys, anchor, total)

        else:
            candidates = self._find_removal_candidates(keys, remove_keys, anchor, total)

        # sort() is stable, so equal scores keep discovery order
        candidates.sort(key=lambda c: c.score, reverse=True)

        self._tracer.emit(
            DiffTraceEventType.CANDIDATES_FOUND,
            f"Found {len(candidates)} candidate position(s)",
            positions=[c.start_pos for c in candidates]
        )
        return candidates

    def _find_context_candidates(
        self,
        keys: List[str],
        context_keys: List[str],
        remove_keys: List[str],
        anchor: int,
        total: int
    ) -> List[MatchCandidate]:
        """Scan every offset from the anchor for the context subsequence."""
        candidates: List[MatchCandidate] = []

        remove_matches = 0
        if remove_keys:
            remove_matches = self.count_removal_matches(keys, remove_keys, 0, len(keys))
            threshold = math.floor(self._settings.removal_match_ratio * len(remove_keys))
            if remove_matches < threshold:
                self._tracer.emit(
                    DiffTraceEventType.CANDIDATE_REJECTED,
                    f"Only {remove_matches}/{len(remove_keys)} removal lines found (need {threshold})",
                    remove_matches=remove_matches,
                    threshold=threshold
                )
                return candidates

        for i in range(anchor, len(keys) - len(context_keys) + 1):
            if self.context_sequence_end(keys, context_keys, i) is None:
                continue

            candidates.append(MatchCandidate(i, len(context_keys), remove_matches, total))

        return candidates

    def _find_removal_candidates(
        self,
        keys: List[str],
        remove_keys: List[str],
        anchor: int,
        total: int
    ) -> List[MatchCandidate]:
        """Probe a few positions around the anchor for hunks with no context lines."""
        candidates: List[MatchCandidate] = []
        window = self._settings.removal_probe_window
        last = max(0, len(keys) - 1)
        seen = set()

        for offset in self._settings.removal_probe_offsets:
            if offset < 0:
                pos = max(0, anchor + offset)

            elif offset > 0:
                pos = min(last, anchor + offset)

            else:
                pos = anchor

            if pos in seen:
                continue

            seen.add(pos)

            start = max(0, pos - window)
            end = min(len(keys), pos + window)
            matches = self.count_removal_matches(keys, remove_keys, start, end)
            if matches == len(remove_keys):
                candidates.append(MatchCandidate(pos, 0, matches, total))

        return candidates

    def context_sequence_end(self, keys: Sequence[str], context_keys: Sequence[str], start: int) -> int | None:
        """
        Check that the context keys occur in order (not necessarily adjacent) from `start`.

        Args:
            keys: Normalized buffer
            context_keys: Normalized context lines
            start: First buffer index to consider

        Returns:
            Index just after the last matched context line, or None if the sequence is absent
        """
        pos = start
        for wanted in context_keys:
            while pos < len(keys) and keys[pos] != wanted:
                pos += 1

            if pos >= len(keys):
                return None

            pos += 1

        return pos

    def count_removal_matches(self, keys: Sequence[str], remove_keys: Sequence[str], start: int, end: int) -> int:
        """
        Count removal keys found in `keys[start:end]`, using each buffer line at most once.

        Args:
            keys: Normalized buffer
            remove_keys: Normalized removal lines
            start: First buffer index searched
            end: One past the last buffer index searched

        Returns:
            Number of removal keys matched
        """
        used = set()
        matches = 0

        for wanted in remove_keys:
            for j in range(start, end):
                if j not in used and keys[j] == wanted:
                    used.add(j)
                    matches += 1
                    break

        return matches
