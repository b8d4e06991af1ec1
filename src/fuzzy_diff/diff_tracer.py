"""Structured trace events emitted while matching and applying hunks."""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Dict


class DiffTraceEventType(Enum):
    """Kinds of trace event."""

    ANCHOR_FOUND = auto()
    ANCHOR_NOT_FOUND = auto()
    CANDIDATE_REJECTED = auto()
    CANDIDATES_FOUND = auto()
    ATTEMPT_FAILED = auto()
    HUNK_SKIPPED = auto()
    HUNK_APPLIED = auto()
    HUNK_FAILED = auto()
    FILE_UPDATED = auto()
    FILE_BLOCKED = auto()
    FILE_CREATED = auto()
    FILE_OVERWRITE = auto()
    FILE_FAILED = auto()


@dataclass
class DiffTraceEvent:
    """A single trace event."""

    type: DiffTraceEventType
    message: str
    details: Dict[str, Any] = field(default_factory=dict)


class DiffTracer(ABC):
    """Receiver for trace events."""

    @abstractmethod
    def trace(self, event: DiffTraceEvent) -> None:
        """
        Handle a trace event.

        Args:
            event: The event to record
        """

    def emit(self, event_type: DiffTraceEventType, message: str, **details: Any) -> None:
        """Build and dispatch an event."""
        self.trace(DiffTraceEvent(event_type, message, details))


class NullDiffTracer(DiffTracer):
    """Tracer that discards every event."""

    def trace(self, event: DiffTraceEvent) -> None:
        pass


class LoggingDiffTracer(DiffTracer):
    """Tracer that forwards events to a logger."""

    _WARNING_EVENTS = {
        DiffTraceEventType.HUNK_FAILED,
        DiffTraceEventType.FILE_BLOCKED,
        DiffTraceEventType.FILE_OVERWRITE,
        DiffTraceEventType.FILE_FAILED,
    }

    _INFO_EVENTS = {
        DiffTraceEventType.HUNK_APPLIED,
        DiffTraceEventType.HUNK_SKIPPED,
        DiffTraceEventType.FILE_UPDATED,
        DiffTraceEventType.FILE_CREATED,
    }

    def __init__(self, logger: logging.Logger | None = None):
        """
        Initialize the tracer.

        Args:
            logger: Logger to write to; defaults to the "DiffApplier" logger
        """
        self._logger = logger or logging.getLogger("DiffApplier")

    def trace(self, event: DiffTraceEvent) -> None:
        if event.type in self._WARNING_EVENTS:
            level = logging.WARNING

        elif event.type in self._INFO_EVENTS:
            level = logging.INFO

        else:
            level = logging.DEBUG

        self._logger.log(level, "%s", event.message)
