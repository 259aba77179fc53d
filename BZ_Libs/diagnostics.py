"""
Structured diagnostics for the blur zone subsystem.

Components report what they did as DiagnosticEvent records through an
injected Diagnostics hook instead of writing log lines directly. The default
hook forwards every event to the standard logging module and keeps a bounded
history so callers can inspect events by name.

Classes:
    DiagnosticEvent: One leveled, named event with structured fields
    Diagnostics: Hook that logs events and records recent history
"""

from collections import deque
from dataclasses import dataclass, field
from typing import Any, Deque, Dict, List, Optional
import logging

from BZ_Libs.constants import DIAGNOSTIC_HISTORY_SIZE

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DiagnosticEvent:
    """A single diagnostic record.

    Attributes:
        level: logging level (logging.DEBUG, logging.INFO, ...)
        source: Emitting component, e.g. "path" or "editor"
        name: Stable dotted event name, e.g. "normalize.self_host"
        fields: Structured payload
    """
    level: int
    source: str
    name: str
    fields: Dict[str, Any] = field(default_factory=dict)

    def describe(self) -> str:
        details = ", ".join(f"{key}={value!r}" for key, value in sorted(self.fields.items()))
        return f"[{self.source}] {self.name}" + (f" ({details})" if details else "")


class Diagnostics:
    """
    Diagnostic hook shared by the path layer and the editor.

    Example:
        >>> diagnostics = Diagnostics()
        >>> diagnostics.debug("path", "normalize.verbatim", raw="blob:abc")
        >>> diagnostics.names()
        ['normalize.verbatim']
    """

    def __init__(self, history_size: int = DIAGNOSTIC_HISTORY_SIZE,
                 log: Optional[logging.Logger] = None):
        self._events: Deque[DiagnosticEvent] = deque(maxlen=max(1, int(history_size)))
        self._logger = log or logger

    def emit(self, event: DiagnosticEvent) -> None:
        self._events.append(event)
        if self._logger.isEnabledFor(event.level):
            self._logger.log(event.level, event.describe())

    def debug(self, source: str, name: str, **fields: Any) -> None:
        self.emit(DiagnosticEvent(logging.DEBUG, source, name, fields))

    def info(self, source: str, name: str, **fields: Any) -> None:
        self.emit(DiagnosticEvent(logging.INFO, source, name, fields))

    def warning(self, source: str, name: str, **fields: Any) -> None:
        self.emit(DiagnosticEvent(logging.WARNING, source, name, fields))

    @property
    def events(self) -> List[DiagnosticEvent]:
        return list(self._events)

    def names(self) -> List[str]:
        return [event.name for event in self._events]

    def find(self, name: str) -> List[DiagnosticEvent]:
        """Return recorded events with the given name, oldest first."""
        return [event for event in self._events if event.name == name]

    def last(self) -> Optional[DiagnosticEvent]:
        return self._events[-1] if self._events else None

    def clear(self) -> None:
        self._events.clear()
