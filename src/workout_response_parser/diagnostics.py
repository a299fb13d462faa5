"""Diagnostic events emitted while parsing.

The parser never stores or displays diagnostics itself. Each event is handed
to a ``DiagnosticsSink`` supplied at construction; the default sink forwards
events to the standard logging module.
"""
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Protocol

logger = logging.getLogger(__name__)

STRATEGY_ATTEMPT = "strategy_attempt"
REPAIR_PASS = "repair_pass"
TRUNCATION_DETECTED = "truncation_detected"


@dataclass(frozen=True)
class DiagnosticEvent:
    """One observation made by the parser."""

    name: str
    strategy: str
    success: bool
    elapsed_ms: Optional[float] = None
    error: Optional[str] = None
    details: Dict[str, Any] = field(default_factory=dict)


class DiagnosticsSink(Protocol):
    def emit(self, event: DiagnosticEvent) -> None:
        ...


class LoggingDiagnosticsSink:
    """Write diagnostic events to the ``workout_response_parser.diagnostics`` logger."""

    def __init__(self, log: Optional[logging.Logger] = None):
        self._log = log or logger

    def emit(self, event: DiagnosticEvent) -> None:
        timing = f" in {event.elapsed_ms:.2f}ms" if event.elapsed_ms is not None else ""
        extras = f" {event.details}" if event.details else ""

        if event.name == REPAIR_PASS:
            outcome = "parsed" if event.success else "still invalid"
            self._log.debug(f"[{event.strategy}] repair pass {event.details.get('pass')}: {outcome}")
        elif event.success:
            self._log.info(f"[{event.strategy}] {event.name} succeeded{timing}{extras}")
        else:
            self._log.warning(f"[{event.strategy}] {event.name} failed{timing}: {event.error}{extras}")


class NullDiagnosticsSink:
    """Discard every event."""

    def emit(self, event: DiagnosticEvent) -> None:
        return None


class CollectingDiagnosticsSink:
    """Keep events in memory, in emission order."""

    def __init__(self):
        self.events: List[DiagnosticEvent] = []

    def emit(self, event: DiagnosticEvent) -> None:
        self.events.append(event)

    def named(self, name: str) -> List[DiagnosticEvent]:
        return [e for e in self.events if e.name == name]
