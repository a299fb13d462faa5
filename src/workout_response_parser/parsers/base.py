"""
Base Strategy

Abstract base class for all response parsing strategies.
"""

import logging
import time
from abc import ABC, abstractmethod
from typing import Any, Optional

from workout_response_parser.diagnostics import (
    DiagnosticEvent,
    DiagnosticsSink,
    NullDiagnosticsSink,
)
from .models import Workout
from .normalizer import WorkoutNormalizer

logger = logging.getLogger(__name__)


class ParseStrategy(ABC):
    """Abstract base class for response parsing strategies"""

    name: str = "Base"
    priority: int = 0

    def __init__(
        self,
        normalizer: Optional[WorkoutNormalizer] = None,
        sink: Optional[DiagnosticsSink] = None,
    ):
        self.normalizer = normalizer or WorkoutNormalizer()
        self.sink = sink or NullDiagnosticsSink()

    @abstractmethod
    def can_handle(self, response: Any) -> bool:
        """
        Check if this strategy applies to the given response.

        Args:
            response: Raw model response (object, string or anything else)

        Returns:
            True if parse() should be attempted
        """
        pass

    @abstractmethod
    def parse(self, response: Any) -> Workout:
        """
        Turn the response into a normalized workout.

        Args:
            response: Raw model response accepted by can_handle()

        Returns:
            Normalized Workout

        Raises:
            WorkoutParseError: If this strategy cannot recover a workout
        """
        pass

    def emit(self, name: str, success: bool, started: Optional[float] = None,
             error: Optional[str] = None, **details: Any) -> None:
        """Send a diagnostic event; sink failures never reach the caller"""
        elapsed = (time.perf_counter() - started) * 1000 if started is not None else None
        event = DiagnosticEvent(
            name=name,
            strategy=self.name,
            success=success,
            elapsed_ms=elapsed,
            error=error,
            details=details,
        )
        try:
            self.sink.emit(event)
        except Exception as e:
            logger.warning(f"Diagnostics sink failed for {self.name}: {e}")

    def __repr__(self) -> str:
        return f"{type(self).__name__}(priority={self.priority})"
