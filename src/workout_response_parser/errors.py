"""Error taxonomy for the workout response parser."""
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from workout_response_parser.parsers.models import ResponseValidation


class WorkoutParseError(Exception):
    """Base class for strategy-local parse failures."""


class StructuralError(WorkoutParseError):
    """Raised when text input has no JSON-like boundary to work from."""


class SyntaxRepairExhausted(WorkoutParseError):
    """Raised when every repair pass failed to produce parseable JSON.

    The text around the last decode error is kept on ``context_window`` for
    diagnostics; it is not part of ``str(exc)``.
    """

    def __init__(
        self,
        message: str,
        position: Optional[int] = None,
        context_window: str = "",
        passes_attempted: int = 0,
    ):
        super().__init__(message)
        self.position = position
        self.context_window = context_window
        self.passes_attempted = passes_attempted


class ShapeError(WorkoutParseError):
    """Raised when a parsed value does not have the workout shape."""

    def __init__(self, message: str, validation: Optional["ResponseValidation"] = None):
        super().__init__(message)
        self.validation = validation


class ConfigurationError(RuntimeError):
    """Raised when no strategy in the chain accepts an input."""
