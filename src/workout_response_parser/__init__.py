"""Tolerant parsing of generative-model workout responses."""
from .errors import (
    ConfigurationError,
    ShapeError,
    StructuralError,
    SyntaxRepairExhausted,
    WorkoutParseError,
)
from .parsers.models import (
    DifficultyAdjustment,
    Exercise,
    ExerciseModification,
    ParseMetrics,
    ParseResult,
    Phase,
    ResponseValidation,
    Workout,
)
from .services.response_parser import ResponseParser, default_strategies, parse

__all__ = [
    "ConfigurationError",
    "DifficultyAdjustment",
    "Exercise",
    "ExerciseModification",
    "ParseMetrics",
    "ParseResult",
    "Phase",
    "ResponseParser",
    "ResponseValidation",
    "ShapeError",
    "StructuralError",
    "SyntaxRepairExhausted",
    "Workout",
    "WorkoutParseError",
    "default_strategies",
    "parse",
]
