"""Configuration settings for the workout response parser."""
import os

from workout_response_parser.utils import to_float, to_int


def _env_int(name: str, default: int) -> int:
    value = to_int(os.getenv(name))
    return default if value is None else value


def _env_float(name: str, default: float) -> float:
    value = to_float(os.getenv(name))
    return default if value is None else value


class Settings:
    """Parser settings."""

    # Truncation detection
    TRUNCATION_THRESHOLD: int = 50
    ERROR_CONTEXT_CHARS: int = 50

    # Fallback record construction
    FALLBACK_WARMUP_COUNT: int = 2
    FALLBACK_COOLDOWN_COUNT: int = 2
    FALLBACK_WARMUP_SEC: int = 300
    FALLBACK_MAIN_SEC: int = 1200
    FALLBACK_COOLDOWN_SEC: int = 300

    # Normalization defaults
    DEFAULT_CONFIDENCE: float = 0.8

    def __init__(self):
        self.TRUNCATION_THRESHOLD = _env_int("WORKOUT_PARSER_TRUNCATION_THRESHOLD", 50)
        self.ERROR_CONTEXT_CHARS = _env_int("WORKOUT_PARSER_ERROR_CONTEXT_CHARS", 50)

        self.FALLBACK_WARMUP_COUNT = _env_int("WORKOUT_PARSER_FALLBACK_WARMUP_COUNT", 2)
        self.FALLBACK_COOLDOWN_COUNT = _env_int("WORKOUT_PARSER_FALLBACK_COOLDOWN_COUNT", 2)
        self.FALLBACK_WARMUP_SEC = _env_int("WORKOUT_PARSER_FALLBACK_WARMUP_SEC", 300)
        self.FALLBACK_MAIN_SEC = _env_int("WORKOUT_PARSER_FALLBACK_MAIN_SEC", 1200)
        self.FALLBACK_COOLDOWN_SEC = _env_int("WORKOUT_PARSER_FALLBACK_COOLDOWN_SEC", 300)

        confidence = _env_float("WORKOUT_PARSER_DEFAULT_CONFIDENCE", 0.8)
        self.DEFAULT_CONFIDENCE = confidence if 0 <= confidence <= 1 else 0.8


settings = Settings()
