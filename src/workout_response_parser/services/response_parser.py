"""Response parser: runs the strategy chain over a raw model response."""
from __future__ import annotations

import logging
import time
from typing import Any, List, Optional, Sequence, Tuple

from workout_response_parser.config import settings
from workout_response_parser.diagnostics import (
    STRATEGY_ATTEMPT,
    DiagnosticEvent,
    DiagnosticsSink,
    LoggingDiagnosticsSink,
)
from workout_response_parser.errors import ConfigurationError
from workout_response_parser.parsers.base import ParseStrategy
from workout_response_parser.parsers.direct_parser import DirectStrategy
from workout_response_parser.parsers.fallback_parser import HeuristicFallbackStrategy
from workout_response_parser.parsers.fence_parser import FenceExtractionStrategy
from workout_response_parser.parsers.json_repair_parser import RepairStrategy
from workout_response_parser.parsers.models import ParseMetrics, ParseResult, Workout
from workout_response_parser.parsers.normalizer import WorkoutNormalizer, structure_score
from workout_response_parser.parsers.repair_passes import detect_truncation

logger = logging.getLogger(__name__)

_ENCODINGS = ("utf-8", "utf-8-sig", "latin-1")


def decode_content(content: bytes) -> str:
    """Decode bytes to string"""
    for encoding in _ENCODINGS:
        try:
            return content.decode(encoding)
        except UnicodeDecodeError:
            continue
    return content.decode("utf-8", errors="replace")


def default_strategies(
    sink: Optional[DiagnosticsSink] = None,
    normalizer: Optional[WorkoutNormalizer] = None,
) -> List[ParseStrategy]:
    """The standard chain: Direct, FenceExtraction, Repair, HeuristicFallback."""
    normalizer = normalizer or WorkoutNormalizer()
    return [
        DirectStrategy(normalizer=normalizer, sink=sink),
        FenceExtractionStrategy(normalizer=normalizer, sink=sink),
        RepairStrategy(normalizer=normalizer, sink=sink),
        HeuristicFallbackStrategy(normalizer=normalizer, sink=sink),
    ]


class ResponseParser:
    """Turn any model response into a ParseResult holding a normalized Workout."""

    def __init__(
        self,
        strategies: Optional[Sequence[ParseStrategy]] = None,
        sink: Optional[DiagnosticsSink] = None,
        truncation_threshold: Optional[int] = None,
    ):
        self.sink = sink or LoggingDiagnosticsSink()
        chain = list(strategies) if strategies is not None else default_strategies(self.sink)
        if not chain:
            raise ConfigurationError("ResponseParser needs at least one strategy")

        # Stable sort keeps registration order between equal priorities
        self.strategies: Tuple[ParseStrategy, ...] = tuple(
            sorted(chain, key=lambda s: s.priority, reverse=True)
        )
        self.truncation_threshold = (
            settings.TRUNCATION_THRESHOLD if truncation_threshold is None else truncation_threshold
        )

    def parse(self, response: Any) -> ParseResult:
        """
        Run the strategy chain over ``response``.

        Args:
            response: Structured object, string (possibly fenced, truncated
                or free text), bytes, or anything else

        Returns:
            ParseResult; with the default chain ``success`` is always True and
            unparseable input yields a low-confidence fallback workout

        Raises:
            ConfigurationError: If no strategy in the chain accepts the input
        """
        started = time.perf_counter()
        if isinstance(response, (bytes, bytearray)):
            response = decode_content(bytes(response))

        issues: List[str] = []
        attempted = False

        for strategy in self.strategies:
            if not self._can_handle(strategy, response, issues):
                continue

            attempted = True
            attempt_started = time.perf_counter()
            try:
                workout = strategy.parse(response)
            except Exception as e:
                message = str(e) or type(e).__name__
                issues.append(f"{strategy.name} failed: {message}")
                logger.warning(f"[response_parser] {strategy.name} failed: {message}")
                self._emit(strategy.name, False, attempt_started, message)
                continue

            self._emit(strategy.name, True, attempt_started)
            return self._result(True, workout, strategy.name, issues, response, started)

        if not attempted:
            raise ConfigurationError(
                f"No parsing strategy accepted input of type {type(response).__name__}"
            )

        logger.error(f"[response_parser] all strategies failed: {issues}")
        return self._result(False, None, "none", issues, response, started)

    def _can_handle(self, strategy: ParseStrategy, response: Any, issues: List[str]) -> bool:
        try:
            return bool(strategy.can_handle(response))
        except Exception as e:
            issues.append(f"{strategy.name} failed: can_handle raised {e}")
            logger.warning(f"[response_parser] {strategy.name}.can_handle raised: {e}")
            return False

    def _emit(self, strategy_name: str, success: bool, started: float, error: Optional[str] = None) -> None:
        event = DiagnosticEvent(
            name=STRATEGY_ATTEMPT,
            strategy=strategy_name,
            success=success,
            elapsed_ms=(time.perf_counter() - started) * 1000,
            error=error,
        )
        try:
            self.sink.emit(event)
        except Exception as e:
            logger.warning(f"[response_parser] diagnostics sink failed: {e}")

    def _result(
        self,
        success: bool,
        workout: Optional[Workout],
        strategy_name: str,
        issues: List[str],
        response: Any,
        started: float,
    ) -> ParseResult:
        metrics = ParseMetrics(validation_score=structure_score(workout) if workout else None)
        if isinstance(response, str):
            truncation = detect_truncation(response, self.truncation_threshold)
            metrics = metrics.model_copy(update={
                "content_length": len(response),
                "truncation_point": truncation.truncation_point if truncation else None,
            })

        return ParseResult(
            success=success,
            data=workout,
            strategy=strategy_name,
            issues=issues,
            processing_time=(time.perf_counter() - started) * 1000,
            metrics=metrics,
        )


_default_parser: Optional[ResponseParser] = None


def parse(response: Any) -> ParseResult:
    """Parse a model response with the default strategy chain."""
    global _default_parser
    if _default_parser is None:
        _default_parser = ResponseParser()
    return _default_parser.parse(response)
