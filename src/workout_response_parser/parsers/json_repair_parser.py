"""
Repair Strategy

Handles string responses that are expected to contain a JSON object:
- Direct parse of the whole string
- Brace-boundary extraction of the object inside surrounding prose
- Truncation detection and completion
- Ordered repair passes for common syntax mistakes
"""

import json
import logging
import time
from typing import Any, Optional

from workout_response_parser.config import settings
from workout_response_parser.diagnostics import REPAIR_PASS, TRUNCATION_DETECTED
from workout_response_parser.errors import ShapeError, StructuralError, SyntaxRepairExhausted
from .base import ParseStrategy
from .models import Workout
from .repair_passes import (
    REPAIR_PASSES,
    complete_truncated,
    detect_truncation,
    find_json_boundaries,
    repair_json,
)

logger = logging.getLogger(__name__)


class RepairStrategy(ParseStrategy):
    """Strategy for string responses that contain (possibly broken) JSON"""

    name = "Repair"
    priority = 90

    def __init__(
        self,
        *args: Any,
        truncation_threshold: Optional[int] = None,
        context_chars: Optional[int] = None,
        **kwargs: Any,
    ):
        super().__init__(*args, **kwargs)
        self.truncation_threshold = (
            settings.TRUNCATION_THRESHOLD if truncation_threshold is None else truncation_threshold
        )
        self.context_chars = settings.ERROR_CONTEXT_CHARS if context_chars is None else context_chars

    def can_handle(self, response: Any) -> bool:
        """Check if the response is a non-empty string"""
        return isinstance(response, str) and len(response.strip()) > 0

    def parse(self, response: Any) -> Workout:
        """Parse the string, extracting and repairing the JSON object if needed"""
        content: str = response
        logger.debug(f"[{self.name}] processing string response ({len(content)} chars)")

        try:
            parsed = json.loads(content)
        except json.JSONDecodeError:
            logger.debug(f"[{self.name}] direct parse failed, trying extraction")
        else:
            return self._normalize(parsed)

        return self._normalize(self.extract(content))

    def extract(self, content: str) -> Any:
        """
        Recover the JSON value embedded in ``content``.

        Raises:
            StructuralError: If there is no '{' ... '}' boundary
            SyntaxRepairExhausted: If no repair pass produced valid JSON
        """
        bounds = find_json_boundaries(content)
        if bounds is None:
            raise StructuralError("No JSON structure boundary found in string")

        first, last = bounds
        fragment = content[first:last + 1]

        truncation = detect_truncation(content, self.truncation_threshold)
        if truncation is not None:
            logger.info(
                f"[{self.name}] potential truncation: {truncation.remaining_chars} chars after "
                f"position {truncation.truncation_point} ({truncation.truncation_percentage}%), "
                f"{len(truncation.unmatched)} unclosed"
            )
            self.emit(
                TRUNCATION_DETECTED,
                True,
                content_length=truncation.content_length,
                truncation_point=truncation.truncation_point,
                remaining_chars=truncation.remaining_chars,
            )
            fragment = complete_truncated(fragment)

        try:
            return json.loads(fragment)
        except json.JSONDecodeError:
            logger.debug(f"[{self.name}] extracted slice is invalid, running repair passes")

        return self.repair(fragment)

    def repair(self, fragment: str) -> Any:
        """Run the ordered repair passes over ``fragment``"""
        started = time.perf_counter()

        def on_pass(pass_name: str, ok: bool) -> None:
            self.emit(REPAIR_PASS, ok, started, **{"pass": pass_name})

        try:
            return repair_json(
                fragment,
                passes=REPAIR_PASSES,
                on_pass=on_pass,
                context_chars=self.context_chars,
            )
        except SyntaxRepairExhausted as e:
            logger.debug(f"[{self.name}] repair exhausted near: {e.context_window!r}")
            raise

    def _normalize(self, parsed: Any) -> Workout:
        if not isinstance(parsed, dict):
            raise ShapeError(f"Expected a JSON object, got {type(parsed).__name__}")
        return self.normalizer.normalize(parsed)
