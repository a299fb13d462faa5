"""
Fence Extraction Strategy

Handles responses wrapped in markdown code fences, for example::

    Here's your workout:
    ```json
    {"id": "w1", ...}
    ```

The first ``json``-tagged block is tried first, then the first generic block
not already tried.
"""

import json
import logging
import re
from typing import Any, List, Optional

from workout_response_parser.config import settings
from workout_response_parser.errors import StructuralError, WorkoutParseError
from .base import ParseStrategy
from .models import Workout
from .repair_passes import REPAIR_PASSES, repair_json

logger = logging.getLogger(__name__)

FENCE_MARKER = "```"


class FenceExtractionStrategy(ParseStrategy):
    """Strategy for JSON inside markdown fenced code blocks"""

    name = "FenceExtraction"
    priority = 95

    JSON_FENCE_PATTERN = re.compile(r"```[ \t]*json[ \t]*\r?\n?(.*?)```", re.IGNORECASE | re.DOTALL)
    GENERIC_FENCE_PATTERN = re.compile(r"```[ \t]*[\w+-]*[ \t]*\r?\n?(.*?)```", re.DOTALL)

    def __init__(self, *args: Any, context_chars: Optional[int] = None, **kwargs: Any):
        super().__init__(*args, **kwargs)
        self.context_chars = settings.ERROR_CONTEXT_CHARS if context_chars is None else context_chars

    def can_handle(self, response: Any) -> bool:
        """Check if the response is a string containing a code fence"""
        return isinstance(response, str) and FENCE_MARKER in response

    def parse(self, response: Any) -> Workout:
        """Extract the fenced block and parse it"""
        content: str = response
        errors: List[str] = []
        tried = set()

        for label, pattern in (("json", self.JSON_FENCE_PATTERN), ("generic", self.GENERIC_FENCE_PATTERN)):
            match = next((m for m in pattern.finditer(content) if m.span() not in tried), None)
            if match is None:
                continue
            tried.add(match.span())

            inner = match.group(1).strip()
            logger.debug(f"[{self.name}] found {label} fence ({len(inner)} chars)")
            try:
                return self._parse_block(inner)
            except WorkoutParseError as e:
                logger.debug(f"[{self.name}] {label} fence unusable: {e}")
                errors.append(f"{label} fence: {e}")

        if not errors:
            raise StructuralError("No complete fenced code block found")
        raise StructuralError(f"No fenced block held a workout ({'; '.join(errors)})")

    def _parse_block(self, inner: str) -> Workout:
        try:
            parsed = json.loads(inner)
        except json.JSONDecodeError:
            parsed = repair_json(inner, passes=REPAIR_PASSES, context_chars=self.context_chars)
        return self.normalizer.normalize(parsed)
