"""
Direct Strategy

Handles responses that are already structured values, such as a dict
returned by an SDK's JSON mode or a previously parsed Workout.
"""

import logging
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel

from .base import ParseStrategy
from .models import Workout

logger = logging.getLogger(__name__)


class DirectStrategy(ParseStrategy):
    """Strategy for in-memory structured responses"""

    name = "Direct"
    priority = 100

    def can_handle(self, response: Any) -> bool:
        """Check if the response is a non-null, non-list structured value"""
        return isinstance(response, (Mapping, BaseModel))

    def parse(self, response: Any) -> Workout:
        """Validate and normalize the structured response"""
        logger.debug(f"[{self.name}] normalizing {type(response).__name__} response")
        return self.normalizer.normalize(response)
