"""
Heuristic Fallback Strategy

Strategy of last resort. Mines loose text for exercise-like lines and builds
a minimal, low-confidence workout so callers always receive a usable record.
The result is tagged ``fallback`` so it can be told apart from a real parse.
"""

import logging
import re
import time
from typing import Any, Dict, List, Optional

from workout_response_parser.config import settings
from .base import ParseStrategy
from .models import Exercise, Phase, Workout

logger = logging.getLogger(__name__)

FALLBACK_TAG = "fallback"
FALLBACK_MODEL = "fallback"
FALLBACK_CONFIDENCE = 0.5
FALLBACK_TOTAL_DURATION = 1800
FALLBACK_CALORIES = 200
DESCRIPTION_PREVIEW_CHARS = 200

MOVEMENT_KEYWORDS = ("push", "squat", "jump", "plank", "lunge", "crunch", "burpee")


class HeuristicFallbackStrategy(ParseStrategy):
    """Strategy that synthesizes a workout when nothing else could parse"""

    name = "HeuristicFallback"
    priority = 1

    DIGIT_PATTERN = re.compile(r"\d")
    KEYWORD_PATTERN = re.compile("|".join(MOVEMENT_KEYWORDS), re.IGNORECASE)

    def __init__(
        self,
        *args: Any,
        warmup_count: Optional[int] = None,
        cooldown_count: Optional[int] = None,
        phase_durations: Optional[Dict[str, int]] = None,
        **kwargs: Any,
    ):
        super().__init__(*args, **kwargs)
        self.warmup_count = settings.FALLBACK_WARMUP_COUNT if warmup_count is None else warmup_count
        self.cooldown_count = settings.FALLBACK_COOLDOWN_COUNT if cooldown_count is None else cooldown_count
        self.phase_durations = {
            "warmup": settings.FALLBACK_WARMUP_SEC,
            "mainWorkout": settings.FALLBACK_MAIN_SEC,
            "cooldown": settings.FALLBACK_COOLDOWN_SEC,
        }
        if phase_durations:
            self.phase_durations.update(phase_durations)

    def can_handle(self, response: Any) -> bool:
        """Always applicable"""
        return True

    def parse(self, response: Any) -> Workout:
        """Build a fallback workout from whatever the response contains"""
        logger.warning(f"[{self.name}] creating fallback workout structure")

        text = response if isinstance(response, str) else None
        exercises = self.extract_exercises(text) if text else []
        warmup, main, cooldown = self.partition(exercises)

        if text:
            description = text[:DESCRIPTION_PREVIEW_CHARS] + ("..." if len(text) > DESCRIPTION_PREVIEW_CHARS else "")
        else:
            description = "Workout generated with fallback structure"

        candidate = {
            "id": f"fallback_{int(time.time() * 1000)}",
            "title": "AI Generated Workout",
            "description": description,
            "totalDuration": FALLBACK_TOTAL_DURATION,
            "estimatedCalories": FALLBACK_CALORIES,
            "difficulty": "some experience",
            "equipment": [],
            "warmup": self._phase("Warm-up", self.phase_durations["warmup"], warmup).model_dump(by_alias=True),
            "mainWorkout": self._phase("Main Workout", self.phase_durations["mainWorkout"], main).model_dump(by_alias=True),
            "cooldown": self._phase("Cool-down", self.phase_durations["cooldown"], cooldown).model_dump(by_alias=True),
            "reasoning": "Fallback workout created due to response parsing issues",
            "personalizedNotes": ["This workout was generated using fallback structure"],
            "progressionTips": [],
            "safetyReminders": ["Please ensure proper form throughout the workout"],
            "aiModel": FALLBACK_MODEL,
            "confidence": FALLBACK_CONFIDENCE,
            "tags": [FALLBACK_TAG],
        }

        try:
            return self.normalizer.normalize(candidate)
        except Exception as e:
            # The candidate is valid by construction; never let the last resort fail
            logger.exception(f"[{self.name}] normalizing fallback workout failed: {e}")
            return Workout.model_validate({**candidate, "generatedAt": time.time()})

    def extract_exercises(self, text: str) -> List[Exercise]:
        """Turn lines that mention a number and a movement keyword into exercises"""
        lines = [line for line in text.split("\n") if line.strip()]
        exercises = []
        for index, line in enumerate(lines):
            trimmed = line.strip()
            if self.DIGIT_PATTERN.search(trimmed) and self.KEYWORD_PATTERN.search(trimmed):
                exercises.append(self._exercise(trimmed, index))
        logger.debug(f"[{self.name}] extracted {len(exercises)} exercise-like lines")
        return exercises

    def partition(self, exercises: List[Exercise]):
        """Split into (warm-up, main, cool-down): first N, last M, the rest between.

        Follows list slicing, so short lists share exercises between the
        warm-up and cool-down and leave the main phase empty.
        """
        warmup = exercises[:self.warmup_count]
        main = exercises[self.warmup_count:-self.cooldown_count] if self.cooldown_count else exercises[self.warmup_count:]
        cooldown = exercises[-self.cooldown_count:] if self.cooldown_count else []
        return warmup, main, cooldown

    def _phase(self, name: str, duration: int, exercises: List[Exercise]) -> Phase:
        if not exercises:
            exercises = [self._exercise(f"{name} Exercise", 0)]

        per_exercise = duration // len(exercises)
        return Phase(
            name=name,
            duration=duration,
            exercises=[e.model_copy(update={"duration": per_exercise}) for e in exercises],
            instructions=f"Complete {name.lower()} phase",
            tips=[],
        )

    @staticmethod
    def _exercise(name: str, index: int) -> Exercise:
        return Exercise(
            id=f"exercise_{index + 1}",
            name=name,
            description=f"Perform {name.lower()}",
            duration=60,
            form=f"Perform {name.lower()} with proper form",
            movement_type="strength",
        )
