"""
Workout Normalizer

Validates an already-structured candidate against the workout shape and fills
the documented defaults. Every strategy hands its candidate object to
``WorkoutNormalizer.normalize`` before returning, so all parsed workouts share
one shape regardless of where they came from.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

from pydantic import BaseModel, ValidationError
from pydantic.alias_generators import to_camel

from workout_response_parser.config import settings
from workout_response_parser.errors import ShapeError
from workout_response_parser.utils import as_list, coerce_float, coerce_int
from .models import ResponseValidation, Workout

logger = logging.getLogger(__name__)

# (candidate key, display name, default duration attribute on settings)
PHASES: Tuple[Tuple[str, str, str], ...] = (
    ("warmup", "Warm-up", "FALLBACK_WARMUP_SEC"),
    ("mainWorkout", "Main Workout", "FALLBACK_MAIN_SEC"),
    ("cooldown", "Cool-down", "FALLBACK_COOLDOWN_SEC"),
)

REQUIRED_FIELDS = ("id", "title")

DEFAULT_CALORIES = 200
DEFAULT_DIFFICULTY = "some experience"
DEFAULT_AI_MODEL = "unknown"
DEFAULT_MOVEMENT_TYPE = "strength"
DEFAULT_MODIFICATION_TYPE = "easier"


def _snake(key: str) -> str:
    return "".join(f"_{c.lower()}" if c.isupper() else c for c in key)


def _pick(data: Mapping[str, Any], key: str) -> Any:
    """Look a field up by its camelCase or snake_case spelling."""
    camel = to_camel(key) if "_" in key else key
    for candidate in (camel, _snake(camel)):
        if candidate in data and data[candidate] is not None:
            return data[candidate]
    return None


def _text(value: Any, default: str = "") -> str:
    if value is None:
        return default
    if isinstance(value, (list, tuple)):
        value = " ".join(str(v) for v in value if v is not None)
    text = str(value).strip()
    return text if text else default


def _str_list(value: Any) -> List[str]:
    return [str(v).strip() for v in as_list(value) if v is not None and str(v).strip()]


def _url(value: Any) -> Optional[str]:
    return value.strip() if isinstance(value, str) and value.strip() else None


def _modification(value: Any) -> Union[Dict[str, str], str, None]:
    if isinstance(value, str):
        return value.strip() or None
    if not isinstance(value, Mapping):
        return None
    return {
        "type": _text(value.get("type"), DEFAULT_MODIFICATION_TYPE),
        "description": _text(value.get("description")),
        "instructions": _text(value.get("instructions")),
    }


def _difficulty_adjustment(value: Any) -> Optional[Dict[str, str]]:
    if isinstance(value, str):
        value = {"modification": value}
    if not isinstance(value, Mapping):
        return None
    return {
        "level": _text(value.get("level"), DEFAULT_DIFFICULTY),
        "modification": _text(value.get("modification")),
        "reasoning": _text(value.get("reasoning")),
    }


def _parse_timestamp(value: Any) -> Optional[datetime]:
    if isinstance(value, datetime):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        try:
            # Epoch milliseconds, as produced by JavaScript Date.now()
            return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None
    if isinstance(value, str):
        try:
            return datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
        except ValueError:
            return None
    return None


class WorkoutNormalizer:
    """Shape validation and default filling for workout candidates"""

    def __init__(
        self,
        default_confidence: Optional[float] = None,
        phase_durations: Optional[Dict[str, int]] = None,
    ):
        self.default_confidence = (
            settings.DEFAULT_CONFIDENCE if default_confidence is None else default_confidence
        )
        self.phase_durations = {
            key: getattr(settings, attr) for key, _, attr in PHASES
        }
        if phase_durations:
            self.phase_durations.update(phase_durations)

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    def validate(self, candidate: Any) -> ResponseValidation:
        """
        Structural pre-check of a candidate.

        Missing identity fields, phases or phase exercise lists make the
        candidate invalid. Fields that are present but unusable are listed in
        ``invalid_fields``; only structural ones (phases and exercise lists)
        make the candidate invalid, the rest fall back to defaults.
        """
        data = self._as_mapping(candidate)
        if data is None:
            return ResponseValidation(
                is_valid=False,
                invalid_fields=["<root>"],
            )

        missing: List[str] = []
        invalid: List[str] = []
        structural_invalid = False

        for key in REQUIRED_FIELDS:
            if not _text(data.get(key)):
                missing.append(key)

        for key, _, _ in PHASES:
            phase = _pick(data, key)
            if phase is None:
                missing.append(key)
                continue
            if not isinstance(phase, Mapping):
                invalid.append(key)
                structural_invalid = True
                continue
            exercises = phase.get("exercises")
            if exercises is None:
                missing.append(f"{key}.exercises")
            elif not isinstance(exercises, (list, tuple)):
                invalid.append(f"{key}.exercises")
                structural_invalid = True

        for key in ("total_duration", "estimated_calories"):
            value = _pick(data, key)
            if value is not None and coerce_int(value) is None:
                invalid.append(to_camel(key))

        confidence = _pick(data, "confidence")
        if confidence is not None:
            parsed = coerce_float(confidence)
            if parsed is None or not 0 <= parsed <= 1:
                invalid.append("confidence")

        generated_at = _pick(data, "generated_at")
        if generated_at is not None and _parse_timestamp(generated_at) is None:
            invalid.append("generatedAt")

        return ResponseValidation(
            is_valid=not missing and not structural_invalid,
            missing_fields=missing,
            invalid_fields=invalid,
        )

    # ------------------------------------------------------------------
    # Normalization
    # ------------------------------------------------------------------

    def normalize(self, candidate: Any) -> Workout:
        """
        Validate a candidate object and return a normalized Workout.

        Args:
            candidate: Mapping (or pydantic model) in workout shape

        Returns:
            Frozen Workout with every optional field defaulted

        Raises:
            ShapeError: If identity fields, phases or exercise lists are missing
        """
        data = self._as_mapping(candidate)
        if data is None:
            raise ShapeError(
                f"Expected a workout object, got {type(candidate).__name__}",
                ResponseValidation(is_valid=False, invalid_fields=["<root>"]),
            )

        validation = self.validate(data)
        if not validation.is_valid:
            problems = []
            if validation.missing_fields:
                problems.append(f"missing {', '.join(validation.missing_fields)}")
            structural = [f for f in validation.invalid_fields if f.split(".")[0] in self.phase_durations]
            if structural:
                problems.append(f"invalid {', '.join(structural)}")
            raise ShapeError(f"Workout shape invalid: {'; '.join(problems)}", validation)

        phases = {
            key: self._normalize_phase(_pick(data, key), key, label)
            for key, label, _ in PHASES
        }

        total_duration = coerce_int(_pick(data, "total_duration"))
        if total_duration is None or total_duration < 0:
            total_duration = sum(p["duration"] for p in phases.values())

        calories = coerce_int(_pick(data, "estimated_calories"))

        confidence = coerce_float(_pick(data, "confidence"))
        if confidence is None or not 0 <= confidence <= 1:
            confidence = self.default_confidence

        generated_at = _parse_timestamp(_pick(data, "generated_at"))

        normalized = {
            "id": _text(data.get("id")),
            "title": _text(data.get("title")),
            "description": _text(data.get("description")),
            "totalDuration": total_duration,
            "estimatedCalories": DEFAULT_CALORIES if calories is None else calories,
            "difficulty": _text(data.get("difficulty"), DEFAULT_DIFFICULTY),
            "equipment": _str_list(data.get("equipment")),
            "warmup": phases["warmup"],
            "mainWorkout": phases["mainWorkout"],
            "cooldown": phases["cooldown"],
            "reasoning": _text(data.get("reasoning")),
            "personalizedNotes": _str_list(_pick(data, "personalized_notes")),
            "progressionTips": _str_list(_pick(data, "progression_tips")),
            "safetyReminders": _str_list(_pick(data, "safety_reminders")),
            "generatedAt": generated_at or datetime.now(timezone.utc),
            "aiModel": _text(_pick(data, "ai_model"), DEFAULT_AI_MODEL),
            "confidence": confidence,
            "tags": _str_list(data.get("tags")),
        }

        try:
            return Workout.model_validate(normalized)
        except ValidationError as e:
            logger.debug(f"[normalizer] model validation failed: {e}")
            raise ShapeError(f"Workout failed model validation: {e.error_count()} error(s)", validation) from e

    def _normalize_phase(self, raw: Mapping[str, Any], key: str, label: str) -> Dict[str, Any]:
        exercises = []
        for index, item in enumerate(raw.get("exercises") or []):
            exercise = self._normalize_exercise(item, key, label, index)
            if exercise is not None:
                exercises.append(exercise)

        duration = coerce_int(raw.get("duration"))
        if duration is None or duration < 0:
            timed = [e["duration"] for e in exercises if e["duration"]]
            duration = sum(timed) if timed else self.phase_durations[key]

        instructions = raw.get("instructions")

        return {
            "name": _text(raw.get("name"), label),
            "duration": duration,
            "exercises": exercises,
            "instructions": _text(instructions) if instructions is not None else None,
            "tips": _str_list(raw.get("tips")),
        }

    def _normalize_exercise(
        self,
        raw: Any,
        phase_key: str,
        phase_label: str,
        index: int,
    ) -> Optional[Dict[str, Any]]:
        if isinstance(raw, str):
            if not raw.strip():
                return None
            raw = {"name": raw}
        if not isinstance(raw, Mapping):
            logger.debug(f"[normalizer] dropping {type(raw).__name__} entry in {phase_key}.exercises")
            return None

        name = _text(raw.get("name") or raw.get("exercise"), f"{phase_label} Exercise {index + 1}")
        weight = raw.get("weight")
        if not isinstance(weight, (int, float, str)) or isinstance(weight, bool):
            weight = None

        modifications = [m for m in map(_modification, as_list(raw.get("modifications"))) if m]
        adjustments = [
            a for a in map(_difficulty_adjustment, as_list(_pick(raw, "difficulty_adjustments"))) if a
        ]

        notes = raw.get("notes")
        reps = _pick(raw, "reps")
        if reps is None:
            reps = raw.get("repetitions")

        return {
            "id": _text(raw.get("id"), f"{phase_key}_exercise_{index + 1}"),
            "name": name,
            "description": _text(raw.get("description"), f"Perform {name.lower()}"),
            "duration": coerce_int(raw.get("duration")),
            "sets": coerce_int(raw.get("sets")),
            "reps": coerce_int(reps),
            "restTime": coerce_int(_pick(raw, "rest_time")),
            "weight": weight,
            "equipment": _str_list(raw.get("equipment")),
            "form": _text(raw.get("form"), f"Perform {name.lower()} with proper form"),
            "instructions": _str_list(raw.get("instructions")),
            "modifications": modifications,
            "commonMistakes": _str_list(_pick(raw, "common_mistakes")),
            "notes": _text(notes) if notes is not None else None,
            "primaryMuscles": _str_list(_pick(raw, "primary_muscles")),
            "secondaryMuscles": _str_list(_pick(raw, "secondary_muscles")),
            "movementType": _text(_pick(raw, "movement_type"), DEFAULT_MOVEMENT_TYPE),
            "videoUrl": _url(_pick(raw, "video_url")),
            "imageUrl": _url(_pick(raw, "image_url")),
            "personalizedNotes": _str_list(_pick(raw, "personalized_notes")),
            "difficultyAdjustments": adjustments,
        }

    @staticmethod
    def _as_mapping(candidate: Any) -> Optional[Mapping[str, Any]]:
        if isinstance(candidate, BaseModel):
            return candidate.model_dump(by_alias=True)
        if isinstance(candidate, Mapping):
            return candidate
        return None


def structure_score(workout: Workout) -> float:
    """
    Score 0-100 for how complete a normalized workout is.

    Phases earn 10 points each, exercises 5 points each up to 40, and the
    title, description, reasoning, personalized notes and safety reminders
    earn the remaining 30.
    """
    score = 10 * len(workout.phases)

    exercise_count = sum(len(p.exercises) for p in workout.phases)
    score += min(exercise_count * 5, 40)

    if workout.title:
        score += 5
    if workout.description:
        score += 5
    if workout.reasoning:
        score += 10
    if workout.personalized_notes:
        score += 5
    if workout.safety_reminders:
        score += 5

    return float(min(score, 100))
