"""
Test fixtures for workout-response-parser.

Provides sample model responses (structured, JSON text, fenced and broken)
and an in-memory diagnostics sink for deterministic, offline testing.
"""

import copy
import json
import sys
from pathlib import Path
from typing import Any, Dict

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"

# Make src/ importable so tests can do `import workout_response_parser...`
for p in {ROOT, SRC}:
    p_str = str(p)
    if p_str not in sys.path:
        sys.path.insert(0, p_str)

from workout_response_parser.diagnostics import CollectingDiagnosticsSink


# ---------------------------------------------------------------------------
# Sample Data
# ---------------------------------------------------------------------------


SAMPLE_WORKOUT: Dict[str, Any] = {
    "id": "w_leg_day",
    "title": "Leg Day",
    "description": "Lower body strength session",
    "totalDuration": 1800,
    "estimatedCalories": 320,
    "difficulty": "some experience",
    "equipment": ["dumbbells"],
    "warmup": {
        "name": "Warm-up",
        "duration": 300,
        "exercises": [
            {
                "id": "wu_1",
                "name": "Jumping Jacks",
                "description": "Light cardio to raise heart rate",
                "duration": 60,
                "primaryMuscles": ["full body"],
                "movementType": "cardio",
            }
        ],
        "instructions": "Ease into the pace",
        "tips": ["Breathe steadily"],
    },
    "mainWorkout": {
        "name": "Main Workout",
        "duration": 1200,
        "exercises": [
            {
                "id": "mw_1",
                "name": "Goblet Squat",
                "description": "Squat holding one dumbbell at the chest",
                "sets": 3,
                "reps": 12,
                "weight": 20,
                "restTime": 60,
                "equipment": ["dumbbells"],
                "primaryMuscles": ["quads"],
                "secondaryMuscles": ["glutes"],
                "instructions": ["Brace the core", "Sit back between the heels"],
                "modifications": [
                    {
                        "type": "easier",
                        "description": "Bodyweight squat",
                        "instructions": "Drop the dumbbell",
                    }
                ],
            },
            {
                "id": "mw_2",
                "name": "Walking Lunge",
                "description": "Alternate legs across the room",
                "sets": 3,
                "reps": 10,
            },
        ],
    },
    "cooldown": {
        "name": "Cool-down",
        "duration": 300,
        "exercises": [
            {
                "id": "cd_1",
                "name": "Hamstring Stretch",
                "description": "Hold each side",
                "duration": 60,
            }
        ],
    },
    "reasoning": "Compound lower body movements match the strength goal",
    "personalizedNotes": ["Keep the dumbbell light on the first set"],
    "progressionTips": ["Add 2kg once all sets feel easy"],
    "safetyReminders": ["Stop if your knees hurt"],
    "generatedAt": "2026-01-15T09:30:00+00:00",
    "aiModel": "gpt-4o-mini",
    "confidence": 0.92,
    "tags": ["legs", "strength"],
}

MINIMAL_WORKOUT: Dict[str, Any] = {
    "id": "w1",
    "title": "Leg Day",
    "warmup": {"exercises": []},
    "mainWorkout": {"exercises": []},
    "cooldown": {"exercises": []},
}


@pytest.fixture
def sample_workout_dict() -> Dict[str, Any]:
    """Complete workout response as the model returns it (camelCase keys)."""
    return copy.deepcopy(SAMPLE_WORKOUT)


@pytest.fixture
def minimal_workout_dict() -> Dict[str, Any]:
    """Smallest candidate the normalizer accepts."""
    return copy.deepcopy(MINIMAL_WORKOUT)


@pytest.fixture
def sample_workout_json() -> str:
    """Sample workout as a pretty-printed JSON string."""
    return json.dumps(SAMPLE_WORKOUT, indent=2)


@pytest.fixture
def diagnostics_sink() -> CollectingDiagnosticsSink:
    """Sink that records every diagnostic event."""
    return CollectingDiagnosticsSink()
