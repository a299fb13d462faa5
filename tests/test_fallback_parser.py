"""
Tests for HeuristicFallbackStrategy.

The fallback must always produce a valid, clearly-marked workout.
"""

import pytest

from workout_response_parser.parsers.fallback_parser import HeuristicFallbackStrategy
from workout_response_parser.parsers.models import Workout

PLAN_TEXT = """Here is a quick session:
1. 10 push-ups
2. 20 squats
Rest well between rounds
3. 30s plank
4. 12 lunges
5. 15 crunches
6. 10 burpees"""


@pytest.fixture
def strategy():
    return HeuristicFallbackStrategy()


class TestExtractExercises:
    """Tests for extract_exercises."""

    def test_keyword_and_digit_lines(self, strategy):
        exercises = strategy.extract_exercises(PLAN_TEXT)
        assert [e.name for e in exercises] == [
            "1. 10 push-ups",
            "2. 20 squats",
            "3. 30s plank",
            "4. 12 lunges",
            "5. 15 crunches",
            "6. 10 burpees",
        ]

    def test_ids_follow_line_position(self, strategy):
        exercises = strategy.extract_exercises(PLAN_TEXT)
        assert [e.id for e in exercises] == [
            "exercise_2",
            "exercise_3",
            "exercise_5",
            "exercise_6",
            "exercise_7",
            "exercise_8",
        ]

    def test_keywords_case_insensitive(self, strategy):
        assert len(strategy.extract_exercises("PUSH UPS x 10")) == 1

    def test_needs_a_digit(self, strategy):
        assert strategy.extract_exercises("push ups until tired") == []

    def test_exercise_defaults(self, strategy):
        exercise = strategy.extract_exercises("10 squats")[0]
        assert exercise.description == "Perform 10 squats"
        assert exercise.form == "Perform 10 squats with proper form"
        assert exercise.movement_type == "strength"


class TestPartition:
    """Tests for partition."""

    def test_six_exercises(self, strategy):
        warmup, main, cooldown = strategy.partition(list(range(6)))
        assert warmup == [0, 1]
        assert main == [2, 3]
        assert cooldown == [4, 5]

    def test_one_exercise_shared(self, strategy):
        warmup, main, cooldown = strategy.partition(["a"])
        assert warmup == ["a"]
        assert main == []
        assert cooldown == ["a"]

    def test_custom_counts(self):
        warmup, main, cooldown = HeuristicFallbackStrategy(warmup_count=1, cooldown_count=1).partition([1, 2, 3])
        assert (warmup, main, cooldown) == ([1], [2], [3])


class TestParse:
    """Tests for parse."""

    def test_marked_as_fallback(self, strategy):
        workout = strategy.parse("no structure here")

        assert isinstance(workout, Workout)
        assert workout.is_fallback
        assert workout.tags == ["fallback"]
        assert workout.ai_model == "fallback"
        assert workout.confidence == 0.5
        assert workout.id.startswith("fallback_")
        assert workout.title == "AI Generated Workout"

    def test_phases_from_text(self, strategy):
        workout = strategy.parse(PLAN_TEXT)

        assert [e.name for e in workout.warmup.exercises] == ["1. 10 push-ups", "2. 20 squats"]
        assert [e.name for e in workout.main_workout.exercises] == ["3. 30s plank", "4. 12 lunges"]
        assert [e.name for e in workout.cooldown.exercises] == ["5. 15 crunches", "6. 10 burpees"]

    def test_durations_split_across_exercises(self, strategy):
        workout = strategy.parse(PLAN_TEXT)

        assert [p.duration for p in workout.phases] == [300, 1200, 300]
        assert [e.duration for e in workout.warmup.exercises] == [150, 150]
        assert [e.duration for e in workout.main_workout.exercises] == [600, 600]
        assert workout.total_duration == 1800

    def test_placeholder_exercises(self, strategy):
        workout = strategy.parse("nothing useful")

        for phase, label in zip(workout.phases, ("Warm-up", "Main Workout", "Cool-down")):
            assert len(phase.exercises) == 1
            assert phase.exercises[0].name == f"{label} Exercise"
            assert phase.exercises[0].duration == phase.duration
            assert phase.instructions == f"Complete {label.lower()} phase"

    def test_description_preview(self, strategy):
        text = "x" * 250
        assert strategy.parse(text).description == "x" * 200 + "..."
        assert strategy.parse("short").description == "short"

    @pytest.mark.parametrize("response", [None, 42, [1, 2], b"\x00\x01", ""])
    def test_non_text_input(self, strategy, response):
        workout = strategy.parse(response)
        assert workout.description == "Workout generated with fallback structure"
        assert workout.is_fallback

    def test_always_handles(self, strategy):
        assert strategy.can_handle(None)
        assert strategy.can_handle("")
        assert strategy.can_handle(object())

    def test_metadata(self, strategy):
        assert strategy.name == "HeuristicFallback"
        assert strategy.priority == 1
