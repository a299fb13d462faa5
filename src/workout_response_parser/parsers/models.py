"""
Parser Models

Pydantic models for the generated workout record every strategy produces,
plus the result and validation envelopes returned by the parser.

Models accept the camelCase keys the generative model emits
(``mainWorkout``, ``totalDuration``) as well as the snake_case field names,
and dump back to camelCase with ``model_dump(by_alias=True)``.
"""

from datetime import datetime
from typing import List, Optional, Union

from pydantic import AliasChoices, BaseModel, Field
from pydantic.alias_generators import to_camel


class _WorkoutBaseModel(BaseModel):
    class Config:
        alias_generator = to_camel
        populate_by_name = True
        frozen = True
        extra = "ignore"


class ExerciseModification(_WorkoutBaseModel):
    """Easier/harder/injury variation of an exercise"""
    type: str = "easier"
    description: str = ""
    instructions: str = ""


class DifficultyAdjustment(_WorkoutBaseModel):
    """How to adapt an exercise for one fitness level"""
    level: str = "some experience"
    modification: str = ""
    reasoning: str = ""


class Exercise(_WorkoutBaseModel):
    """Single exercise inside a workout phase"""
    id: str
    name: str
    description: str = ""

    # Prescription
    duration: Optional[int] = Field(default=None, description="Seconds, for timed exercises")
    sets: Optional[int] = None
    reps: Optional[int] = Field(
        default=None,
        validation_alias=AliasChoices("reps", "repetitions"),
    )
    rest_time: Optional[int] = Field(default=None, description="Rest after the exercise, seconds")
    weight: Optional[Union[float, str]] = None
    equipment: List[str] = Field(default_factory=list)

    # Guidance
    form: str = ""
    instructions: List[str] = Field(default_factory=list)
    modifications: List[Union[ExerciseModification, str]] = Field(default_factory=list)
    common_mistakes: List[str] = Field(default_factory=list)
    notes: Optional[str] = None

    # Targeting
    primary_muscles: List[str] = Field(default_factory=list)
    secondary_muscles: List[str] = Field(default_factory=list)
    movement_type: str = "strength"

    # Media
    video_url: Optional[str] = None
    image_url: Optional[str] = None

    personalized_notes: List[str] = Field(default_factory=list)
    difficulty_adjustments: List[DifficultyAdjustment] = Field(default_factory=list)


class Phase(_WorkoutBaseModel):
    """Warm-up, main or cool-down section of a workout"""
    name: str
    duration: int = Field(default=0, ge=0, description="Phase length in seconds")
    exercises: List[Exercise] = Field(default_factory=list)
    instructions: Optional[str] = None
    tips: List[str] = Field(default_factory=list)


class Workout(_WorkoutBaseModel):
    """Generated workout record, the parse target"""
    id: str = Field(..., min_length=1)
    title: str = Field(..., min_length=1)
    description: str = ""
    total_duration: int = Field(default=0, ge=0, description="Seconds")
    estimated_calories: int = 200
    difficulty: str = "some experience"
    equipment: List[str] = Field(default_factory=list)

    # Workout structure
    warmup: Phase
    main_workout: Phase
    cooldown: Phase

    # Insights
    reasoning: str = ""
    personalized_notes: List[str] = Field(default_factory=list)
    progression_tips: List[str] = Field(default_factory=list)
    safety_reminders: List[str] = Field(default_factory=list)

    # Metadata
    generated_at: datetime
    ai_model: str = "unknown"
    confidence: float = Field(default=0.8, ge=0, le=1)
    tags: List[str] = Field(default_factory=list)

    @property
    def phases(self) -> List[Phase]:
        return [self.warmup, self.main_workout, self.cooldown]

    @property
    def is_fallback(self) -> bool:
        return "fallback" in self.tags


class ResponseValidation(_WorkoutBaseModel):
    """Structural pre-check of a candidate object"""
    is_valid: bool = True
    missing_fields: List[str] = Field(default_factory=list)
    invalid_fields: List[str] = Field(default_factory=list)

    # Truncation metrics, filled in for text input
    content_length: Optional[int] = None
    truncation_point: Optional[int] = None
    remaining_chars: Optional[int] = None


class ParseMetrics(_WorkoutBaseModel):
    """Optional measurements attached to a ParseResult"""
    content_length: Optional[int] = None
    truncation_point: Optional[int] = None
    validation_score: Optional[float] = Field(default=None, ge=0, le=100)


class ParseResult(_WorkoutBaseModel):
    """Result from the response parser"""
    success: bool
    data: Optional[Workout] = None
    strategy: str
    issues: List[str] = Field(default_factory=list)
    processing_time: float = Field(default=0, ge=0, description="Milliseconds")
    metrics: Optional[ParseMetrics] = None
