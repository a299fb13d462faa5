"""Parsing strategies and the workout record models."""
from .base import ParseStrategy
from .direct_parser import DirectStrategy
from .fallback_parser import HeuristicFallbackStrategy
from .fence_parser import FenceExtractionStrategy
from .json_repair_parser import RepairStrategy
from .normalizer import WorkoutNormalizer

__all__ = [
    "DirectStrategy",
    "FenceExtractionStrategy",
    "HeuristicFallbackStrategy",
    "ParseStrategy",
    "RepairStrategy",
    "WorkoutNormalizer",
]
