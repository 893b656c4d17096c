"""
Analysis module - weak-point detection and study plans.
"""

from quest_framework.analysis.weakpoints import (
    AnalysisEngine,
    AnalysisReport,
    CategoryScore,
    WEAK_MISS_RATE,
    STRONG_MISS_RATE,
    MIN_STRONG_ATTEMPTS,
    PLAN_LENGTH,
)

__all__ = [
    "AnalysisEngine",
    "AnalysisReport",
    "CategoryScore",
    "WEAK_MISS_RATE",
    "STRONG_MISS_RATE",
    "MIN_STRONG_ATTEMPTS",
    "PLAN_LENGTH",
]
