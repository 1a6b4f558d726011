"""Recommendation Orchestrator — grounded optimization suggestions from an
external generative model, with validation, repair and bounded retry.
"""

from greenbuild.recommendation.models import (
    Durability,
    FailureKind,
    Hotspot,
    Optimization,
    RecommendationResult,
    RecommendationUnavailable,
)
from greenbuild.recommendation.orchestrator import (
    MAX_ATTEMPTS,
    RETRY_BACKOFF_SECONDS,
    RecommendationOrchestrator,
)
from greenbuild.recommendation.parsing import extract_json_object, parse_recommendation
from greenbuild.recommendation.prompts import build_recommendation_prompt

__all__ = [
    "Durability",
    "FailureKind",
    "Hotspot",
    "MAX_ATTEMPTS",
    "Optimization",
    "RETRY_BACKOFF_SECONDS",
    "RecommendationOrchestrator",
    "RecommendationResult",
    "RecommendationUnavailable",
    "build_recommendation_prompt",
    "extract_json_object",
    "parse_recommendation",
]
