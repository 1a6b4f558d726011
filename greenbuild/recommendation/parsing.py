"""Extract and validate the JSON payload of a model response."""

from __future__ import annotations

import json
import logging

from pydantic import ValidationError

from greenbuild.errors import ResponseParseError, ResponseValidationError
from greenbuild.recommendation.models import RecommendationResult

logger = logging.getLogger(__name__)

# Steady-state number of optimizations the prompt asks for
EXPECTED_OPTIMIZATIONS = 3


def extract_json_object(raw: str | None) -> str:
    """Return the span from the first ``{`` to the last ``}`` in *raw*.

    Anything around that span (commentary, code fences) is ignored.
    """
    if not raw:
        raise ResponseParseError("Empty model response")
    start = raw.find("{")
    end = raw.rfind("}")
    if start == -1 or end <= start:
        raise ResponseParseError("No JSON object found in model response")
    return raw[start:end + 1]


def parse_recommendation(raw: str | None) -> RecommendationResult:
    """Parse *raw* model output into a validated :class:`RecommendationResult`.

    Raises
    ------
    ResponseParseError
        No object boundary, or the span is not valid JSON.
    ResponseValidationError
        The JSON does not conform to the recommendation schema.
    """
    span = extract_json_object(raw)
    try:
        data = json.loads(span)
    except (ValueError, RecursionError) as exc:
        # JSONDecodeError is a ValueError; deep nesting raises RecursionError
        raise ResponseParseError(f"Invalid JSON in model response: {exc}") from exc

    if not isinstance(data, dict):
        raise ResponseValidationError("Model response is not a JSON object")

    try:
        result = RecommendationResult.model_validate(data)
    except ValidationError as exc:
        raise ResponseValidationError(
            f"Model response failed schema validation ({exc.error_count()} errors)"
        ) from exc

    if len(result.optimizations) != EXPECTED_OPTIMIZATIONS:
        logger.warning(
            "Expected %d optimizations, model returned %d",
            EXPECTED_OPTIMIZATIONS, len(result.optimizations),
        )
    return result
