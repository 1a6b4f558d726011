"""RecommendationResult and the RecommendationUnavailable sentinel.

The model's output is untrusted: it only becomes a
:class:`RecommendationResult` by passing pydantic validation.  A few
harmless deviations are repaired on the way in (enum casing, numbers sent
as strings, hotspots sent as bare names).
"""

from __future__ import annotations

import re
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

_NUMBER_RE = re.compile(r"[-+]?\d*\.?\d+(?:[eE][-+]?\d+)?")


class Durability(str, Enum):
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"


class FailureKind(str, Enum):
    """Why a single recommendation attempt failed."""

    NETWORK = "network"
    TIMEOUT = "timeout"
    HTTP_STATUS = "http_status"
    RATE_LIMITED = "rate_limited"
    PARSE = "parse"
    VALIDATION = "validation"
    PERMANENT = "permanent"

    @property
    def transient(self) -> bool:
        return self is not FailureKind.PERMANENT


_WIRE_CONFIG = ConfigDict(
    frozen=True,
    alias_generator=to_camel,
    populate_by_name=True,
    extra="ignore",
)


def _coerce_number(value: Any) -> Any:
    """Turn strings like ``"$1,200"`` or ``"-3.5 tons"`` into floats."""
    if isinstance(value, str):
        match = _NUMBER_RE.search(value.replace(",", ""))
        if match:
            return float(match.group())
    return value


class Hotspot(BaseModel):
    """A material contributing disproportionately to total carbon."""

    model_config = _WIRE_CONFIG

    material: str
    reason: str = ""


class Optimization(BaseModel):
    """One suggested substitution with its carbon and cost deltas."""

    model_config = _WIRE_CONFIG

    title: str
    action: str
    carbon_saving_tons: float
    cost_delta_usd: float
    durability: Durability
    technical_explanation: str = ""
    tradeoff: str = ""

    @field_validator("carbon_saving_tons", "cost_delta_usd", mode="before")
    @classmethod
    def _numbers(cls, value: Any) -> Any:
        return _coerce_number(value)

    @field_validator("durability", mode="before")
    @classmethod
    def _durability(cls, value: Any) -> Any:
        if isinstance(value, str) and not isinstance(value, Enum):
            cleaned = value.strip().lower()
            for d in Durability:
                if d.value.lower() == cleaned:
                    return d
        return value


class RecommendationResult(BaseModel):
    """Structured optimization suggestions for one analysis."""

    model_config = _WIRE_CONFIG

    hotspots: list[Hotspot] = Field(default_factory=list)
    optimizations: list[Optimization]
    impact_summary: str = ""
    policy_insight: str = ""

    @field_validator("hotspots", mode="before")
    @classmethod
    def _hotspots(cls, value: Any) -> Any:
        if isinstance(value, list):
            return [{"material": v} if isinstance(v, str) else v for v in value]
        return value

    @field_validator("impact_summary", "policy_insight", mode="before")
    @classmethod
    def _text(cls, value: Any) -> Any:
        return "" if value is None else value

    @property
    def available(self) -> bool:
        return True

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


class RecommendationUnavailable(BaseModel):
    """Explicit 'no recommendation' outcome.  A normal return value."""

    model_config = ConfigDict(frozen=True)

    reason: str = ""
    attempts: int = 0
    failures: list[FailureKind] = Field(default_factory=list)

    @property
    def available(self) -> bool:
        return False

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json")
