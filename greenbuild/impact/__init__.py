"""Impact Translator."""

from greenbuild.impact.translator import (
    Equivalence,
    ImpactSummary,
    IntensityClass,
    classify_intensity,
    equivalences,
    summarize_impact,
)

__all__ = [
    "Equivalence",
    "ImpactSummary",
    "IntensityClass",
    "classify_intensity",
    "equivalences",
    "summarize_impact",
]
