"""Impact Translator — intensity class and relatable equivalences."""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

# Breakpoints on embodied carbon intensity, kg CO2e per sq ft
LOW_INTENSITY_LIMIT = 18.0
MEDIUM_INTENSITY_LIMIT = 55.0

# Tons CO2e per unit of each equivalence
TONS_PER_CAR_YEAR = 4.6
TONS_PER_TREE_DECADE = 0.025
TONS_PER_HOME_YEAR = 8.5


class IntensityClass(str, Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


class Equivalence(BaseModel):
    """A carbon total expressed as a human-relatable quantity."""

    model_config = ConfigDict(frozen=True)

    label: str
    value: float
    unit: str
    decimals: int = Field(default=1, exclude=True)

    @property
    def display(self) -> str:
        return f"{self.value:,.{self.decimals}f}"


class ImpactSummary(BaseModel):
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    intensity_class: IntensityClass
    kg_per_area: float
    equivalences: list[Equivalence]

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


def carbon_per_area_kg(total_carbon_tons: float, area: float) -> float:
    """Convert a carbon total in tons to kg CO2e per unit area."""
    return total_carbon_tons * 1000.0 / area


def classify_intensity(total_carbon_tons: float, area: float) -> IntensityClass:
    """Classify carbon intensity: < 18 kg/sq ft Low, < 55 Medium, else High."""
    if area <= 0:
        return IntensityClass.HIGH
    intensity = carbon_per_area_kg(total_carbon_tons, area)
    if intensity < LOW_INTENSITY_LIMIT:
        return IntensityClass.LOW
    if intensity < MEDIUM_INTENSITY_LIMIT:
        return IntensityClass.MEDIUM
    return IntensityClass.HIGH


def equivalences(total_carbon_tons: float) -> list[Equivalence]:
    return [
        Equivalence(label="Cars Removed", value=total_carbon_tons / TONS_PER_CAR_YEAR,
                    unit="per year", decimals=1),
        Equivalence(label="Trees Planted", value=total_carbon_tons / TONS_PER_TREE_DECADE,
                    unit="over 10 yrs", decimals=0),
        Equivalence(label="Homes Powered", value=total_carbon_tons / TONS_PER_HOME_YEAR,
                    unit="for a year", decimals=1),
    ]


def summarize_impact(total_carbon_tons: float, area: float) -> ImpactSummary:
    """Bundle intensity class, kg per area and equivalences."""
    return ImpactSummary(
        intensity_class=classify_intensity(total_carbon_tons, area),
        kg_per_area=carbon_per_area_kg(total_carbon_tons, area) if area > 0 else 0.0,
        equivalences=equivalences(total_carbon_tons),
    )
