"""BuildingSpec, MaterialAllocation and BillOfMaterials."""

from __future__ import annotations

import json
from enum import Enum
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from greenbuild.catalog.ratios import StructuralRole


class BuildingType(str, Enum):
    HOUSE = "House"
    OFFICE = "Office"
    SCHOOL = "School"
    HOSPITAL = "Hospital"


class CostSensitivity(str, Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


class BuildingSpec(BaseModel):
    """User-supplied building description.

    ``location`` and ``cost_sensitivity`` are advisory: they are passed to
    the recommendation step but never used in arithmetic.
    """

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    building_type: str = Field(
        default=BuildingType.HOUSE.value,
        validation_alias=AliasChoices("building_type", "buildingType", "type"),
    )
    """One of House, Office, School, Hospital.  Other values fall back to
    the engine's default ratio table."""

    area: float = Field(gt=0)
    """Gross floor area in sq ft."""

    floors: int = Field(default=1, ge=1)

    location: str = ""

    cost_sensitivity: CostSensitivity = Field(
        default=CostSensitivity.MEDIUM,
        validation_alias=AliasChoices("cost_sensitivity", "costSensitivity", "budget"),
    )

    @field_validator("building_type", mode="before")
    @classmethod
    def _normalize_type(cls, value: Any) -> Any:
        if isinstance(value, Enum):
            value = value.value
        if isinstance(value, str):
            value = value.strip()
            for bt in BuildingType:
                if bt.value.lower() == value.lower():
                    return bt.value
        return value

    @field_validator("cost_sensitivity", mode="before")
    @classmethod
    def _normalize_sensitivity(cls, value: Any) -> Any:
        if isinstance(value, str) and not isinstance(value, Enum):
            for cs in CostSensitivity:
                if cs.value.lower() == value.strip().lower():
                    return cs
        return value

    @property
    def type_key(self) -> str:
        """Lower-cased key used for ratio table lookup."""
        return self.building_type.lower()


class MaterialAllocation(BaseModel):
    """Quantity, carbon and cost of one structural role in a bill."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    role: StructuralRole
    material_name: str
    unit: str = "kg"
    quantity: float
    total_carbon: float
    """Tons CO2e."""
    total_cost: float
    substituted: bool = False
    """True when the role's greener alternative was selected."""


class BillOfMaterials(BaseModel):
    """Engine output for one spec at one bias value."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    allocations: tuple[MaterialAllocation, ...] = ()
    total_carbon: float = 0.0
    """Tons CO2e."""
    total_cost: float = 0.0
    intensity: float = 0.0
    """Tons CO2e per sq ft."""
    bias: float = 0.0
    floor_multiplier: float = 1.0
    building_type: str = ""
    """Ratio table key actually used (after any default fallback)."""

    def allocation_for(self, role: StructuralRole) -> MaterialAllocation | None:
        for alloc in self.allocations:
            if alloc.role is role:
                return alloc
        return None

    def material_names(self) -> list[str]:
        return [a.material_name for a in self.allocations]

    def to_dict(self) -> dict[str, Any]:
        """Return a camelCase dict for API responses."""
        return self.model_dump(mode="json", by_alias=True)

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), indent=2)

    def to_markdown(self) -> str:
        """Render the bill as a Markdown report."""
        lines: list[str] = []

        lines.append(f"# Bill of Materials — {self.building_type or 'Unknown'}")
        lines.append("")
        lines.append(f"**Optimization Bias:** {self.bias:.2f}")
        lines.append(f"**Floor Multiplier:** {self.floor_multiplier:.2f}")
        lines.append("")

        lines.append("## Allocations")
        lines.append("")
        lines.append("| Role | Material | Quantity | Carbon (t CO2e) | Cost (USD) |")
        lines.append("|------|----------|---------:|----------------:|-----------:|")
        for a in self.allocations:
            name = f"{a.material_name} *" if a.substituted else a.material_name
            lines.append(
                f"| {a.role.value} | {name} | {a.quantity:,.0f} {a.unit} "
                f"| {a.total_carbon:,.2f} | ${a.total_cost:,.2f} |"
            )
        lines.append("")
        if any(a.substituted for a in self.allocations):
            lines.append("\\* low-carbon substitution")
            lines.append("")

        lines.append("## Totals")
        lines.append("")
        lines.append(f"- **Embodied Carbon:** {self.total_carbon:,.2f} t CO2e")
        lines.append(f"- **Material Cost:** ${self.total_cost:,.2f}")
        lines.append(f"- **Intensity:** {self.intensity * 1000:,.2f} kg CO2e per sq ft")
        lines.append("")

        return "\n".join(lines)
