"""Structural ratio tables and per-role substitution rules.

Ratios are material intensities in kg per sq ft of floor area.  Each
structural role maps to one default (conventional, highest-carbon)
material and at most one greener alternative, switched on when the
optimization bias strictly exceeds the role's threshold.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType


class StructuralRole(str, Enum):
    """Fixed building-component categories; one allocation each per bill."""

    PRIMARY_STRUCTURE = "primary_structure"
    STRUCTURAL_METAL = "structural_metal"
    SECONDARY_STRUCTURE = "secondary_structure"
    ENVELOPE_MASONRY = "envelope_masonry"
    GLAZING = "glazing"
    INSULATION = "insulation"
    CLADDING_METAL = "cladding_metal"


@dataclass(frozen=True)
class RoleMaterials:
    """Default material, optional alternative and the bias gate between them."""

    role: StructuralRole
    default: str
    alternative: str | None = None
    threshold: float | None = None

    @property
    def substitutable(self) -> bool:
        return self.alternative is not None and self.threshold is not None

    def selects_alternative(self, bias: float) -> bool:
        """True when *bias* strictly exceeds the threshold."""
        if self.alternative is None or self.threshold is None:
            return False
        return bias > self.threshold


# Role order here is the allocation order of every bill.
ROLE_MATERIALS: tuple[RoleMaterials, ...] = (
    RoleMaterials(StructuralRole.PRIMARY_STRUCTURE, "Concrete (Standard)", "Concrete (Low-Carbon)", 0.3),
    RoleMaterials(StructuralRole.STRUCTURAL_METAL, "Steel (Virgin)", "Steel (Recycled)", 0.5),
    RoleMaterials(StructuralRole.SECONDARY_STRUCTURE, "Softwood Timber", "Cross-Laminated Timber", 0.7),
    RoleMaterials(StructuralRole.ENVELOPE_MASONRY, "Brick"),
    RoleMaterials(StructuralRole.GLAZING, "Glass"),
    RoleMaterials(StructuralRole.INSULATION, "Mineral Wool", "Hempcrete", 0.8),
    RoleMaterials(StructuralRole.CLADDING_METAL, "Aluminium (Virgin)", "Aluminium (Recycled)", 0.4),
)


def _table(**ratios: float) -> Mapping[StructuralRole, float]:
    return MappingProxyType({StructuralRole(k): v for k, v in ratios.items()})


RATIO_TABLES: Mapping[str, Mapping[StructuralRole, float]] = MappingProxyType({
    "house": _table(
        primary_structure=40, structural_metal=2.5, secondary_structure=8,
        envelope_masonry=35, glazing=0.8, insulation=1.5, cladding_metal=0.5,
    ),
    "office": _table(
        primary_structure=85, structural_metal=12.0, secondary_structure=1.5,
        envelope_masonry=10, glazing=4.5, insulation=2.5, cladding_metal=2.2,
    ),
    "school": _table(
        primary_structure=65, structural_metal=8.0, secondary_structure=4.0,
        envelope_masonry=25, glazing=2.5, insulation=2.2, cladding_metal=1.2,
    ),
    "hospital": _table(
        primary_structure=95, structural_metal=15.0, secondary_structure=1.0,
        envelope_masonry=15, glazing=3.5, insulation=3.0, cladding_metal=2.5,
    ),
})

# Table used when the building type has no entry of its own
DEFAULT_BUILDING_TYPE = "house"


def role_materials(role: StructuralRole) -> RoleMaterials:
    """Return the substitution rule for *role*."""
    for rm in ROLE_MATERIALS:
        if rm.role is role:
            return rm
    raise KeyError(role)


def required_materials(rules: tuple[RoleMaterials, ...] = ROLE_MATERIALS) -> list[str]:
    """Every material name a catalog must contain for the engine to run."""
    names: list[str] = []
    for rm in rules:
        names.append(rm.default)
        if rm.alternative:
            names.append(rm.alternative)
    return names
