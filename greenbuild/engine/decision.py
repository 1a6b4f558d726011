"""DecisionEngine — material selection and quantity takeoff.

Usage::

    from greenbuild.engine import DecisionEngine

    engine = DecisionEngine()
    bill = engine.compute_bill(spec, catalog, bias=0.6)
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable, Mapping

from greenbuild.catalog.models import MaterialCatalog
from greenbuild.catalog.ratios import (
    DEFAULT_BUILDING_TYPE,
    RATIO_TABLES,
    ROLE_MATERIALS,
    RoleMaterials,
    StructuralRole,
)
from greenbuild.engine.models import BillOfMaterials, BuildingSpec, MaterialAllocation
from greenbuild.errors import ConfigurationError

logger = logging.getLogger(__name__)

# Empirical penalty per additional storey for vertical complexity
FLOOR_PENALTY = 0.12

# Material coefficients are per kg; totals are reported in tons
_KG_PER_TON = 1000.0


def floor_multiplier(floors: int) -> float:
    """Return ``1 + (floors - 1) * 0.12``."""
    return 1 + (floors - 1) * FLOOR_PENALTY


def clamp_bias(bias: float) -> float:
    """Clamp *bias* into ``[0, 1]``.  NaN is treated as the baseline 0."""
    if bias is None or math.isnan(bias):
        return 0.0
    return min(1.0, max(0.0, float(bias)))


class DecisionEngine:
    """Deterministic bill-of-materials engine.

    Holds only immutable configuration, so one instance can serve any
    number of concurrent callers.

    Parameters
    ----------
    ratio_tables:
        Building type key (lower-case) to per-role material intensity.
    role_materials:
        Ordered substitution rules; one allocation per entry.
    default_type:
        Table used for unrecognised building types.  ``None`` makes an
        unknown type a :class:`ConfigurationError`.
    """

    def __init__(
        self,
        ratio_tables: Mapping[str, Mapping[StructuralRole, float]] = RATIO_TABLES,
        role_materials: tuple[RoleMaterials, ...] = ROLE_MATERIALS,
        default_type: str | None = DEFAULT_BUILDING_TYPE,
    ) -> None:
        self.ratio_tables = ratio_tables
        self.role_materials = role_materials
        self.default_type = default_type

    def resolve_table(self, building_type: str) -> tuple[str, Mapping[StructuralRole, float]]:
        """Return ``(key, table)`` for *building_type*, applying the default."""
        key = building_type.strip().lower()
        table = self.ratio_tables.get(key)
        if table is not None:
            return key, table

        if self.default_type is None or self.default_type not in self.ratio_tables:
            raise ConfigurationError(
                f"No ratio table for building type {building_type!r} "
                "and no default table configured"
            )
        logger.debug(
            "Unknown building type %r; using %r ratio table", building_type, self.default_type,
        )
        return self.default_type, self.ratio_tables[self.default_type]

    def compute_bill(
        self,
        spec: BuildingSpec,
        catalog: MaterialCatalog,
        bias: float = 0.0,
    ) -> BillOfMaterials:
        """Compute the priced, carbon-scored bill for *spec* at *bias*.

        Raises
        ------
        ConfigurationError
            Unknown building type with no default table.
        CatalogIntegrityError
            A default or alternative material is missing from *catalog*.
        """
        bias = clamp_bias(bias)
        type_key, ratios = self.resolve_table(spec.building_type)
        multiplier = floor_multiplier(spec.floors)

        allocations: list[MaterialAllocation] = []
        for rule in self.role_materials:
            ratio = ratios.get(rule.role, 0.0)

            # Both options must exist so a bill never misreports a reduction
            material = catalog.require(rule.default)
            substituted = False
            if rule.alternative is not None:
                alternative = catalog.require(rule.alternative)
                if rule.selects_alternative(bias):
                    material = alternative
                    substituted = True

            quantity = ratio * spec.area * multiplier
            allocations.append(MaterialAllocation(
                role=rule.role,
                material_name=material.name,
                unit=material.unit,
                quantity=quantity,
                total_carbon=quantity * material.carbon_per_unit / _KG_PER_TON,
                total_cost=quantity * material.cost_per_unit,
                substituted=substituted,
            ))

        total_carbon = sum(a.total_carbon for a in allocations)
        total_cost = sum(a.total_cost for a in allocations)

        return BillOfMaterials(
            allocations=tuple(allocations),
            total_carbon=total_carbon,
            total_cost=total_cost,
            intensity=total_carbon / spec.area,
            bias=bias,
            floor_multiplier=multiplier,
            building_type=type_key,
        )

    def sweep(
        self,
        spec: BuildingSpec,
        catalog: MaterialCatalog,
        biases: Iterable[float],
    ) -> list[BillOfMaterials]:
        """Compute one independent bill per bias value."""
        return [self.compute_bill(spec, catalog, b) for b in biases]


_DEFAULT_ENGINE = DecisionEngine()


def compute_bill(
    spec: BuildingSpec,
    catalog: MaterialCatalog,
    bias: float = 0.0,
) -> BillOfMaterials:
    """Module-level shortcut using the default ratio tables."""
    return _DEFAULT_ENGINE.compute_bill(spec, catalog, bias)
