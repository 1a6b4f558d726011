"""Decision Engine — converts building specs into a priced, carbon-scored
bill of materials, parameterized by a single optimization bias.
"""

from greenbuild.engine.decision import DecisionEngine, clamp_bias, compute_bill, floor_multiplier
from greenbuild.engine.models import (
    BillOfMaterials,
    BuildingSpec,
    BuildingType,
    CostSensitivity,
    MaterialAllocation,
)
from greenbuild.engine.scenarios import ScenarioComparison, compare_scenarios

__all__ = [
    "BillOfMaterials",
    "BuildingSpec",
    "BuildingType",
    "CostSensitivity",
    "DecisionEngine",
    "MaterialAllocation",
    "ScenarioComparison",
    "clamp_bias",
    "compare_scenarios",
    "compute_bill",
    "floor_multiplier",
]
