"""Baseline / current / best-case comparison for interactive what-if use."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from greenbuild.catalog.models import MaterialCatalog
from greenbuild.engine.decision import DecisionEngine
from greenbuild.engine.models import BillOfMaterials, BuildingSpec

BASELINE_BIAS = 0.0
BEST_CASE_BIAS = 1.0


class ScenarioComparison(BaseModel):
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    baseline: BillOfMaterials
    current: BillOfMaterials
    best: BillOfMaterials

    @property
    def carbon_saved_tons(self) -> float:
        """Reduction of *current* against *baseline*."""
        return self.baseline.total_carbon - self.current.total_carbon

    @property
    def carbon_saved_pct(self) -> float:
        if self.baseline.total_carbon == 0:
            return 0.0
        return self.carbon_saved_tons / self.baseline.total_carbon * 100.0

    @property
    def cost_delta(self) -> float:
        """Extra spend of *current* over *baseline* (negative = cheaper)."""
        return self.current.total_cost - self.baseline.total_cost

    def to_dict(self) -> dict[str, Any]:
        data = self.model_dump(mode="json", by_alias=True)
        data["carbonSavedTons"] = self.carbon_saved_tons
        data["carbonSavedPct"] = self.carbon_saved_pct
        data["costDelta"] = self.cost_delta
        return data


def compare_scenarios(
    spec: BuildingSpec,
    catalog: MaterialCatalog,
    bias: float,
    engine: DecisionEngine | None = None,
) -> ScenarioComparison:
    """Compute baseline (bias 0), current (*bias*) and best (bias 1) bills.

    Uses only the Decision Engine; never touches the recommendation step.
    """
    engine = engine or DecisionEngine()
    baseline, current, best = engine.sweep(spec, catalog, (BASELINE_BIAS, bias, BEST_CASE_BIAS))
    return ScenarioComparison(baseline=baseline, current=current, best=best)
