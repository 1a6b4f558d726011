"""AnalysisSession — one analysis, one recommendation, any number of bills.

The recommendation is requested at most once per session (for the
baseline bill) and reused for every bias value explored afterwards.
Interactive bias changes go through the Decision Engine only.
"""

from __future__ import annotations

import json
import logging
import threading
from typing import Any

from pydantic import BaseModel, ConfigDict

from greenbuild.catalog.models import MaterialCatalog
from greenbuild.engine.decision import DecisionEngine
from greenbuild.engine.models import BillOfMaterials, BuildingSpec
from greenbuild.engine.scenarios import BASELINE_BIAS, ScenarioComparison, compare_scenarios
from greenbuild.impact.translator import ImpactSummary, summarize_impact
from greenbuild.recommendation.models import RecommendationResult, RecommendationUnavailable
from greenbuild.recommendation.orchestrator import RecommendationOrchestrator

logger = logging.getLogger(__name__)


class AnalysisResult(BaseModel):
    """Combined response: baseline bill, recommendation and the catalog."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    baseline: BillOfMaterials
    recommendation: RecommendationResult | RecommendationUnavailable
    catalog: MaterialCatalog
    impact: ImpactSummary

    @property
    def recommendation_available(self) -> bool:
        return self.recommendation.available

    def to_dict(self) -> dict[str, Any]:
        """Wire shape for the presentation layer.

        The catalog is echoed so the caller can recompute bills locally.
        """
        data: dict[str, Any] = {
            "baseline": self.baseline.to_dict(),
            "impact": self.impact.to_dict(),
            "catalog": self.catalog.to_list(),
        }
        if isinstance(self.recommendation, RecommendationResult):
            data["recommendation"] = self.recommendation.to_dict()
            data["recommendationStatus"] = "available"
        else:
            data["recommendation"] = None
            data["recommendationStatus"] = "unavailable"
            data["recommendationReason"] = self.recommendation.reason
        return data

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), indent=2)


class AnalysisSession:
    """State for one analysis of one building spec.

    Parameters
    ----------
    spec:
        The building being analysed.
    catalog:
        Material catalog used for every bill in this session.
    engine:
        Decision Engine instance.
    orchestrator:
        Recommendation step.  ``None`` yields an unavailable
        recommendation without any outbound call.
    """

    def __init__(
        self,
        spec: BuildingSpec,
        catalog: MaterialCatalog,
        engine: DecisionEngine,
        orchestrator: RecommendationOrchestrator | None = None,
    ) -> None:
        self.spec = spec
        self.catalog = catalog
        self.engine = engine
        self.orchestrator = orchestrator
        # Engine errors surface here, before any outbound call
        self.baseline = engine.compute_bill(spec, catalog, BASELINE_BIAS)
        self._recommendation: RecommendationResult | RecommendationUnavailable | None = None
        self._lock = threading.Lock()

    @property
    def recommended(self) -> bool:
        """True once the recommendation step has run."""
        return self._recommendation is not None

    def recommendation(self) -> RecommendationResult | RecommendationUnavailable:
        """Return the session's recommendation, invoking the model at most once."""
        with self._lock:
            if self._recommendation is None:
                if self.orchestrator is None:
                    self._recommendation = RecommendationUnavailable(
                        reason="No recommendation provider configured",
                    )
                else:
                    self._recommendation = self.orchestrator.recommend(
                        self.spec, self.baseline, self.catalog,
                    )
                if not self._recommendation.available:
                    logger.info("Analysis continues without recommendations")
            return self._recommendation

    def bill_at(self, bias: float) -> BillOfMaterials:
        """Recompute the bill at *bias* without touching the recommendation."""
        return self.engine.compute_bill(self.spec, self.catalog, bias)

    def compare(self, bias: float) -> ScenarioComparison:
        return compare_scenarios(self.spec, self.catalog, bias, engine=self.engine)

    def impact(self, bias: float | None = None) -> ImpactSummary:
        bill = self.baseline if bias is None else self.bill_at(bias)
        return summarize_impact(bill.total_carbon, self.spec.area)

    def result(self) -> AnalysisResult:
        return AnalysisResult(
            baseline=self.baseline,
            recommendation=self.recommendation(),
            catalog=self.catalog,
            impact=self.impact(),
        )
