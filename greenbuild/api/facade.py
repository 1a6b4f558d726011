"""GreenBuild — the single entry point for carbon and cost analysis.

Usage::

    from greenbuild import GreenBuild

    gb = GreenBuild()
    result = gb.analyze({"buildingType": "House", "area": 2500, "floors": 2})
    session = gb.open_session(spec)
    session.bill_at(0.6)
    gb.compare_scenarios(spec, bias=0.6)
    gb.chat("Is hempcrete load bearing?")
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any

from greenbuild.api.session import AnalysisResult, AnalysisSession
from greenbuild.assistant.chat import ChatAssistant, ChatMessage, ChatReply
from greenbuild.catalog.loader import default_catalog, load_catalog_csv
from greenbuild.catalog.models import MaterialCatalog
from greenbuild.engine.decision import DecisionEngine
from greenbuild.engine.models import BillOfMaterials, BuildingSpec
from greenbuild.engine.scenarios import ScenarioComparison, compare_scenarios
from greenbuild.impact.translator import ImpactSummary, summarize_impact
from greenbuild.providers.base import GenerativeModelProvider
from greenbuild.providers.ollama import OllamaProvider
from greenbuild.recommendation.orchestrator import RecommendationOrchestrator
from greenbuild.settings import ConfigManager, Settings, configure_logging

logger = logging.getLogger(__name__)


def _as_spec(spec: BuildingSpec | Mapping[str, Any]) -> BuildingSpec:
    if isinstance(spec, BuildingSpec):
        return spec
    return BuildingSpec.model_validate(dict(spec))


class GreenBuild:
    """The public interface for GreenBuild.

    Parameters
    ----------
    settings:
        Configuration.  When omitted, settings are loaded with
        :class:`ConfigManager` from *project_path* and the environment, and
        their log level is applied to the ``greenbuild`` logger.
    catalog:
        Material catalog.  Defaults to ``settings.catalog_path`` if set,
        otherwise the embedded catalog.
    provider:
        Generative model provider.  Defaults to an :class:`OllamaProvider`
        built from *settings*.
    engine:
        Decision Engine.  Defaults to the shipped ratio tables.
    project_path:
        Directory holding ``.env`` and ``.greenbuild/config.json``.
    """

    def __init__(
        self,
        *,
        settings: Settings | None = None,
        catalog: MaterialCatalog | None = None,
        provider: GenerativeModelProvider | None = None,
        engine: DecisionEngine | None = None,
        project_path: str | Path = ".",
    ) -> None:
        if settings is None:
            settings = ConfigManager().load_settings(project_path)
            configure_logging(settings.log_level)
        self.settings = settings

        if catalog is None:
            if self.settings.catalog_path:
                catalog = load_catalog_csv(self.settings.catalog_path)
            else:
                catalog = default_catalog()
        self.catalog = catalog

        if provider is None:
            provider = OllamaProvider(
                base_url=self.settings.llm_base_url,
                model=self.settings.llm_model,
                timeout=self.settings.llm_timeout,
                api_key=self.settings.llm_api_key,
            )
        self.provider = provider

        self.engine = engine or DecisionEngine()
        self.orchestrator = RecommendationOrchestrator(
            provider,
            backoff_seconds=self.settings.retry_backoff,
            timeout=self.settings.llm_timeout,
        )
        self.assistant = ChatAssistant(provider, timeout=self.settings.llm_timeout)

    # -- Analysis -------------------------------------------------------------

    def open_session(self, spec: BuildingSpec | Mapping[str, Any]) -> AnalysisSession:
        """Start an analysis; engine errors propagate from here."""
        return AnalysisSession(_as_spec(spec), self.catalog, self.engine, self.orchestrator)

    def analyze(self, spec: BuildingSpec | Mapping[str, Any]) -> AnalysisResult:
        """Baseline bill + one recommendation + the catalog echo."""
        session = self.open_session(spec)
        result = session.result()
        logger.info(
            "Analysis complete: %s, %.2f t CO2e, recommendation %s",
            session.spec.building_type,
            result.baseline.total_carbon,
            "available" if result.recommendation_available else "unavailable",
        )
        return result

    # -- Engine only ----------------------------------------------------------

    def compute_bill(self, spec: BuildingSpec | Mapping[str, Any], bias: float = 0.0) -> BillOfMaterials:
        return self.engine.compute_bill(_as_spec(spec), self.catalog, bias)

    def compare_scenarios(
        self,
        spec: BuildingSpec | Mapping[str, Any],
        bias: float,
    ) -> ScenarioComparison:
        return compare_scenarios(_as_spec(spec), self.catalog, bias, engine=self.engine)

    def impact(self, bill: BillOfMaterials, area: float) -> ImpactSummary:
        return summarize_impact(bill.total_carbon, area)

    # -- Assistant ------------------------------------------------------------

    def chat(
        self,
        message: str,
        history: Sequence[ChatMessage | dict[str, str]] | None = None,
    ) -> ChatReply:
        return self.assistant.reply(message, history)
