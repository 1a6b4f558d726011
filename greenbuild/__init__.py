"""GreenBuild — embodied carbon and cost estimation for building designs."""

__version__ = "1.0.0"

from greenbuild.api.facade import GreenBuild
from greenbuild.api.session import AnalysisResult, AnalysisSession
from greenbuild.catalog.loader import default_catalog, load_catalog_csv, parse_catalog_csv
from greenbuild.catalog.models import MaterialCatalog, MaterialRecord
from greenbuild.engine.decision import DecisionEngine, compute_bill
from greenbuild.engine.models import BillOfMaterials, BuildingSpec, MaterialAllocation
from greenbuild.engine.scenarios import ScenarioComparison, compare_scenarios
from greenbuild.errors import (
    CatalogIntegrityError,
    ConfigurationError,
    GreenBuildError,
)
from greenbuild.impact.translator import classify_intensity, equivalences
from greenbuild.recommendation.models import RecommendationResult, RecommendationUnavailable
from greenbuild.recommendation.orchestrator import RecommendationOrchestrator

__all__ = [
    "__version__",
    # Facade
    "GreenBuild",
    "AnalysisResult",
    "AnalysisSession",
    # Catalog
    "MaterialCatalog",
    "MaterialRecord",
    "default_catalog",
    "load_catalog_csv",
    "parse_catalog_csv",
    # Decision Engine
    "BillOfMaterials",
    "BuildingSpec",
    "DecisionEngine",
    "MaterialAllocation",
    "ScenarioComparison",
    "compare_scenarios",
    "compute_bill",
    # Impact
    "classify_intensity",
    "equivalences",
    # Recommendation
    "RecommendationOrchestrator",
    "RecommendationResult",
    "RecommendationUnavailable",
    # Errors
    "CatalogIntegrityError",
    "ConfigurationError",
    "GreenBuildError",
]
