"""Grounding prompt for the recommendation step.

The prompt carries the building spec, the computed allocations and the
entire material catalog, so every substitution and every number the model
proposes can be traced back to supplied data.
"""

from __future__ import annotations

import json
from typing import Any

from greenbuild.catalog.models import MaterialCatalog
from greenbuild.engine.models import BillOfMaterials, BuildingSpec
from greenbuild.recommendation.models import RecommendationResult

_PERSONA = """\
You are GreenBuild AI, a senior sustainability engineer and construction cost
analyst. You reason step by step about reducing a building's embodied carbon.
"""

_TASK = """\
TASK:
1. Identify the carbon hotspots in the current material mix.
2. Propose exactly 3 specific optimizations, each substituting a material from
   AVAILABLE MATERIALS for one in the current mix.
3. For each optimization compute the carbon saving (tons CO2e) and the cost
   delta (USD, positive = more expensive) from the quantities given in the
   current mix and the coefficients in AVAILABLE MATERIALS.
4. State the tradeoff, e.g. "Saves 20% carbon but increases cost by 5%".
5. Explain the technical reason each material performs better.
6. Give a one-paragraph impact summary and mention a relevant green building
   policy or incentive for the location or building type.

STRICT RULES:
- Only use materials listed under AVAILABLE MATERIALS. Never invent material data.
- Every number must be derived from the quantities and coefficients provided.
- durability must be one of "High", "Medium", "Low".
- Respond with a single JSON object conforming to the schema below and nothing else.
"""


def recommendation_schema() -> dict[str, Any]:
    """JSON schema of the expected output, camelCase field names."""
    return RecommendationResult.model_json_schema(by_alias=True)


def format_spec(spec: BuildingSpec) -> str:
    return "\n".join([
        f"- Type: {spec.building_type}",
        f"- Area: {spec.area:g} sq ft",
        f"- Floors: {spec.floors}",
        f"- Location: {spec.location or 'unspecified'}",
        f"- Cost Sensitivity: {spec.cost_sensitivity.value}",
    ])


def format_bill(bill: BillOfMaterials) -> str:
    lines = [
        f"- {a.material_name} ({a.role.value}): {a.quantity:.0f} {a.unit}, "
        f"{a.total_carbon:.2f} tons CO2e, ${a.total_cost:,.2f}"
        for a in bill.allocations
    ]
    lines.append(f"- TOTAL: {bill.total_carbon:.2f} tons CO2e, ${bill.total_cost:,.2f}")
    return "\n".join(lines)


def format_catalog(catalog: MaterialCatalog) -> str:
    return "\n".join(
        f"- {m.name} [{m.category}]: {m.carbon_per_unit} kg CO2e/{m.unit}, "
        f"${m.cost_per_unit}/{m.unit} (Source: {m.provenance or 'n/a'})"
        for m in catalog
    )


def build_recommendation_prompt(
    spec: BuildingSpec,
    bill: BillOfMaterials,
    catalog: MaterialCatalog,
) -> str:
    """Assemble the full grounding prompt."""
    schema = json.dumps(recommendation_schema(), indent=2)
    return (
        f"{_PERSONA}\n"
        f"BUILDING SPECIFICATIONS:\n{format_spec(spec)}\n\n"
        f"CURRENT MATERIAL MIX & BASELINE:\n{format_bill(bill)}\n\n"
        f"AVAILABLE MATERIALS:\n{format_catalog(catalog)}\n\n"
        f"{_TASK}\n"
        f"OUTPUT SCHEMA:\n{schema}\n"
    )
