"""Embedded default material catalog — no external CSV file required.

Carbon coefficients in kg CO2e per unit, costs in USD per unit.
Source attribution included for traceability.
"""

from __future__ import annotations

from typing import Any

ICE_SOURCE = "ICE Database v3.0"
OPENLCA_SOURCE = "OpenLCA"

# Column order of the catalog CSV format
CSV_COLUMNS = (
    "material",
    "category",
    "unit",
    "carbon_kg_per_unit",
    "cost_per_unit",
    "source",
)

SEED_MATERIALS: tuple[dict[str, Any], ...] = (
    # Structure
    {"name": "Concrete (Standard)", "category": "Structure", "unit": "kg",
     "carbon_per_unit": 0.13, "cost_per_unit": 0.06, "provenance": ICE_SOURCE},
    {"name": "Concrete (Low-Carbon)", "category": "Structure", "unit": "kg",
     "carbon_per_unit": 0.08, "cost_per_unit": 0.08, "provenance": ICE_SOURCE},
    {"name": "Steel (Virgin)", "category": "Structure", "unit": "kg",
     "carbon_per_unit": 2.30, "cost_per_unit": 1.20, "provenance": ICE_SOURCE},
    {"name": "Steel (Recycled)", "category": "Structure", "unit": "kg",
     "carbon_per_unit": 0.43, "cost_per_unit": 1.35, "provenance": ICE_SOURCE},
    {"name": "Cross-Laminated Timber", "category": "Structure", "unit": "kg",
     "carbon_per_unit": 0.50, "cost_per_unit": 1.50, "provenance": ICE_SOURCE},
    {"name": "Softwood Timber", "category": "Structure", "unit": "kg",
     "carbon_per_unit": 0.45, "cost_per_unit": 0.80, "provenance": ICE_SOURCE},
    # Envelope
    {"name": "Brick", "category": "Envelope", "unit": "kg",
     "carbon_per_unit": 0.22, "cost_per_unit": 0.30, "provenance": ICE_SOURCE},
    {"name": "Glass", "category": "Envelope", "unit": "kg",
     "carbon_per_unit": 1.44, "cost_per_unit": 2.50, "provenance": ICE_SOURCE},
    # Insulation
    {"name": "Mineral Wool", "category": "Insulation", "unit": "kg",
     "carbon_per_unit": 1.20, "cost_per_unit": 1.80, "provenance": ICE_SOURCE},
    {"name": "EPS Insulation", "category": "Insulation", "unit": "kg",
     "carbon_per_unit": 3.30, "cost_per_unit": 1.10, "provenance": ICE_SOURCE},
    # Hempcrete sequesters more than it emits
    {"name": "Hempcrete", "category": "Insulation/Structure", "unit": "kg",
     "carbon_per_unit": -0.10, "cost_per_unit": 2.00, "provenance": OPENLCA_SOURCE},
    # Cladding
    {"name": "Aluminium (Virgin)", "category": "Envelope", "unit": "kg",
     "carbon_per_unit": 12.79, "cost_per_unit": 3.50, "provenance": ICE_SOURCE},
    {"name": "Aluminium (Recycled)", "category": "Envelope", "unit": "kg",
     "carbon_per_unit": 1.81, "cost_per_unit": 3.80, "provenance": ICE_SOURCE},
)
