"""Material Catalog — reference carbon/cost data and structural ratio tables."""

from greenbuild.catalog.loader import default_catalog, load_catalog_csv, parse_catalog_csv
from greenbuild.catalog.models import MaterialCatalog, MaterialRecord
from greenbuild.catalog.ratios import (
    DEFAULT_BUILDING_TYPE,
    RATIO_TABLES,
    ROLE_MATERIALS,
    RoleMaterials,
    StructuralRole,
)

__all__ = [
    "DEFAULT_BUILDING_TYPE",
    "MaterialCatalog",
    "MaterialRecord",
    "RATIO_TABLES",
    "ROLE_MATERIALS",
    "RoleMaterials",
    "StructuralRole",
    "default_catalog",
    "load_catalog_csv",
    "parse_catalog_csv",
]
