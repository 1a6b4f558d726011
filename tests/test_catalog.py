"""Tests for the Material Catalog and structural ratio tables."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from greenbuild.catalog import (
    DEFAULT_BUILDING_TYPE,
    RATIO_TABLES,
    ROLE_MATERIALS,
    MaterialCatalog,
    MaterialRecord,
    StructuralRole,
    default_catalog,
    load_catalog_csv,
    parse_catalog_csv,
)
from greenbuild.catalog.ratios import required_materials, role_materials
from greenbuild.errors import CatalogIntegrityError

SAMPLE_CSV = """material,category,unit,carbon_kg_per_unit,cost_per_unit,source
"Concrete (Standard)","Structure","kg",0.13,0.06,"ICE Database v3.0"
"Concrete (Low-Carbon)","Structure","kg",0.08,0.08,"ICE Database v3.0"
"Hempcrete","Insulation/Structure","kg",-0.10,2.00,"OpenLCA"
"""


# ---------------------------------------------------------------------------
# Embedded catalog
# ---------------------------------------------------------------------------

class TestDefaultCatalog:

    def test_size(self):
        assert len(default_catalog()) == 13

    def test_contains_every_required_material(self):
        catalog = default_catalog()
        for name in required_materials():
            assert name in catalog, name

    def test_hempcrete_sequesters(self):
        assert default_catalog().require("Hempcrete").carbon_per_unit == pytest.approx(-0.10)

    def test_all_records_have_provenance(self):
        for rec in default_catalog():
            assert rec.provenance
            assert rec.cost_per_unit > 0
            assert rec.unit == "kg"

    def test_shared_instance(self):
        assert default_catalog() is default_catalog()


# ---------------------------------------------------------------------------
# MaterialCatalog behaviour
# ---------------------------------------------------------------------------

class TestMaterialCatalog:

    def test_get_missing_returns_none(self):
        assert default_catalog().get("Unobtainium") is None

    def test_require_missing_names_material(self):
        with pytest.raises(CatalogIntegrityError) as info:
            default_catalog().require("Unobtainium")
        assert info.value.material == "Unobtainium"
        assert "Unobtainium" in str(info.value)

    def test_duplicate_names_rejected(self):
        rec = {"name": "Brick", "carbon_per_unit": 0.22, "cost_per_unit": 0.3}
        with pytest.raises(CatalogIntegrityError):
            MaterialCatalog([rec, rec])

    def test_accepts_camel_case_dicts(self):
        catalog = MaterialCatalog([{"name": "Brick", "carbonPerUnit": 0.22, "costPerUnit": 0.3}])
        assert catalog.require("Brick").carbon_per_unit == pytest.approx(0.22)

    def test_order_preserved(self):
        names = default_catalog().names()
        assert names[0] == "Concrete (Standard)"
        assert names[-1] == "Aluminium (Recycled)"

    def test_to_list_uses_camel_case(self):
        row = default_catalog().to_list()[0]
        assert set(row) == {"name", "category", "unit", "carbonPerUnit", "costPerUnit", "provenance"}

    def test_records_are_frozen(self):
        rec = default_catalog().require("Brick")
        with pytest.raises(ValidationError):
            rec.carbon_per_unit = 0.0

    def test_equality(self):
        assert MaterialCatalog(list(default_catalog())) == default_catalog()


# ---------------------------------------------------------------------------
# CSV loading
# ---------------------------------------------------------------------------

class TestCatalogCSV:

    def test_parse_quoted_rows(self):
        catalog = parse_catalog_csv(SAMPLE_CSV)
        assert catalog.names() == ["Concrete (Standard)", "Concrete (Low-Carbon)", "Hempcrete"]
        rec = catalog.require("Concrete (Standard)")
        assert rec.category == "Structure"
        assert rec.provenance == "ICE Database v3.0"
        assert rec.cost_per_unit == pytest.approx(0.06)

    def test_malformed_row_skipped(self, caplog):
        text = SAMPLE_CSV + '"Glass","Envelope","kg",lots,2.50,"ICE"\n'
        catalog = parse_catalog_csv(text)
        assert "Glass" not in catalog
        assert len(catalog) == 3
        assert "malformed" in caplog.text

    def test_empty_csv_warns(self, caplog):
        catalog = parse_catalog_csv("material,category,unit,carbon_kg_per_unit,cost_per_unit,source\n")
        assert len(catalog) == 0
        assert "No valid materials" in caplog.text

    def test_load_from_file(self, tmp_path):
        path = tmp_path / "materials.csv"
        path.write_text(SAMPLE_CSV, encoding="utf-8")
        assert len(load_catalog_csv(path)) == 3


# ---------------------------------------------------------------------------
# Ratio tables and substitution rules
# ---------------------------------------------------------------------------

class TestRatioTables:

    def test_all_building_types_present(self):
        assert set(RATIO_TABLES) == {"house", "office", "school", "hospital"}

    def test_default_type_has_table(self):
        assert DEFAULT_BUILDING_TYPE in RATIO_TABLES

    def test_every_table_covers_every_role(self):
        for table in RATIO_TABLES.values():
            assert set(table) == set(StructuralRole)

    def test_house_ratios(self):
        house = RATIO_TABLES["house"]
        assert house[StructuralRole.PRIMARY_STRUCTURE] == 40
        assert house[StructuralRole.CLADDING_METAL] == 0.5

    def test_tables_are_read_only(self):
        with pytest.raises(TypeError):
            RATIO_TABLES["house"][StructuralRole.GLAZING] = 99  # type: ignore[index]

    def test_one_rule_per_role(self):
        assert [rm.role for rm in ROLE_MATERIALS] == list(StructuralRole)

    def test_thresholds(self):
        assert role_materials(StructuralRole.PRIMARY_STRUCTURE).threshold == 0.3
        assert role_materials(StructuralRole.STRUCTURAL_METAL).threshold == 0.5
        assert role_materials(StructuralRole.SECONDARY_STRUCTURE).threshold == 0.7
        assert role_materials(StructuralRole.INSULATION).threshold == 0.8
        assert role_materials(StructuralRole.CLADDING_METAL).threshold == 0.4

    def test_threshold_is_strict(self):
        rule = role_materials(StructuralRole.PRIMARY_STRUCTURE)
        assert not rule.selects_alternative(0.3)
        assert rule.selects_alternative(0.3001)

    def test_fixed_roles_never_substitute(self):
        for role in (StructuralRole.ENVELOPE_MASONRY, StructuralRole.GLAZING):
            rule = role_materials(role)
            assert not rule.substitutable
            assert not rule.selects_alternative(1.0)
