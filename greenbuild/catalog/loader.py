"""Catalog sources: the embedded seed data and CSV text/files."""

from __future__ import annotations

import csv
import io
import logging
from pathlib import Path

from pydantic import ValidationError

from greenbuild.catalog.models import MaterialCatalog, MaterialRecord
from greenbuild.catalog.seed_data import CSV_COLUMNS, SEED_MATERIALS

logger = logging.getLogger(__name__)

_DEFAULT_CATALOG = MaterialCatalog(SEED_MATERIALS)


def default_catalog() -> MaterialCatalog:
    """Return the embedded catalog.  Shared safely: it is immutable."""
    return _DEFAULT_CATALOG


def parse_catalog_csv(text: str) -> MaterialCatalog:
    """Parse catalog rows from CSV *text*.

    Expects the header ``material,category,unit,carbon_kg_per_unit,
    cost_per_unit,source``.  Malformed rows are skipped with a warning.
    """
    reader = csv.DictReader(io.StringIO(text.strip()))
    missing = [c for c in CSV_COLUMNS if c not in (reader.fieldnames or [])]
    if missing:
        logger.warning("Catalog CSV is missing columns: %s", ", ".join(missing))

    records: list[MaterialRecord] = []
    for line_no, row in enumerate(reader, start=2):
        name = (row.get("material") or "").strip()
        if not name:
            logger.warning("Skipping catalog row %d: no material name", line_no)
            continue
        try:
            records.append(MaterialRecord(
                name=name,
                category=(row.get("category") or "").strip(),
                unit=(row.get("unit") or "kg").strip(),
                carbon_per_unit=float(row.get("carbon_kg_per_unit") or ""),
                cost_per_unit=float(row.get("cost_per_unit") or ""),
                provenance=(row.get("source") or "").strip(),
            ))
        except (TypeError, ValueError, ValidationError):
            logger.warning("Skipping malformed catalog row %d: %r", line_no, row)

    if not records:
        logger.warning("No valid materials parsed from catalog CSV")
    return MaterialCatalog(records)


def load_catalog_csv(path: str | Path) -> MaterialCatalog:
    """Read and parse a catalog CSV file."""
    text = Path(path).read_text(encoding="utf-8")
    logger.debug("Loading material catalog from %s", path)
    return parse_catalog_csv(text)
