"""MaterialRecord and MaterialCatalog — immutable reference data."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from types import MappingProxyType
from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from greenbuild.errors import CatalogIntegrityError


class MaterialRecord(BaseModel):
    """Carbon and cost coefficients for one catalog material."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, alias_generator=to_camel)

    name: str
    """Unique catalog key, e.g. 'Concrete (Standard)'."""

    category: str = ""
    unit: str = "kg"

    carbon_per_unit: float
    """kg CO2e per unit.  May be negative for sequestering materials."""

    cost_per_unit: float
    """Currency (USD) per unit."""

    provenance: str = ""
    """Free-text source tag, e.g. 'ICE Database v3.0'."""


class MaterialCatalog:
    """Ordered, read-only collection of materials keyed by name.

    Parameters
    ----------
    records:
        MaterialRecord instances or plain dicts accepted by
        :class:`MaterialRecord`.  Names must be unique.
    """

    def __init__(self, records: Iterable[MaterialRecord | dict[str, Any]]) -> None:
        items: list[MaterialRecord] = []
        index: dict[str, MaterialRecord] = {}
        for rec in records:
            if not isinstance(rec, MaterialRecord):
                rec = MaterialRecord.model_validate(rec)
            if rec.name in index:
                raise CatalogIntegrityError(
                    rec.name, f"Duplicate material in catalog: {rec.name!r}"
                )
            index[rec.name] = rec
            items.append(rec)
        self._records = tuple(items)
        self._index = MappingProxyType(index)

    def get(self, name: str) -> MaterialRecord | None:
        return self._index.get(name)

    def require(self, name: str) -> MaterialRecord:
        """Return the named material or raise :class:`CatalogIntegrityError`."""
        rec = self._index.get(name)
        if rec is None:
            raise CatalogIntegrityError(name)
        return rec

    def names(self) -> list[str]:
        return [r.name for r in self._records]

    def to_list(self) -> list[dict[str, Any]]:
        """Plain dicts with camelCase keys, suitable for echoing to a client."""
        return [r.model_dump(by_alias=True) for r in self._records]

    def __contains__(self, name: object) -> bool:
        return name in self._index

    def __iter__(self) -> Iterator[MaterialRecord]:
        return iter(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, MaterialCatalog):
            return NotImplemented
        return self._records == other._records

    def __hash__(self) -> int:
        return hash(self._records)

    def __repr__(self) -> str:
        return f"MaterialCatalog({len(self._records)} materials)"
