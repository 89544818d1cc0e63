"""
webfilter_core.seeds
--------------------
The seed table written by RecordContract.initialize().

A table is plain configuration owned by the contract instance; swap it by
passing `seeds=` to the contract or by loading one from a JSON file.
"""

from __future__ import annotations
import json
from dataclasses import replace
from typing import Any, Dict, Iterable, Iterator, Tuple
from .record import FilterRecord


class SeedTable:
    """Read-only, ordered tuple of records with non-empty, unique keys.

    Iteration yields copies, so callers cannot alter the shared table.
    """

    def __init__(self, records: Iterable[FilterRecord]):
        records = tuple(replace(rec) for rec in records)
        seen = set()
        for rec in records:
            if not isinstance(rec.allowlist, str) or not rec.allowlist:
                raise ValueError(f"seed record has an empty key: {rec!r}")
            if rec.allowlist in seen:
                raise ValueError(f"duplicate seed key: {rec.allowlist}")
            seen.add(rec.allowlist)
        self._records: Tuple[FilterRecord, ...] = records

    def __iter__(self) -> Iterator[FilterRecord]:
        return (replace(rec) for rec in self._records)

    def __len__(self) -> int:
        return len(self._records)

    def keys(self):
        return [rec.key for rec in self._records]

    @classmethod
    def from_dicts(cls, rows: Iterable[Dict[str, Any]]) -> "SeedTable":
        return cls(FilterRecord.from_dict(row) for row in rows)


def load_seed_table(path: str) -> SeedTable:
    """Read a seed table from a JSON file holding a list of record objects."""
    with open(path, "r", encoding="utf-8") as f:
        rows = json.load(f)
    if not isinstance(rows, list):
        raise ValueError(f"seed file {path} must hold a JSON list")
    return SeedTable.from_dicts(rows)


DEFAULT_SEED_TABLE = SeedTable([
    FilterRecord(allowlist="www.google.com", blocklist="", attribute2=5, attribute1="", webfilterlist=300),
    FilterRecord(allowlist="www.xxx.com", blocklist="www.xxx.com", attribute2=5, attribute1="", webfilterlist=400),
    FilterRecord(allowlist="www.bbc.co.uk", blocklist="", attribute2=10, attribute1="", webfilterlist=500),
    FilterRecord(allowlist="https://scholar.google.com/", blocklist="", attribute2=10, attribute1="", webfilterlist=600),
    FilterRecord(allowlist="www.instagram.com", blocklist="www.instagram.com", attribute2=15, attribute1="", webfilterlist=700),
    FilterRecord(allowlist="www.napier.ac.uk", blocklist="", attribute2=15, attribute1="", webfilterlist=800),
])
