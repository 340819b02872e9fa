"""
Taxonomy registry: merged code index over the transaction-code table.

The constants table is grouped by category; this module flattens it into a
single code → TaxonomyEntry mapping once at import time. Codes must be
unique across categories. A duplicate is detected while the index is built:
strict mode raises TaxonomyError, non-strict mode keeps the first definition.

Usage:
    from prosecution_tracker.taxonomy.registry import classify, is_fee_event
    entry = classify("FEE.")   # TaxonomyEntry(category=Category.FILING_FEE, ...)
    classify("XXXX")           # None
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Optional

from prosecution_tracker.taxonomy.constants import CATEGORY_ORDER, TRANSACTION_CODES

logger = logging.getLogger(__name__)


class Category(str, Enum):
    ENTITY_STATUS = "entity_status"
    FILING_FEE = "filing_fee"
    ISSUE_FEE = "issue_fee"
    RCE = "rce"
    APPEAL = "appeal"
    MILESTONE = "milestone"
    OTHER_FEE = "other_fee"


FEE_CATEGORIES: frozenset[Category] = frozenset(
    {Category.FILING_FEE, Category.ISSUE_FEE, Category.OTHER_FEE}
)


class TaxonomyError(Exception):
    """Raised when the taxonomy table is internally inconsistent."""


@dataclass(frozen=True)
class TaxonomyEntry:
    code: str
    category: Category
    label: str
    icon: str
    color: str  # hex, e.g. "#DC2626"

    @property
    def is_fee(self) -> bool:
        return self.category in FEE_CATEGORIES

    @property
    def is_entity_change(self) -> bool:
        return self.category == Category.ENTITY_STATUS

    def to_dict(self) -> dict:
        return {
            "category": self.category.value,
            "label": self.label,
            "icon": self.icon,
            "color": self.color,
        }


class Taxonomy:
    """
    Read-only code index. Build once, share everywhere.
    Safe for concurrent readers: nothing mutates it after __init__.
    """

    def __init__(self, entries: Iterable[TaxonomyEntry], strict: bool = True):
        index: dict[str, TaxonomyEntry] = {}
        for entry in entries:
            existing = index.get(entry.code)
            if existing is not None:
                if strict:
                    raise TaxonomyError(
                        f"Transaction code {entry.code!r} defined under both "
                        f"{existing.category.value!r} and {entry.category.value!r}"
                    )
                logger.warning(
                    "Duplicate taxonomy code %r (%s); keeping first definition (%s)",
                    entry.code,
                    entry.category.value,
                    existing.category.value,
                )
                continue
            index[entry.code] = entry
        self._index = index

    @classmethod
    def from_records(cls, records: Iterable[dict], strict: bool = True) -> "Taxonomy":
        """Build from constants-shaped dicts. Unknown categories raise TaxonomyError."""
        entries = []
        for record in records:
            try:
                category = Category(record["category"])
            except ValueError:
                raise TaxonomyError(
                    f"Unknown category {record['category']!r} for code {record['code']!r}"
                )
            entries.append(
                TaxonomyEntry(
                    code=record["code"],
                    category=category,
                    label=record["label"],
                    icon=record["icon"],
                    color=record["color"],
                )
            )
        return cls(entries, strict=strict)

    def classify(self, code: Optional[str]) -> Optional[TaxonomyEntry]:
        if not code:
            return None
        return self._index.get(code)

    def is_fee_event(self, code: Optional[str]) -> bool:
        entry = self.classify(code)
        return entry is not None and entry.is_fee

    def is_entity_change(self, code: Optional[str]) -> bool:
        entry = self.classify(code)
        return entry is not None and entry.is_entity_change

    def codes_by_category(self) -> dict[str, dict[str, dict]]:
        """
        Full table grouped by category, in canonical category order:
            {"entity_status": {"BIG.": {"label": ..., "icon": ..., "color": ...}, ...}, ...}
        """
        grouped: dict[str, dict[str, dict]] = {name: {} for name in CATEGORY_ORDER}
        for entry in self._index.values():
            grouped.setdefault(entry.category.value, {})[entry.code] = {
                "label": entry.label,
                "icon": entry.icon,
                "color": entry.color,
            }
        return grouped

    def __contains__(self, code: object) -> bool:
        return code in self._index

    def __len__(self) -> int:
        return len(self._index)


# Process-wide table: loaded once, never mutated
TAXONOMY = Taxonomy.from_records(TRANSACTION_CODES)


def classify(code: Optional[str]) -> Optional[TaxonomyEntry]:
    """Look up a transaction code in the process-wide taxonomy."""
    return TAXONOMY.classify(code)


def is_fee_event(code: Optional[str]) -> bool:
    return TAXONOMY.is_fee_event(code)


def is_entity_change(code: Optional[str]) -> bool:
    return TAXONOMY.is_entity_change(code)
