"""
Classification & entity-timeline engine: pure and deterministic.

Pipeline (one run per application):
  1. Classify  : attach the TaxonomyEntry for each event's transaction code
  2. Filter    : drop events whose code is not in the taxonomy
  3. Sort      : ascending by ISO-8601 date string (lexicographic == chronological)
  4. Timeline  : fold entity-status declarations into contiguous periods
  5. Resolve   : annotate every classified event with the rate in effect on its date

Design principle: no I/O, no shared mutable state. Callers (the transactions
router) fetch, cache and serialize; this module only computes. Running it
twice on the same input produces identical output.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from functools import reduce
from typing import Iterable, NamedTuple, Optional, Sequence, Union

from prosecution_tracker.taxonomy.constants import ENTITY_STATUS_RATES
from prosecution_tracker.taxonomy.registry import (
    TAXONOMY,
    Category,
    Taxonomy,
    TaxonomyEntry,
)

logger = logging.getLogger(__name__)


class EntityRate(str, Enum):
    UNDISCOUNTED = "undiscounted"
    SMALL = "small"
    MICRO = "micro"


# Legal default absent any filed entity-status declaration
DEFAULT_ENTITY_RATE = EntityRate.UNDISCOUNTED

ENTITY_CODE_RATES: dict[str, EntityRate] = {
    code: EntityRate(rate) for code, rate in ENTITY_STATUS_RATES.items()
}

# Display groups used by the timeline filter panel
EVENT_GROUPS: dict[str, frozenset[Category]] = {
    "fees": frozenset({Category.FILING_FEE, Category.ISSUE_FEE, Category.OTHER_FEE}),
    "entity": frozenset({Category.ENTITY_STATUS}),
    "milestones": frozenset({Category.MILESTONE}),
    "rce": frozenset({Category.RCE}),
    "appeals": frozenset({Category.APPEAL}),
}


# ── Types ─────────────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class RawEvent:
    """One prosecution action as reported upstream. Read-only input."""

    date: str  # ISO-8601 calendar date, e.g. "2021-07-01"
    code: str
    description: str = ""


@dataclass(frozen=True)
class ClassifiedEvent:
    date: str
    code: str
    description: str
    classification: Optional[TaxonomyEntry]
    entity_rate: Optional[EntityRate] = None

    @property
    def category(self) -> Optional[Category]:
        return self.classification.category if self.classification else None

    @property
    def is_fee_event(self) -> bool:
        return self.classification is not None and self.classification.is_fee

    @property
    def is_entity_change(self) -> bool:
        return self.classification is not None and self.classification.is_entity_change

    def to_dict(self) -> dict:
        return {
            "date": self.date,
            "code": self.code,
            "description": self.description,
            "classification": self.classification.to_dict() if self.classification else None,
            "entity_rate": self.entity_rate.value if self.entity_rate else None,
            "is_fee_event": self.is_fee_event,
            "is_entity_change": self.is_entity_change,
        }


@dataclass(frozen=True)
class EntityPeriod:
    """Half-open interval [from_date, to_date). to_date None means still open."""

    from_date: str
    to_date: Optional[str]
    status: EntityRate

    def contains(self, date: str) -> bool:
        return date >= self.from_date and (self.to_date is None or date < self.to_date)

    def to_dict(self) -> dict:
        return {"from": self.from_date, "to": self.to_date, "status": self.status.value}


@dataclass(frozen=True)
class TimelineResult:
    events: tuple[ClassifiedEvent, ...]
    entity_timeline: tuple[EntityPeriod, ...]

    def to_dict(self) -> dict:
        return {
            "events": [e.to_dict() for e in self.events],
            "entity_status_timeline": [p.to_dict() for p in self.entity_timeline],
        }


class _FoldState(NamedTuple):
    periods: tuple[EntityPeriod, ...]
    status: EntityRate
    from_date: str


# ── Steps ─────────────────────────────────────────────────────────────────────


def classify_events(
    events: Optional[Iterable[RawEvent]],
    taxonomy: Taxonomy = TAXONOMY,
) -> list[ClassifiedEvent]:
    """
    Attach a classification to each event; events with unknown codes are
    dropped. Unknown codes are normal upstream vocabulary, not errors.
    """
    classified: list[ClassifiedEvent] = []
    dropped = 0
    for event in events or ():
        entry = taxonomy.classify(event.code)
        if entry is None:
            dropped += 1
            continue
        classified.append(
            ClassifiedEvent(
                date=event.date,
                code=event.code,
                description=event.description,
                classification=entry,
            )
        )
    if dropped:
        logger.debug("Dropped %d event(s) with unrecognized transaction codes", dropped)
    return classified


def sort_events(events: Iterable[ClassifiedEvent]) -> list[ClassifiedEvent]:
    """Stable ascending sort on the ISO date string."""
    return sorted(events, key=lambda e: e.date)


def _fold_entity_change(state: _FoldState, event: ClassifiedEvent) -> _FoldState:
    new_status = ENTITY_CODE_RATES.get(event.code)
    if new_status is None or not event.is_entity_change:
        return state

    periods = state.periods
    # Same-date declarations overwrite the pending status; no zero-length period
    if event.date > state.from_date:
        periods = periods + (EntityPeriod(state.from_date, event.date, state.status),)
    return _FoldState(periods, new_status, event.date)


def build_entity_timeline(events: Sequence[ClassifiedEvent]) -> tuple[EntityPeriod, ...]:
    """
    Reconstruct the entity-status periods for one application.

    The first period starts at the earliest classified event (of any
    category) with the undiscounted default, so every event falls inside
    some period. Periods are contiguous: periods[i].to_date == periods[i+1].from_date,
    and only the last one is open. Empty input yields an empty timeline.
    """
    if not events:
        return ()

    ordered = sort_events(events)
    initial = _FoldState((), DEFAULT_ENTITY_RATE, ordered[0].date)
    final = reduce(_fold_entity_change, ordered, initial)
    return final.periods + (EntityPeriod(final.from_date, None, final.status),)


def resolve_entity_rate(timeline: Sequence[EntityPeriod], date: str) -> EntityRate:
    """
    Rate in effect on `date`. A status-change date belongs to the period it
    starts. An empty timeline resolves to the undiscounted default.
    """
    for period in timeline:
        if period.contains(date):
            return period.status
    return DEFAULT_ENTITY_RATE


def process_transactions(
    events: Optional[Iterable[RawEvent]],
    taxonomy: Taxonomy = TAXONOMY,
) -> TimelineResult:
    """
    Run the full pipeline: classify → filter → sort → timeline → resolve.
    Every classified event (not only fee events) carries its entity_rate;
    choosing what to display is the presentation layer's job.
    """
    ordered = sort_events(classify_events(events, taxonomy))
    timeline = build_entity_timeline(ordered)
    annotated = tuple(
        ClassifiedEvent(
            date=e.date,
            code=e.code,
            description=e.description,
            classification=e.classification,
            entity_rate=resolve_entity_rate(timeline, e.date),
        )
        for e in ordered
    )
    return TimelineResult(events=annotated, entity_timeline=timeline)


# ── Display filtering ─────────────────────────────────────────────────────────


def categories_for_groups(groups: Iterable[str]) -> frozenset[Category]:
    """Union of categories for the named display groups. Raises ValueError on unknown names."""
    selected: set[Category] = set()
    for group in groups:
        try:
            selected |= EVENT_GROUPS[group]
        except KeyError:
            raise ValueError(
                f"Unknown event group {group!r}. Expected one of: {sorted(EVENT_GROUPS)}"
            )
    return frozenset(selected)


def _category_value(event: Union[ClassifiedEvent, dict]) -> Optional[str]:
    if isinstance(event, ClassifiedEvent):
        return event.category.value if event.category else None
    return (event.get("classification") or {}).get("category")


def filter_events(
    events: Iterable[Union[ClassifiedEvent, dict]], groups: Iterable[str]
) -> list:
    """
    Keep events whose category belongs to one of the requested display groups.
    Accepts ClassifiedEvents or their to_dict() form (as read back from the cache).
    """
    allowed = {c.value for c in categories_for_groups(groups)}
    return [e for e in events if _category_value(e) in allowed]
