"""Milk summary aggregation.

Pure functions over already-fetched measurements. Callers pass the whole
(unpaged) window so that paging the displayed records never changes the
totals, averages or trend.
"""
from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import date
from typing import Dict, Iterable, List, Optional, Sequence, Set, Union

from ..core.enums import WindowKind
from .model import MilkMeasurement

WEEKDAY_LABELS = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")
MONTH_LABELS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")

# range -> how the trend is bucketed
GROUPING_BY_RANGE = {
    WindowKind.DAY: "single",
    WindowKind.CUSTOM: "single",
    WindowKind.WEEK: "day",
    WindowKind.MONTH: "week",
    WindowKind.YEAR: "month",
}


@dataclass(frozen=True)
class TrendBucket:
    label: str
    total: float

    def to_dict(self) -> dict:
        return {"label": self.label, "total": self.total}


@dataclass(frozen=True)
class AnimalStats:
    animal_tag: str
    active_days: int
    total_quantity: float

    def to_dict(self) -> dict:
        return {"animal_tag": self.animal_tag, "active_days": self.active_days, "total_quantity": self.total_quantity}


@dataclass(frozen=True)
class MilkSummary:
    total_quantity: float
    previous_total_quantity: float
    distinct_animals: int
    average_per_animal: float
    average_active_days_per_animal: float
    trend: List[TrendBucket] = field(default_factory=list)
    animal: Optional[AnimalStats] = None

    def to_dict(self) -> dict:
        return {
            "total_quantity": self.total_quantity,
            "previous_total_quantity": self.previous_total_quantity,
            "distinct_animals": self.distinct_animals,
            "average_per_animal": self.average_per_animal,
            "average_active_days_per_animal": self.average_active_days_per_animal,
            "trend": [b.to_dict() for b in self.trend],
            "animal": self.animal.to_dict() if self.animal else None,
        }


def bucket_label(grouping: str, day: date) -> str:
    if grouping == "day":
        return WEEKDAY_LABELS[day.weekday()]
    if grouping == "week":
        return f"Week {min(4, math.ceil(day.day / 7))}"
    if grouping == "month":
        return MONTH_LABELS[day.month - 1]
    return "Today"


def trend_series(measurements: Iterable[MilkMeasurement], grouping: str) -> List[TrendBucket]:
    """Bucket quantities by label, in chronological order of first appearance."""
    totals: Dict[str, float] = {}
    for m in sorted(measurements, key=lambda m: m.record_date):
        label = bucket_label(grouping, m.record_date)
        totals[label] = totals.get(label, 0.0) + m.quantity
    return [TrendBucket(label=label, total=round(total, 1)) for label, total in totals.items()]


def _safe_div(numerator: float, denominator: float) -> float:
    return numerator / denominator if denominator else 0.0


def summarize(
    measurements: Sequence[MilkMeasurement],
    *,
    kind: Union[str, WindowKind],
    previous_total: float = 0.0,
    animal_tag: Optional[str] = None,
) -> MilkSummary:
    grouping = GROUPING_BY_RANGE[WindowKind(kind)]

    total = sum(m.quantity for m in measurements)
    days_by_animal: Dict[str, Set[date]] = {}
    for m in measurements:
        days_by_animal.setdefault(m.animal_tag, set()).add(m.record_date)

    distinct = len(days_by_animal)
    active_days = sum(len(days) for days in days_by_animal.values())

    animal = None
    if animal_tag:
        wanted = animal_tag.strip().lower()
        own = [m for m in measurements if m.animal_tag.lower() == wanted]
        animal = AnimalStats(
            animal_tag=own[0].animal_tag if own else animal_tag.strip(),
            active_days=len({m.record_date for m in own}),
            total_quantity=round(sum(m.quantity for m in own), 2),
        )

    return MilkSummary(
        total_quantity=round(total, 2),
        previous_total_quantity=round(float(previous_total or 0), 2),
        distinct_animals=distinct,
        average_per_animal=round(_safe_div(total, distinct), 2),
        average_active_days_per_animal=round(_safe_div(active_days, distinct), 2),
        trend=trend_series(measurements, grouping),
        animal=animal,
    )
