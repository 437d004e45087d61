from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional, Sequence

from ..core.enums import MilkPeriod


@dataclass(frozen=True)
class Animal:
    animal_id: int
    animal_tag: str

    def to_dict(self) -> dict:
        return {"id": self.animal_id, "animal_tag": self.animal_tag}


@dataclass(frozen=True)
class MilkMeasurement:
    """One milk session: at most one per (animal, record date, period)."""

    animal_tag: str
    quantity: float
    record_date: date
    period: MilkPeriod
    recorded_at: Optional[datetime] = None
    recorder: Optional[str] = None
    record_id: Optional[int] = None
    session_id: Optional[int] = None

    def to_dict(self) -> dict:
        return {
            "date": self.record_date.isoformat(),
            "animal_tag": self.animal_tag,
            "time": self.recorded_at.isoformat() if self.recorded_at else None,
            "period": self.period.value,
            "quantity": self.quantity,
            "recorder": self.recorder,
        }


@dataclass(frozen=True)
class MilkSnapshot:
    """Every session in the window plus the previous window's total, read together."""

    measurements: Sequence[MilkMeasurement]
    previous_total: float
