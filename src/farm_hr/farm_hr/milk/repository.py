from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import MilkPeriod
from .model import Animal, MilkMeasurement, MilkSnapshot


class MilkRepository(Protocol):
    def get_animal(self, animal_id: int) -> Optional[Animal]:
        raise NotImplementedError

    def get_animal_by_tag(self, animal_tag: str) -> Optional[Animal]:
        raise NotImplementedError

    def create_animal(self, animal_tag: str) -> Animal:
        raise NotImplementedError

    def list_animals(self) -> Sequence[Animal]:
        raise NotImplementedError

    def record_session(
        self,
        *,
        animal: Animal,
        record_date: date,
        period: MilkPeriod,
        quantity: float,
        recorded_at: datetime,
        recorder: str,
    ) -> MilkMeasurement:
        """Upsert the daily record, then upsert its session for ``period``, in one transaction."""
        raise NotImplementedError

    def snapshot(
        self,
        *,
        start_date: date,
        end_date: date,
        previous_start: date,
        previous_end: date,
        animal_tag: Optional[str] = None,
    ) -> MilkSnapshot:
        """Sessions whose record date is in [start, end] and the sum over [previous_start, previous_end].

        ``animal_tag`` filters both by case-insensitive substring.
        """
        raise NotImplementedError
