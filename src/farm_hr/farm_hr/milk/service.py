from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional, Sequence

from ..common.date_window import DateWindow, parse_kind, previous_anchor, window
from ..common.datetime_utils import now_local, parse_iso_date
from ..common.pagination import Page
from ..common.validators import require_non_empty, require_positive_int, require_positive_number
from ..core.enums import MilkPeriod, WindowKind
from ..core.exceptions import ConflictError, NotFoundError, ValidationError
from ..users.model import Identity
from ..users.repository import UserRepository
from .aggregator import MilkSummary, summarize
from .model import Animal, MilkMeasurement
from .repository import MilkRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MilkSummaryPage:
    kind: WindowKind
    window: DateWindow
    summary: MilkSummary
    page: Page
    total_records: int
    records: Sequence[MilkMeasurement]

    def to_dict(self) -> dict:
        return {
            "range": self.kind.value,
            "period": self.window.as_dict(),
            **self.summary.to_dict(),
            "pagination": self.page.as_dict(self.total_records),
            "records": [r.to_dict() for r in self.records],
        }


class MilkService:
    def __init__(self, milk: MilkRepository, users: UserRepository):
        self._milk = milk
        self._users = users

    def add_animal(self, animal_tag: Optional[str]) -> Animal:
        animal_tag = require_non_empty(animal_tag, "Animal tag")
        if self._milk.get_animal_by_tag(animal_tag):
            raise ConflictError("Animal is existing in the list")
        return self._milk.create_animal(animal_tag)

    def list_animals(self) -> Sequence[Animal]:
        return self._milk.list_animals()

    def record(
        self,
        identity: Identity,
        *,
        animal_id: Any,
        period: Optional[str],
        quantity: Any,
        now: Optional[datetime] = None,
    ) -> MilkMeasurement:
        """Record today's morning/evening quantity; recording the same session again overwrites it."""
        if not animal_id or not period or not quantity:
            raise ValidationError("Missing required fields")

        try:
            milk_period = MilkPeriod(period)
        except ValueError:
            raise ValidationError("Period must be morning or evening")

        quantity = require_positive_number(quantity, "Quantity")

        recorder = self._users.get_by_id(identity.user_id)
        if not recorder:
            raise NotFoundError("Recorder not found")

        animal = self._milk.get_animal(require_positive_int(animal_id, "Animal"))
        if not animal:
            raise NotFoundError("Animal not found")

        now = now or now_local()
        measurement = self._milk.record_session(
            animal=animal,
            record_date=now.date(),
            period=milk_period,
            quantity=quantity,
            recorded_at=now,
            recorder=recorder.name,
        )
        logger.info("milk %s %s recorded for %s by %s", milk_period.value, quantity, animal.animal_tag, recorder.name)
        return measurement

    def summary(
        self,
        *,
        range_name: Optional[str],
        anchor: Optional[str],
        animal_tag: Optional[str],
        page: Page,
    ) -> MilkSummaryPage:
        if not anchor:
            raise ValidationError("Date is required")

        kind = parse_kind(range_name)
        anchor_date = parse_iso_date(anchor)
        current = window(kind, anchor_date)
        previous = window(kind, previous_anchor(kind, anchor_date))
        tag = (animal_tag or "").strip() or None

        snapshot = self._milk.snapshot(
            start_date=current.start_date,
            end_date=current.end_date,
            previous_start=previous.start_date,
            previous_end=previous.end_date,
            animal_tag=tag,
        )

        # aggregates always see the full window; only the listed records are paged
        aggregate = summarize(snapshot.measurements, kind=kind, previous_total=snapshot.previous_total, animal_tag=tag)
        records = list(snapshot.measurements)[page.offset:page.offset + page.limit]

        return MilkSummaryPage(
            kind=kind,
            window=current,
            summary=aggregate,
            page=page,
            total_records=len(snapshot.measurements),
            records=records,
        )
