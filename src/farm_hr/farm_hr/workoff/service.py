from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Optional, Sequence

from ..common.datetime_utils import now_local, parse_iso_date
from ..common.validators import require_positive_int
from ..core.exceptions import ConflictError, NotFoundError, ValidationError
from ..users.model import Identity
from .model import WorkOffAllotment, WorkOffDay
from .repository import WorkOffRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WorkOffSummary:
    records: Sequence[WorkOffDay]

    @property
    def total_selected(self) -> int:
        return len(self.records)

    @property
    def used(self) -> int:
        return sum(1 for r in self.records if r.used)

    def to_dict(self) -> dict:
        return {
            "total_selected": self.total_selected,
            "used": self.used,
            "remaining": self.total_selected - self.used,
            "records": [r.to_dict() for r in self.records],
        }


class WorkOffService:
    """Monthly work-off quota: leaders set the allotment, users pick exactly that many dates."""

    def __init__(self, workoffs: WorkOffRepository):
        self._workoffs = workoffs

    def current_allotment(self, *, today: Optional[date] = None) -> WorkOffAllotment:
        today = today or now_local().date()
        allotment = self._workoffs.get_allotment(month=today.month, year=today.year)
        if not allotment:
            raise NotFoundError("No limit found")
        return allotment

    def save_days(self, identity: Identity, dates: Any, *, today: Optional[date] = None) -> int:
        today = today or now_local().date()
        allotment = self.current_allotment(today=today)

        if not isinstance(dates, (list, tuple)) or len(dates) != allotment.max_days:
            raise ValidationError(f"Only {allotment.max_days} days allowed")

        parsed = [parse_iso_date(str(d)) for d in dates]
        if len(set(parsed)) != len(parsed):
            raise ValidationError("Work-off dates must be distinct")

        for d in parsed:
            if (d.year, d.month) != (today.year, today.month):
                raise ValidationError(f"Work-off dates must fall in {today.month:02d}/{today.year}")

        # the allotment caps what a user holds in the month, not one submission
        held = self._workoffs.list_for_user(user_id=identity.user_id, month=today.month, year=today.year)
        if held:
            raise ConflictError(f"Work-off days already selected for {today.month:02d}/{today.year}")

        created = self._workoffs.create_days(
            user_id=identity.user_id,
            dates=sorted(parsed),
            month=today.month,
            year=today.year,
        )
        logger.info("user %s saved %s work-off day(s)", identity.user_id, created)
        return created

    def summary(self, identity: Identity, *, today: Optional[date] = None) -> WorkOffSummary:
        today = today or now_local().date()
        self.current_allotment(today=today)
        records = self._workoffs.list_for_user(user_id=identity.user_id, month=today.month, year=today.year)
        return WorkOffSummary(records=records)

    def mark_used(self, identity: Identity, off_date: Optional[str], *, now: Optional[datetime] = None) -> None:
        if not off_date:
            raise ValidationError("Date is required")

        record = self._workoffs.find_for_user_on(user_id=identity.user_id, off_date=parse_iso_date(off_date))
        if not record:
            raise NotFoundError("Work-off not found for this date")

        self._workoffs.mark_used(workoff_id=record.workoff_id, used_at=now or now_local())

    def set_monthly_limit(self, *, month: Any, year: Any, max_days: Any) -> WorkOffAllotment:
        if not month or not year or not max_days:
            raise ValidationError("Missing fields")

        month = require_positive_int(month, "Month")
        if month > 12:
            raise ValidationError("Month must be between 1 and 12")

        return self._workoffs.upsert_allotment(
            month=month,
            year=require_positive_int(year, "Year"),
            max_days=require_positive_int(max_days, "Max days"),
        )

    def monthly_overview(self, *, month: Any, year: Any, user_id: Optional[Any] = None) -> Sequence[WorkOffDay]:
        return self._workoffs.list_overview(
            month=require_positive_int(month, "Month"),
            year=require_positive_int(year, "Year"),
            user_id=require_positive_int(user_id, "User") if user_id else None,
        )

    def move_date(self, workoff_id: int, new_date: Optional[str]) -> None:
        if not new_date:
            raise ValidationError("New date is required")
        if not self._workoffs.move(workoff_id=int(workoff_id), new_date=parse_iso_date(new_date)):
            raise NotFoundError("Work-off not found")

    def auto_mark_used_today(self, *, now: Optional[datetime] = None) -> int:
        """Flag today's unused work-off days as used. Safe to run repeatedly."""
        now = now or now_local()
        updated = self._workoffs.mark_used_on(off_date=now.date(), used_at=now)
        logger.info("auto-marked %s work-off day(s) used for %s", updated, now.date().isoformat())
        return updated
