from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..common.datetime_utils import now_local
from ..workoff.service import WorkOffService
from .service import AttendanceService


@dataclass(frozen=True)
class SweepResult:
    marked_absent: int
    workoffs_used: int

    def to_dict(self) -> dict:
        return {"marked_absent": self.marked_absent, "workoffs_used": self.workoffs_used}


class DailySweep:
    """End-of-day bookkeeping run on demand (login, or a leader's request).

    Both steps only touch rows that are still missing/unused, so re-running
    the sweep on the same day changes nothing.
    """

    def __init__(self, attendance: AttendanceService, workoffs: WorkOffService):
        self._attendance = attendance
        self._workoffs = workoffs

    def run(self, *, now: Optional[datetime] = None) -> SweepResult:
        now = now or now_local()
        return SweepResult(
            marked_absent=self._attendance.mark_absent_for_today(today=now.date()),
            workoffs_used=self._workoffs.auto_mark_used_today(now=now),
        )
