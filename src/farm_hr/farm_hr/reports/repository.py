from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import DailyWorkReport


class ReportRepository(Protocol):
    def upsert(
        self,
        *,
        user_id: int,
        report_date: date,
        title: str,
        tasks: str,
        challenges: Optional[str],
        next_plan: Optional[str],
    ) -> DailyWorkReport:
        raise NotImplementedError

    def get_by_id(self, report_id: int) -> Optional[DailyWorkReport]:
        raise NotImplementedError

    def list_between(self, *, start_date: date, end_date: date, newest_first: bool = False) -> Sequence[DailyWorkReport]:
        raise NotImplementedError

    def update(
        self,
        *,
        report_id: int,
        title: str,
        tasks: str,
        challenges: Optional[str],
        next_plan: Optional[str],
    ) -> bool:
        raise NotImplementedError

    def delete(self, report_id: int) -> bool:
        raise NotImplementedError
