from __future__ import annotations

from datetime import date
from typing import Dict, Optional, Sequence

from ..common.date_window import window
from ..common.datetime_utils import parse_iso_date, today_local
from ..common.validators import optional_text, require_non_empty
from ..core.enums import WindowKind
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..users.model import Identity
from .model import DailyWorkReport
from .repository import ReportRepository

REPORT_RANGES = (WindowKind.DAY, WindowKind.WEEK, WindowKind.MONTH)


class ReportService:
    def __init__(self, reports: ReportRepository):
        self._reports = reports

    def create(
        self,
        identity: Identity,
        *,
        title: Optional[str],
        tasks: Optional[str],
        report_date: Optional[str],
        challenges: Optional[str] = None,
        next_plan: Optional[str] = None,
    ) -> DailyWorkReport:
        if not title or not tasks or not report_date:
            raise ValidationError("Title, tasks, and date are required")

        # one report per user and day: a second submission replaces the first
        return self._reports.upsert(
            user_id=identity.user_id,
            report_date=parse_iso_date(report_date),
            title=require_non_empty(title, "Title"),
            tasks=require_non_empty(tasks, "Tasks"),
            challenges=optional_text(challenges),
            next_plan=optional_text(next_plan),
        )

    def get(self, report_id: int) -> DailyWorkReport:
        report = self._reports.get_by_id(int(report_id))
        if not report:
            raise NotFoundError("Report not found")
        return report

    def by_ranges(self, *, range_name: Optional[str] = None, anchor: Optional[date] = None) -> Dict[str, Sequence[DailyWorkReport]]:
        """Reports of the day, week and month containing ``anchor``.

        With a valid ``range_name`` only that range is filled; the others stay empty.
        """
        anchor = anchor or today_local()
        wanted = [k for k in REPORT_RANGES if k.value == range_name] or list(REPORT_RANGES)

        results: Dict[str, Sequence[DailyWorkReport]] = {k.value: [] for k in REPORT_RANGES}
        for kind in wanted:
            win = window(kind, anchor)
            results[kind.value] = self._reports.list_between(
                start_date=win.start_date,
                end_date=win.end_date,
                newest_first=True,
            )
        return results

    def _require_owner(self, identity: Identity, report_id: int) -> DailyWorkReport:
        report = self.get(report_id)
        if report.user_id != identity.user_id and not identity.can_manage_team():
            raise AuthorizationError("You can only change your own reports")
        return report

    def update(
        self,
        identity: Identity,
        report_id: int,
        *,
        title: Optional[str] = None,
        tasks: Optional[str] = None,
        challenges: Optional[str] = None,
        next_plan: Optional[str] = None,
    ) -> DailyWorkReport:
        current = self._require_owner(identity, report_id)
        self._reports.update(
            report_id=current.report_id,
            title=require_non_empty(title, "Title") if title is not None else current.title,
            tasks=require_non_empty(tasks, "Tasks") if tasks is not None else current.tasks,
            challenges=optional_text(challenges) if challenges is not None else current.challenges,
            next_plan=optional_text(next_plan) if next_plan is not None else current.next_plan,
        )
        return self.get(report_id)

    def delete(self, identity: Identity, report_id: int) -> None:
        self._require_owner(identity, report_id)
        if not self._reports.delete(int(report_id)):
            raise NotFoundError("Report not found")
