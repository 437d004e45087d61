from __future__ import annotations

import logging
from datetime import date
from typing import Optional, Sequence, Union

from ..common.validators import require_non_empty
from ..core.enums import SummaryType
from ..core.exceptions import AuthorizationError, ConflictError, NotFoundError
from ..reports.model import DailyWorkReport
from ..reports.repository import ReportRepository
from ..users.model import Identity
from .model import ReportSummary
from .period import parse_summary_type, resolve
from .repository import SummaryRepository
from .summarizer import Summarizer

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = "You are a professional HR assistant. Summarize the work reports clearly and professionally."
REPORT_SEPARATOR = "\n-------------------------\n"


def render_report(report: DailyWorkReport) -> str:
    return (
        f"Date: {report.report_date.isoformat()}\n"
        f"Title: {report.title or 'N/A'}\n"
        f"Tasks Done:\n{report.tasks}\n"
        f"Challenges:\n{report.challenges or 'None'}\n"
        f"Next Plan:\n{report.next_plan or 'None'}\n"
    )


def render_reports(reports: Sequence[DailyWorkReport]) -> str:
    return REPORT_SEPARATOR.join(render_report(r) for r in reports)


class SummaryService:
    """Generates, stores and lists period summaries of the daily work reports."""

    def __init__(self, summaries: SummaryRepository, reports: ReportRepository, summarizer: Summarizer):
        self._summaries = summaries
        self._reports = reports
        self._summarizer = summarizer

    def generate(self, summary_type: Union[str, SummaryType], *, today: Optional[date] = None) -> ReportSummary:
        """Summarize the reports of the current period (up to today) and upsert the result.

        Raises NotFoundError when the period has no reports; nothing is written then.
        """
        summary_type = parse_summary_type(summary_type)
        period = resolve(summary_type, today=today, to_date=True)

        reports = self._reports.list_between(start_date=period.start_date, end_date=period.end_date)
        if not reports:
            raise NotFoundError(f"No reports found for {summary_type.value}")

        content = self._summarizer.summarize(SYSTEM_PROMPT, render_reports(reports))

        saved = self._summaries.upsert(
            summary_type=summary_type,
            start_date=period.start_date,
            end_date=period.end_date,
            content=content,
        )
        logger.info(
            "%s summary saved for %s..%s (%s reports)",
            summary_type.value,
            period.start_date.isoformat(),
            period.end_date.isoformat(),
            len(reports),
        )
        return saved

    def create(
        self,
        identity: Identity,
        summary_type: Union[str, SummaryType],
        content: Optional[str],
        *,
        today: Optional[date] = None,
    ) -> ReportSummary:
        """Admin-written summary for the whole calendar period containing today."""
        if not identity.is_admin():
            raise AuthorizationError("Access denied. Admin only.")

        summary_type = parse_summary_type(summary_type)
        content = require_non_empty(content, "Content")
        period = resolve(summary_type, today=today, to_date=False)

        existing = self._summaries.get_for_period(
            summary_type=summary_type,
            start_date=period.start_date,
            end_date=period.end_date,
        )
        if existing:
            raise ConflictError("Summary already exists for this period")

        return self._summaries.create(
            summary_type=summary_type,
            start_date=period.start_date,
            end_date=period.end_date,
            content=content,
        )

    def list(self, summary_type: Union[str, SummaryType, None]) -> Sequence[ReportSummary]:
        return self._summaries.list_by_type(parse_summary_type(summary_type))

    def delete(self, identity: Identity, summary_id: int) -> None:
        if not identity.is_admin():
            raise AuthorizationError("Access denied. Admin only.")
        if not self._summaries.delete(int(summary_id)):
            raise NotFoundError("Summary not found")
