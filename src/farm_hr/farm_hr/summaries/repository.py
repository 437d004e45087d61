from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from ..core.enums import SummaryType
from .model import ReportSummary


class SummaryRepository(Protocol):
    def get_for_period(self, *, summary_type: SummaryType, start_date: date, end_date: date) -> Optional[ReportSummary]:
        raise NotImplementedError

    def upsert(self, *, summary_type: SummaryType, start_date: date, end_date: date, content: str) -> ReportSummary:
        """Update the content of the (type, start, end) row, or create it."""
        raise NotImplementedError

    def create(self, *, summary_type: SummaryType, start_date: date, end_date: date, content: str) -> ReportSummary:
        raise NotImplementedError

    def list_by_type(self, summary_type: SummaryType) -> Sequence[ReportSummary]:
        raise NotImplementedError

    def delete(self, summary_id: int) -> bool:
        raise NotImplementedError
