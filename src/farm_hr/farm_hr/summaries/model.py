from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import SummaryType


@dataclass(frozen=True)
class ReportSummary:
    """AI (or admin-written) summary of the work reports of one period.

    Unique per (summary_type, start_date, end_date).
    """

    summary_id: int
    summary_type: SummaryType
    start_date: date
    end_date: date
    content: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "id": self.summary_id,
            "type": self.summary_type.value,
            "start_date": self.start_date.isoformat(),
            "end_date": self.end_date.isoformat(),
            "content": self.content,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }
