from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional


@dataclass(frozen=True)
class DailyWorkReport:
    """Domain entity: one work report per user and day."""

    report_id: int
    user_id: int
    report_date: date
    title: str
    tasks: str
    challenges: Optional[str] = None
    next_plan: Optional[str] = None
    user_name: Optional[str] = None
    created_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "id": self.report_id,
            "user_id": self.user_id,
            "date": self.report_date.isoformat(),
            "title": self.title,
            "tasks": self.tasks,
            "challenges": self.challenges,
            "next_plan": self.next_plan,
            "user": {"name": self.user_name} if self.user_name is not None else None,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
