from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional


@dataclass(frozen=True)
class WorkOffAllotment:
    """How many work-off days each user picks in a given month."""

    allotment_id: int
    month: int
    year: int
    max_days: int

    def to_dict(self) -> dict:
        return {"id": self.allotment_id, "month": self.month, "year": self.year, "max_days": self.max_days}


@dataclass(frozen=True)
class WorkOffDay:
    workoff_id: int
    user_id: int
    off_date: date
    month: int
    year: int
    used: bool = False
    used_at: Optional[datetime] = None
    user_name: Optional[str] = None
    user_email: Optional[str] = None

    def to_dict(self) -> dict:
        data = {
            "id": self.workoff_id,
            "user_id": self.user_id,
            "date": self.off_date.isoformat(),
            "month": self.month,
            "year": self.year,
            "used": self.used,
            "used_at": self.used_at.isoformat() if self.used_at else None,
        }
        if self.user_name is not None:
            data["user"] = {"name": self.user_name, "email": self.user_email}
        return data
