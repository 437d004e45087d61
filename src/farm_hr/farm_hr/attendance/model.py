from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import AttendanceStatus


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one attendance row per user and work date."""

    attendance_id: int
    user_id: int
    work_date: date
    status: AttendanceStatus
    updated_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "id": self.attendance_id,
            "user_id": self.user_id,
            "date": self.work_date.isoformat(),
            "status": self.status.value,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }


@dataclass(frozen=True)
class AttendanceWithUser:
    """Read-model for the admin day views (joined with the user)."""

    record: AttendanceRecord
    user_name: str
    username: str

    def to_dict(self) -> dict:
        data = self.record.to_dict()
        data["user"] = {"id": self.record.user_id, "name": self.user_name, "username": self.username}
        return data
