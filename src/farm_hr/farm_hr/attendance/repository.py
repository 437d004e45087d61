from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from ..core.enums import AttendanceStatus
from .model import AttendanceRecord, AttendanceWithUser


class AttendanceRepository(Protocol):
    def upsert_status(self, *, user_id: int, work_date: date, status: AttendanceStatus) -> AttendanceRecord:
        raise NotImplementedError

    def count_for_user(self, user_id: int) -> int:
        raise NotImplementedError

    def list_for_user(self, user_id: int, *, offset: int, limit: int) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def delete_for_user(self, *, attendance_id: int, user_id: int) -> bool:
        raise NotImplementedError

    def count_between(self, *, start_date: date, end_date: date) -> int:
        raise NotImplementedError

    def list_between(self, *, start_date: date, end_date: date, offset: int, limit: int) -> Sequence[AttendanceWithUser]:
        raise NotImplementedError

    def latest_for_user(self, user_id: int) -> Optional[AttendanceWithUser]:
        raise NotImplementedError

    def update_status(self, *, attendance_id: int, status: AttendanceStatus) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def create_missing(self, *, user_ids: Sequence[int], work_date: date, status: AttendanceStatus) -> int:
        """Insert ``status`` rows for users without a row on ``work_date``; returns rows created."""
        raise NotImplementedError
