from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from .model import WorkOffAllotment, WorkOffDay


class WorkOffRepository(Protocol):
    def get_allotment(self, *, month: int, year: int) -> Optional[WorkOffAllotment]:
        raise NotImplementedError

    def upsert_allotment(self, *, month: int, year: int, max_days: int) -> WorkOffAllotment:
        raise NotImplementedError

    def create_days(self, *, user_id: int, dates: Sequence[date], month: int, year: int) -> int:
        """Insert the dates, skipping ones the user already holds; returns rows created."""
        raise NotImplementedError

    def list_for_user(self, *, user_id: int, month: int, year: int) -> Sequence[WorkOffDay]:
        raise NotImplementedError

    def find_for_user_on(self, *, user_id: int, off_date: date) -> Optional[WorkOffDay]:
        raise NotImplementedError

    def mark_used(self, *, workoff_id: int, used_at: datetime) -> bool:
        raise NotImplementedError

    def list_overview(self, *, month: int, year: int, user_id: Optional[int] = None) -> Sequence[WorkOffDay]:
        raise NotImplementedError

    def move(self, *, workoff_id: int, new_date: date) -> bool:
        raise NotImplementedError

    def mark_used_on(self, *, off_date: date, used_at: datetime) -> int:
        raise NotImplementedError
