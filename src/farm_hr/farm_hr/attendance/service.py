from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Optional, Sequence

from ..common.date_window import DateWindow, attendance_window
from ..common.datetime_utils import today_local
from ..common.pagination import Page
from ..core.enums import AttendanceStatus
from ..core.exceptions import NotFoundError, ValidationError
from ..users.model import Identity
from ..users.repository import UserRepository
from .model import AttendanceRecord, AttendanceWithUser
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


def parse_status(value: Optional[str]) -> AttendanceStatus:
    if not value:
        raise ValidationError("Status is required")
    try:
        return AttendanceStatus(value)
    except ValueError:
        allowed = ", ".join(s.value for s in AttendanceStatus)
        raise ValidationError(f"Invalid status (allowed: {allowed})")


@dataclass(frozen=True)
class PagedAttendance:
    records: Sequence[AttendanceRecord]
    total: int


@dataclass(frozen=True)
class AttendanceDayView:
    window: DateWindow
    rows: Sequence[AttendanceWithUser]
    total: int


class AttendanceService:
    def __init__(self, attendance: AttendanceRepository, users: UserRepository):
        self._attendance = attendance
        self._users = users

    def set_today_status(self, identity: Identity, status: Optional[str], *, today: Optional[date] = None) -> AttendanceRecord:
        return self._attendance.upsert_status(
            user_id=identity.user_id,
            work_date=today or today_local(),
            status=parse_status(status),
        )

    def my_attendances(self, identity: Identity, page: Page) -> PagedAttendance:
        total = self._attendance.count_for_user(identity.user_id)
        records = self._attendance.list_for_user(identity.user_id, offset=page.offset, limit=page.limit)
        return PagedAttendance(records=records, total=total)

    def delete_my_attendance(self, identity: Identity, attendance_id: int) -> None:
        # users can only delete their own rows
        if not self._attendance.delete_for_user(attendance_id=int(attendance_id), user_id=identity.user_id):
            raise NotFoundError("Attendance not found")

    def day_view(
        self,
        *,
        filter_name: Optional[str],
        custom_date: Optional[date],
        page: Page,
        today: Optional[date] = None,
    ) -> AttendanceDayView:
        win = attendance_window(filter_name, custom_date, today=today)
        total = self._attendance.count_between(start_date=win.start_date, end_date=win.end_date)
        rows = self._attendance.list_between(
            start_date=win.start_date,
            end_date=win.end_date,
            offset=page.offset,
            limit=page.limit,
        )
        return AttendanceDayView(window=win, rows=rows, total=total)

    def latest_for_user(self, user_id: int) -> AttendanceWithUser:
        row = self._attendance.latest_for_user(int(user_id))
        if not row:
            raise NotFoundError("Record not found")
        return row

    def update_status(self, attendance_id: int, status: Optional[str]) -> AttendanceRecord:
        record = self._attendance.update_status(attendance_id=int(attendance_id), status=parse_status(status))
        if not record:
            raise NotFoundError("Record not found")
        return record

    def mark_absent_for_today(self, *, today: Optional[date] = None) -> int:
        """Give every user without a row today an Absent row. Safe to run repeatedly."""
        today = today or today_local()
        created = self._attendance.create_missing(
            user_ids=self._users.list_ids(),
            work_date=today,
            status=AttendanceStatus.ABSENT,
        )
        logger.info("marked %s user(s) absent for %s", created, today.isoformat())
        return created
