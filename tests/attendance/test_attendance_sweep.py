from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime

import pytest

from src.farm_hr.farm_hr.attendance.model import AttendanceRecord, AttendanceWithUser
from src.farm_hr.farm_hr.attendance.service import AttendanceService
from src.farm_hr.farm_hr.attendance.sweep import DailySweep
from src.farm_hr.farm_hr.common.pagination import Page
from src.farm_hr.farm_hr.core.enums import AttendanceStatus, Role
from src.farm_hr.farm_hr.core.exceptions import NotFoundError, ValidationError
from src.farm_hr.farm_hr.users.model import Identity
from src.farm_hr.farm_hr.workoff.model import WorkOffDay
from src.farm_hr.farm_hr.workoff.service import WorkOffService

TODAY = date(2026, 10, 19)
MEMBER = Identity(user_id=1, role=Role.TEAM_MEMBER)


class FakeAttendanceRepo:
    def __init__(self):
        self.rows: dict[int, AttendanceRecord] = {}
        self._next_id = 1

    def _find(self, user_id, work_date):
        return next((r for r in self.rows.values() if r.user_id == user_id and r.work_date == work_date), None)

    def upsert_status(self, *, user_id, work_date, status):
        current = self._find(user_id, work_date)
        if current:
            self.rows[current.attendance_id] = replace(current, status=status)
            return self.rows[current.attendance_id]
        record = AttendanceRecord(attendance_id=self._next_id, user_id=user_id, work_date=work_date, status=status)
        self.rows[record.attendance_id] = record
        self._next_id += 1
        return record

    def count_for_user(self, user_id):
        return len(self.list_for_user(user_id, offset=0, limit=10_000))

    def list_for_user(self, user_id, *, offset, limit):
        mine = sorted((r for r in self.rows.values() if r.user_id == user_id), key=lambda r: r.work_date, reverse=True)
        return mine[offset:offset + limit]

    def delete_for_user(self, *, attendance_id, user_id):
        record = self.rows.get(attendance_id)
        if not record or record.user_id != user_id:
            return False
        del self.rows[attendance_id]
        return True

    def _between(self, start_date, end_date):
        return [r for r in self.rows.values() if start_date <= r.work_date <= end_date]

    def count_between(self, *, start_date, end_date):
        return len(self._between(start_date, end_date))

    def list_between(self, *, start_date, end_date, offset, limit):
        rows = [AttendanceWithUser(record=r, user_name=f"User {r.user_id}", username=f"u{r.user_id}") for r in self._between(start_date, end_date)]
        return rows[offset:offset + limit]

    def latest_for_user(self, user_id):
        mine = self.list_for_user(user_id, offset=0, limit=1)
        return AttendanceWithUser(record=mine[0], user_name="User", username="u") if mine else None

    def update_status(self, *, attendance_id, status):
        if attendance_id not in self.rows:
            return None
        self.rows[attendance_id] = replace(self.rows[attendance_id], status=status)
        return self.rows[attendance_id]

    def create_missing(self, *, user_ids, work_date, status):
        created = 0
        for user_id in user_ids:
            if not self._find(user_id, work_date):
                self.upsert_status(user_id=user_id, work_date=work_date, status=status)
                created += 1
        return created


class FakeUsers:
    def __init__(self, ids):
        self.ids = ids

    def list_ids(self):
        return list(self.ids)


class FakeWorkOffs:
    def __init__(self, days):
        self.days = days

    def mark_used_on(self, *, off_date, used_at):
        updated = 0
        for i, d in enumerate(self.days):
            if d.off_date == off_date and not d.used:
                self.days[i] = replace(d, used=True, used_at=used_at)
                updated += 1
        return updated


def test_set_today_status_upserts_one_row_per_day():
    repo = FakeAttendanceRepo()
    svc = AttendanceService(repo, FakeUsers([1]))

    svc.set_today_status(MEMBER, "Present", today=TODAY)
    record = svc.set_today_status(MEMBER, "Late", today=TODAY)

    assert len(repo.rows) == 1
    assert record.status == AttendanceStatus.LATE

    with pytest.raises(ValidationError):
        svc.set_today_status(MEMBER, "Sleeping", today=TODAY)


def test_delete_only_own_records():
    repo = FakeAttendanceRepo()
    svc = AttendanceService(repo, FakeUsers([1, 2]))
    other = repo.upsert_status(user_id=2, work_date=TODAY, status=AttendanceStatus.PRESENT)

    with pytest.raises(NotFoundError):
        svc.delete_my_attendance(MEMBER, other.attendance_id)
    assert other.attendance_id in repo.rows


def test_day_view_pages_rows_but_counts_all():
    repo = FakeAttendanceRepo()
    svc = AttendanceService(repo, FakeUsers([1, 2, 3]))
    svc.mark_absent_for_today(today=TODAY)

    view = svc.day_view(filter_name="today", custom_date=None, page=Page(page=2, limit=2), today=TODAY)

    assert view.total == 3
    assert len(view.rows) == 1
    assert view.window.start_date == TODAY


def test_sweep_is_idempotent():
    attendance_repo = FakeAttendanceRepo()
    attendance_repo.upsert_status(user_id=1, work_date=TODAY, status=AttendanceStatus.PRESENT)
    days = [
        WorkOffDay(workoff_id=1, user_id=2, off_date=TODAY, month=10, year=2026),
        WorkOffDay(workoff_id=2, user_id=3, off_date=date(2026, 10, 25), month=10, year=2026),
    ]
    sweep = DailySweep(
        AttendanceService(attendance_repo, FakeUsers([1, 2, 3])),
        WorkOffService(FakeWorkOffs(days)),
    )
    now = datetime(2026, 10, 19, 17, 0)

    first = sweep.run(now=now)
    second = sweep.run(now=now)

    assert (first.marked_absent, first.workoffs_used) == (2, 1)
    assert (second.marked_absent, second.workoffs_used) == (0, 0)
    assert len(attendance_repo.rows) == 3
    # an existing status is never overwritten by the sweep
    assert attendance_repo._find(1, TODAY).status == AttendanceStatus.PRESENT
    assert days[1].used is False
