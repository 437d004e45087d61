from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime

import pytest

from src.farm_hr.farm_hr.core.enums import Role
from src.farm_hr.farm_hr.core.exceptions import ConflictError, NotFoundError, ValidationError
from src.farm_hr.farm_hr.users.model import Identity
from src.farm_hr.farm_hr.workoff.model import WorkOffAllotment, WorkOffDay
from src.farm_hr.farm_hr.workoff.service import WorkOffService

TODAY = date(2026, 10, 19)
MEMBER = Identity(user_id=7, role=Role.TEAM_MEMBER)


class FakeWorkOffRepo:
    def __init__(self):
        self.allotments: dict[tuple, WorkOffAllotment] = {}
        self.days: dict[int, WorkOffDay] = {}
        self._next_id = 1

    def get_allotment(self, *, month, year):
        return self.allotments.get((month, year))

    def upsert_allotment(self, *, month, year, max_days):
        current = self.allotments.get((month, year))
        allotment = WorkOffAllotment(
            allotment_id=current.allotment_id if current else len(self.allotments) + 1,
            month=month,
            year=year,
            max_days=max_days,
        )
        self.allotments[(month, year)] = allotment
        return allotment

    def create_days(self, *, user_id, dates, month, year):
        created = 0
        for d in dates:
            if self.find_for_user_on(user_id=user_id, off_date=d):
                continue
            self.days[self._next_id] = WorkOffDay(
                workoff_id=self._next_id, user_id=user_id, off_date=d, month=month, year=year
            )
            self._next_id += 1
            created += 1
        return created

    def list_for_user(self, *, user_id, month, year):
        return [d for d in self.days.values() if d.user_id == user_id and (d.month, d.year) == (month, year)]

    def find_for_user_on(self, *, user_id, off_date):
        return next((d for d in self.days.values() if d.user_id == user_id and d.off_date == off_date), None)

    def mark_used(self, *, workoff_id, used_at):
        self.days[workoff_id] = replace(self.days[workoff_id], used=True, used_at=used_at)
        return True

    def list_overview(self, *, month, year, user_id=None):
        return [
            d
            for d in self.days.values()
            if (d.month, d.year) == (month, year) and (user_id is None or d.user_id == user_id)
        ]

    def move(self, *, workoff_id, new_date):
        if workoff_id not in self.days:
            return False
        self.days[workoff_id] = replace(self.days[workoff_id], off_date=new_date, used=False, used_at=None)
        return True

    def mark_used_on(self, *, off_date, used_at):
        updated = 0
        for wid, d in self.days.items():
            if d.off_date == off_date and not d.used:
                self.days[wid] = replace(d, used=True, used_at=used_at)
                updated += 1
        return updated


def _service_with_limit(max_days=2):
    repo = FakeWorkOffRepo()
    svc = WorkOffService(repo)
    svc.set_monthly_limit(month=TODAY.month, year=TODAY.year, max_days=max_days)
    return svc, repo


def test_without_allotment_there_is_no_limit():
    svc = WorkOffService(FakeWorkOffRepo())

    with pytest.raises(NotFoundError):
        svc.current_allotment(today=TODAY)
    with pytest.raises(NotFoundError):
        svc.save_days(MEMBER, ["2026-10-20"], today=TODAY)


def test_save_requires_exactly_max_days():
    svc, _ = _service_with_limit(2)

    with pytest.raises(ValidationError, match="Only 2 days allowed"):
        svc.save_days(MEMBER, ["2026-10-20"], today=TODAY)
    with pytest.raises(ValidationError):
        svc.save_days(MEMBER, "2026-10-20", today=TODAY)


def test_save_requires_distinct_dates_in_the_current_month():
    svc, _ = _service_with_limit(2)

    with pytest.raises(ValidationError):
        svc.save_days(MEMBER, ["2026-10-20", "2026-10-20"], today=TODAY)
    with pytest.raises(ValidationError):
        svc.save_days(MEMBER, ["2026-10-20", "2026-11-02"], today=TODAY)


def test_save_and_summary_counts():
    svc, repo = _service_with_limit(2)

    assert svc.save_days(MEMBER, ["2026-10-25", "2026-10-20"], today=TODAY) == 2
    svc.mark_used(MEMBER, "2026-10-20", now=datetime(2026, 10, 20, 9, 0))

    summary = svc.summary(MEMBER, today=TODAY).to_dict()
    assert summary["total_selected"] == 2
    assert summary["used"] == 1
    assert summary["remaining"] == 1

    with pytest.raises(NotFoundError):
        svc.mark_used(MEMBER, "2026-10-21")


def test_monthly_limit_validation_and_upsert():
    svc, repo = _service_with_limit(2)

    with pytest.raises(ValidationError):
        svc.set_monthly_limit(month=None, year=2026, max_days=2)
    with pytest.raises(ValidationError):
        svc.set_monthly_limit(month=13, year=2026, max_days=2)

    updated = svc.set_monthly_limit(month="10", year="2026", max_days="4")
    assert updated.max_days == 4
    assert len(repo.allotments) == 1


def test_move_resets_used_flag():
    svc, repo = _service_with_limit(2)
    svc.save_days(MEMBER, ["2026-10-19", "2026-10-20"], today=TODAY)
    svc.auto_mark_used_today(now=datetime(2026, 10, 19, 8, 0))
    moved = next(d.workoff_id for d in repo.days.values() if d.off_date == TODAY)

    svc.move_date(moved, "2026-10-28")

    assert repo.days[moved].off_date == date(2026, 10, 28)
    assert repo.days[moved].used is False
    with pytest.raises(NotFoundError):
        svc.move_date(999, "2026-10-28")


def test_overview_filters_by_user():
    svc, _ = _service_with_limit(1)
    svc.save_days(MEMBER, ["2026-10-20"], today=TODAY)
    svc.save_days(Identity(user_id=8, role=Role.TEAM_MEMBER), ["2026-10-21"], today=TODAY)

    assert len(svc.monthly_overview(month=10, year=2026)) == 2
    assert [d.user_id for d in svc.monthly_overview(month=10, year=2026, user_id="8")] == [8]


def test_second_submission_cannot_exceed_the_allotment():
    svc, repo = _service_with_limit(2)
    svc.save_days(MEMBER, ["2026-10-20", "2026-10-21"], today=TODAY)

    with pytest.raises(ConflictError):
        svc.save_days(MEMBER, ["2026-10-22", "2026-10-23"], today=TODAY)

    held = svc.summary(MEMBER, today=TODAY)
    assert held.total_selected == 2
    assert sorted(d.off_date for d in repo.days.values()) == [date(2026, 10, 20), date(2026, 10, 21)]
