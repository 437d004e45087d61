from __future__ import annotations

from dataclasses import replace
from datetime import date

import pytest

from src.farm_hr.farm_hr.core.enums import Role
from src.farm_hr.farm_hr.core.exceptions import AuthorizationError, NotFoundError, ValidationError
from src.farm_hr.farm_hr.reports.model import DailyWorkReport
from src.farm_hr.farm_hr.reports.service import ReportService
from src.farm_hr.farm_hr.users.model import Identity

OWNER = Identity(user_id=1, role=Role.TEAM_MEMBER)
OTHER = Identity(user_id=2, role=Role.TEAM_MEMBER)
LEADER = Identity(user_id=3, role=Role.TEAM_LEADER)


class FakeReportsRepo:
    def __init__(self):
        self.rows: dict[int, DailyWorkReport] = {}
        self._next_id = 1

    def upsert(self, *, user_id, report_date, title, tasks, challenges, next_plan):
        existing = next((r for r in self.rows.values() if (r.user_id, r.report_date) == (user_id, report_date)), None)
        report_id = existing.report_id if existing else self._next_id
        if not existing:
            self._next_id += 1
        self.rows[report_id] = DailyWorkReport(
            report_id=report_id,
            user_id=user_id,
            report_date=report_date,
            title=title,
            tasks=tasks,
            challenges=challenges,
            next_plan=next_plan,
        )
        return self.rows[report_id]

    def get_by_id(self, report_id):
        return self.rows.get(report_id)

    def list_between(self, *, start_date, end_date, newest_first=False):
        rows = sorted(
            (r for r in self.rows.values() if start_date <= r.report_date <= end_date),
            key=lambda r: r.report_date,
            reverse=newest_first,
        )
        return rows

    def update(self, *, report_id, title, tasks, challenges, next_plan):
        self.rows[report_id] = replace(self.rows[report_id], title=title, tasks=tasks, challenges=challenges, next_plan=next_plan)
        return True

    def delete(self, report_id):
        return self.rows.pop(report_id, None) is not None


def _create(svc, identity=OWNER, day="2026-10-19", title="Milking"):
    return svc.create(identity, title=title, tasks="Morning milking", report_date=day)


def test_create_requires_title_tasks_and_date():
    svc = ReportService(FakeReportsRepo())

    with pytest.raises(ValidationError, match="Title, tasks, and date are required"):
        svc.create(OWNER, title="", tasks="x", report_date="2026-10-19")
    with pytest.raises(ValidationError):
        svc.create(OWNER, title="t", tasks="x", report_date="19/10/2026")


def test_second_report_same_day_replaces_first():
    repo = FakeReportsRepo()
    svc = ReportService(repo)

    first = _create(svc, title="Draft")
    second = _create(svc, title="Final")

    assert first.report_id == second.report_id
    assert len(repo.rows) == 1
    assert svc.get(first.report_id).title == "Final"


def test_by_ranges_groups_day_week_month():
    svc = ReportService(FakeReportsRepo())
    _create(svc, day="2026-10-19")
    _create(svc, OTHER, day="2026-10-18")
    _create(svc, day="2026-10-02")

    results = svc.by_ranges(anchor=date(2026, 10, 19))

    assert len(results["day"]) == 1
    assert len(results["week"]) == 2
    assert len(results["month"]) == 3
    assert [r.report_date for r in results["month"]][0] == date(2026, 10, 19)

    only_week = svc.by_ranges(range_name="week", anchor=date(2026, 10, 19))
    assert only_week["day"] == [] and len(only_week["week"]) == 2


def test_only_owner_or_leader_can_change_a_report():
    svc = ReportService(FakeReportsRepo())
    report = _create(svc)

    with pytest.raises(AuthorizationError):
        svc.update(OTHER, report.report_id, title="Hijacked")

    updated = svc.update(LEADER, report.report_id, challenges="Rain")
    assert updated.challenges == "Rain"
    assert updated.title == "Milking"

    svc.delete(OWNER, report.report_id)
    with pytest.raises(NotFoundError):
        svc.get(report.report_id)
