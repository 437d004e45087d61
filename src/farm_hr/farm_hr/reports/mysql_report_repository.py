from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import DailyWorkReport
from .repository import ReportRepository

_SELECT_REPORT = """
    SELECT r.report_id, r.user_id, r.report_date, r.title, r.tasks, r.challenges, r.next_plan,
           r.created_at, u.name
    FROM daily_work_reports r
    JOIN users u ON u.user_id = r.user_id
"""


def _to_report(r: dict) -> DailyWorkReport:
    return DailyWorkReport(
        report_id=int(r["report_id"]),
        user_id=int(r["user_id"]),
        report_date=r["report_date"],
        title=r["title"],
        tasks=r["tasks"],
        challenges=r.get("challenges"),
        next_plan=r.get("next_plan"),
        user_name=r.get("name"),
        created_at=r.get("created_at"),
    )


class MySQLReportRepository(ReportRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def upsert(
        self,
        *,
        user_id: int,
        report_date: date,
        title: str,
        tasks: str,
        challenges: Optional[str],
        next_plan: Optional[str],
    ) -> DailyWorkReport:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO daily_work_reports(user_id, report_date, title, tasks, challenges, next_plan)
                VALUES(%s,%s,%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE
                    title=VALUES(title), tasks=VALUES(tasks),
                    challenges=VALUES(challenges), next_plan=VALUES(next_plan)
                """,
                (int(user_id), report_date, title, tasks, challenges, next_plan),
            )
            cur.execute(_SELECT_REPORT + " WHERE r.user_id=%s AND r.report_date=%s", (int(user_id), report_date))
            return _to_report(fetchone(cur))

    def get_by_id(self, report_id: int) -> Optional[DailyWorkReport]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT_REPORT + " WHERE r.report_id=%s", (int(report_id),))
            r = fetchone(cur)
            return _to_report(r) if r else None

    def list_between(self, *, start_date: date, end_date: date, newest_first: bool = False) -> Sequence[DailyWorkReport]:
        order = "DESC" if newest_first else "ASC"
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SELECT_REPORT + f" WHERE r.report_date BETWEEN %s AND %s ORDER BY r.report_date {order}, r.report_id",
                (start_date, end_date),
            )
            return [_to_report(r) for r in fetchall(cur)]

    def update(
        self,
        *,
        report_id: int,
        title: str,
        tasks: str,
        challenges: Optional[str],
        next_plan: Optional[str],
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE daily_work_reports
                SET title=%s, tasks=%s, challenges=%s, next_plan=%s
                WHERE report_id=%s
                """,
                (title, tasks, challenges, next_plan, int(report_id)),
            )
            cur.execute("SELECT 1 FROM daily_work_reports WHERE report_id=%s", (int(report_id),))
            return fetchone(cur) is not None

    def delete(self, report_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM daily_work_reports WHERE report_id=%s", (int(report_id),))
            return cur.rowcount > 0
