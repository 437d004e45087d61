from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..core.enums import SummaryType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import conflict_on_duplicate, db_cursor, fetchall, fetchone
from .model import ReportSummary
from .repository import SummaryRepository

_SELECT_SUMMARY = """
    SELECT summary_id, summary_type, start_date, end_date, content, created_at, updated_at
    FROM report_summaries
"""


def _to_summary(r: dict) -> ReportSummary:
    return ReportSummary(
        summary_id=int(r["summary_id"]),
        summary_type=SummaryType(r["summary_type"]),
        start_date=r["start_date"],
        end_date=r["end_date"],
        content=r["content"],
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
    )


class MySQLSummaryRepository(SummaryRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _select_period(self, cur, summary_type: SummaryType, start_date: date, end_date: date) -> Optional[ReportSummary]:
        cur.execute(
            _SELECT_SUMMARY + " WHERE summary_type=%s AND start_date=%s AND end_date=%s",
            (summary_type.value, start_date, end_date),
        )
        r = fetchone(cur)
        return _to_summary(r) if r else None

    def get_for_period(self, *, summary_type: SummaryType, start_date: date, end_date: date) -> Optional[ReportSummary]:
        with db_cursor(self._conn_factory) as (_, cur):
            return self._select_period(cur, summary_type, start_date, end_date)

    def upsert(self, *, summary_type: SummaryType, start_date: date, end_date: date, content: str) -> ReportSummary:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO report_summaries(summary_type, start_date, end_date, content)
                VALUES(%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE content=VALUES(content)
                """,
                (summary_type.value, start_date, end_date, content),
            )
            return self._select_period(cur, summary_type, start_date, end_date)

    def create(self, *, summary_type: SummaryType, start_date: date, end_date: date, content: str) -> ReportSummary:
        with conflict_on_duplicate("Summary already exists for this period"):
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO report_summaries(summary_type, start_date, end_date, content)
                    VALUES(%s,%s,%s,%s)
                    """,
                    (summary_type.value, start_date, end_date, content),
                )
                return self._select_period(cur, summary_type, start_date, end_date)

    def list_by_type(self, summary_type: SummaryType) -> Sequence[ReportSummary]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT_SUMMARY + " WHERE summary_type=%s ORDER BY created_at DESC", (summary_type.value,))
            return [_to_summary(r) for r in fetchall(cur)]

    def delete(self, summary_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM report_summaries WHERE summary_id=%s", (int(summary_id),))
            return cur.rowcount > 0
