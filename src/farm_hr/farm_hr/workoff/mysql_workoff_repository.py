from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import conflict_on_duplicate, db_cursor, fetchall, fetchone
from .model import WorkOffAllotment, WorkOffDay
from .repository import WorkOffRepository


def _to_allotment(r: dict) -> WorkOffAllotment:
    return WorkOffAllotment(
        allotment_id=int(r["allotment_id"]),
        month=int(r["month"]),
        year=int(r["year"]),
        max_days=int(r["max_days"]),
    )


def _to_day(r: dict) -> WorkOffDay:
    return WorkOffDay(
        workoff_id=int(r["workoff_id"]),
        user_id=int(r["user_id"]),
        off_date=r["off_date"],
        month=int(r["month"]),
        year=int(r["year"]),
        used=bool(r.get("used")),
        used_at=r.get("used_at"),
        user_name=r.get("name"),
        user_email=r.get("email"),
    )


class MySQLWorkOffRepository(WorkOffRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_allotment(self, *, month: int, year: int) -> Optional[WorkOffAllotment]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT allotment_id, month, year, max_days FROM workoff_allotments WHERE month=%s AND year=%s",
                (int(month), int(year)),
            )
            r = fetchone(cur)
            return _to_allotment(r) if r else None

    def upsert_allotment(self, *, month: int, year: int, max_days: int) -> WorkOffAllotment:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO workoff_allotments(month, year, max_days)
                VALUES(%s,%s,%s)
                ON DUPLICATE KEY UPDATE max_days=VALUES(max_days)
                """,
                (int(month), int(year), int(max_days)),
            )
            cur.execute(
                "SELECT allotment_id, month, year, max_days FROM workoff_allotments WHERE month=%s AND year=%s",
                (int(month), int(year)),
            )
            return _to_allotment(fetchone(cur))

    def create_days(self, *, user_id: int, dates: Sequence[date], month: int, year: int) -> int:
        if not dates:
            return 0
        with db_cursor(self._conn_factory) as (_, cur):
            cur.executemany(
                "INSERT IGNORE INTO workoff_days(user_id, off_date, month, year) VALUES(%s,%s,%s,%s)",
                [(int(user_id), d, int(month), int(year)) for d in dates],
            )
            return max(int(cur.rowcount), 0)

    def list_for_user(self, *, user_id: int, month: int, year: int) -> Sequence[WorkOffDay]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT workoff_id, user_id, off_date, month, year, used, used_at
                FROM workoff_days
                WHERE user_id=%s AND month=%s AND year=%s
                ORDER BY off_date
                """,
                (int(user_id), int(month), int(year)),
            )
            return [_to_day(r) for r in fetchall(cur)]

    def find_for_user_on(self, *, user_id: int, off_date: date) -> Optional[WorkOffDay]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT workoff_id, user_id, off_date, month, year, used, used_at
                FROM workoff_days
                WHERE user_id=%s AND off_date=%s
                """,
                (int(user_id), off_date),
            )
            r = fetchone(cur)
            return _to_day(r) if r else None

    def mark_used(self, *, workoff_id: int, used_at: datetime) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE workoff_days SET used=1, used_at=%s WHERE workoff_id=%s",
                (used_at, int(workoff_id)),
            )
            return cur.rowcount > 0

    def list_overview(self, *, month: int, year: int, user_id: Optional[int] = None) -> Sequence[WorkOffDay]:
        clauses = ["w.month=%s", "w.year=%s"]
        params: list[object] = [int(month), int(year)]
        if user_id is not None:
            clauses.append("w.user_id=%s")
            params.append(int(user_id))

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT w.workoff_id, w.user_id, w.off_date, w.month, w.year, w.used, w.used_at,
                       u.name, u.email
                FROM workoff_days w
                JOIN users u ON u.user_id = w.user_id
                WHERE {where}
                ORDER BY w.off_date
                """,
                tuple(params),
            )
            return [_to_day(r) for r in fetchall(cur)]

    def move(self, *, workoff_id: int, new_date: date) -> bool:
        with conflict_on_duplicate("User already has a work-off on that date"):
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    UPDATE workoff_days
                    SET off_date=%s, month=%s, year=%s, used=0, used_at=NULL
                    WHERE workoff_id=%s
                    """,
                    (new_date, new_date.month, new_date.year, int(workoff_id)),
                )
                cur.execute("SELECT 1 FROM workoff_days WHERE workoff_id=%s", (int(workoff_id),))
                return fetchone(cur) is not None

    def mark_used_on(self, *, off_date: date, used_at: datetime) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE workoff_days SET used=1, used_at=%s WHERE off_date=%s AND used=0",
                (used_at, off_date),
            )
            return max(int(cur.rowcount), 0)
