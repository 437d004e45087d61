from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..core.enums import AttendanceStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import count_of, db_cursor, fetchall, fetchone
from .model import AttendanceRecord, AttendanceWithUser
from .repository import AttendanceRepository


def _to_record(r: dict) -> AttendanceRecord:
    return AttendanceRecord(
        attendance_id=int(r["attendance_id"]),
        user_id=int(r["user_id"]),
        work_date=r["work_date"],
        status=AttendanceStatus(r["status"]),
        updated_at=r.get("updated_at"),
    )


def _to_joined(r: dict) -> AttendanceWithUser:
    return AttendanceWithUser(record=_to_record(r), user_name=r["name"], username=r["username"])


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def upsert_status(self, *, user_id: int, work_date: date, status: AttendanceStatus) -> AttendanceRecord:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance_records(user_id, work_date, status)
                VALUES(%s,%s,%s)
                ON DUPLICATE KEY UPDATE status=VALUES(status)
                """,
                (int(user_id), work_date, status.value),
            )
            cur.execute(
                """
                SELECT attendance_id, user_id, work_date, status, updated_at
                FROM attendance_records
                WHERE user_id=%s AND work_date=%s
                """,
                (int(user_id), work_date),
            )
            return _to_record(fetchone(cur))

    def count_for_user(self, user_id: int) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT COUNT(*) AS total FROM attendance_records WHERE user_id=%s", (int(user_id),))
            return count_of(cur)

    def list_for_user(self, user_id: int, *, offset: int, limit: int) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT attendance_id, user_id, work_date, status, updated_at
                FROM attendance_records
                WHERE user_id=%s
                ORDER BY work_date DESC
                LIMIT %s OFFSET %s
                """,
                (int(user_id), int(limit), int(offset)),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def delete_for_user(self, *, attendance_id: int, user_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "DELETE FROM attendance_records WHERE attendance_id=%s AND user_id=%s",
                (int(attendance_id), int(user_id)),
            )
            return cur.rowcount > 0

    def count_between(self, *, start_date: date, end_date: date) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT COUNT(*) AS total FROM attendance_records WHERE work_date BETWEEN %s AND %s",
                (start_date, end_date),
            )
            return count_of(cur)

    def list_between(self, *, start_date: date, end_date: date, offset: int, limit: int) -> Sequence[AttendanceWithUser]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT ar.attendance_id, ar.user_id, ar.work_date, ar.status, ar.updated_at,
                       u.name, u.username
                FROM attendance_records ar
                JOIN users u ON u.user_id = ar.user_id
                WHERE ar.work_date BETWEEN %s AND %s
                ORDER BY ar.work_date DESC, u.name
                LIMIT %s OFFSET %s
                """,
                (start_date, end_date, int(limit), int(offset)),
            )
            return [_to_joined(r) for r in fetchall(cur)]

    def latest_for_user(self, user_id: int) -> Optional[AttendanceWithUser]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT ar.attendance_id, ar.user_id, ar.work_date, ar.status, ar.updated_at,
                       u.name, u.username
                FROM attendance_records ar
                JOIN users u ON u.user_id = ar.user_id
                WHERE ar.user_id=%s
                ORDER BY ar.work_date DESC
                LIMIT 1
                """,
                (int(user_id),),
            )
            r = fetchone(cur)
            return _to_joined(r) if r else None

    def update_status(self, *, attendance_id: int, status: AttendanceStatus) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE attendance_records SET status=%s WHERE attendance_id=%s",
                (status.value, int(attendance_id)),
            )
            cur.execute(
                """
                SELECT attendance_id, user_id, work_date, status, updated_at
                FROM attendance_records
                WHERE attendance_id=%s
                """,
                (int(attendance_id),),
            )
            r = fetchone(cur)
            return _to_record(r) if r else None

    def create_missing(self, *, user_ids: Sequence[int], work_date: date, status: AttendanceStatus) -> int:
        if not user_ids:
            return 0
        with db_cursor(self._conn_factory) as (_, cur):
            cur.executemany(
                "INSERT IGNORE INTO attendance_records(user_id, work_date, status) VALUES(%s,%s,%s)",
                [(int(uid), work_date, status.value) for uid in user_ids],
            )
            return max(int(cur.rowcount), 0)
