from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Sequence

from ..core.enums import MilkPeriod
from ..database.connection import DatabaseConnection
from ..database.mysql_base import conflict_on_duplicate, db_cursor, fetchall, fetchone
from .model import Animal, MilkMeasurement, MilkSnapshot
from .repository import MilkRepository


def _to_animal(r: dict) -> Animal:
    return Animal(animal_id=int(r["animal_id"]), animal_tag=r["animal_tag"])


def _to_measurement(r: dict) -> MilkMeasurement:
    return MilkMeasurement(
        animal_tag=r["animal_tag"],
        quantity=float(r["quantity"]),
        record_date=r["record_date"],
        period=MilkPeriod(r["period"]),
        recorded_at=r.get("recorded_at"),
        recorder=r.get("recorder"),
        record_id=int(r["record_id"]),
        session_id=int(r["session_id"]),
    )


LIKE_ESCAPE = "!"


def tag_like_pattern(animal_tag: str) -> str:
    """Case-insensitive substring pattern; ``%`` and ``_`` in the tag match literally."""
    escaped = animal_tag.lower()
    for ch in (LIKE_ESCAPE, "%", "_"):
        escaped = escaped.replace(ch, LIKE_ESCAPE + ch)
    return f"%{escaped}%"


def _tag_filter(animal_tag: Optional[str]) -> tuple[str, tuple]:
    if not animal_tag:
        return "", ()
    return f" AND LOWER(mr.animal_tag) LIKE %s ESCAPE '{LIKE_ESCAPE}'", (tag_like_pattern(animal_tag),)


class MySQLMilkRepository(MilkRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_animal(self, animal_id: int) -> Optional[Animal]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT animal_id, animal_tag FROM animals WHERE animal_id=%s", (int(animal_id),))
            r = fetchone(cur)
            return _to_animal(r) if r else None

    def get_animal_by_tag(self, animal_tag: str) -> Optional[Animal]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT animal_id, animal_tag FROM animals WHERE animal_tag=%s", (animal_tag,))
            r = fetchone(cur)
            return _to_animal(r) if r else None

    def create_animal(self, animal_tag: str) -> Animal:
        with conflict_on_duplicate("Animal is existing in the list"):
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute("INSERT INTO animals(animal_tag) VALUES(%s)", (animal_tag,))
                return Animal(animal_id=int(cur.lastrowid), animal_tag=animal_tag)

    def list_animals(self) -> Sequence[Animal]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT animal_id, animal_tag FROM animals ORDER BY animal_tag")
            return [_to_animal(r) for r in fetchall(cur)]

    def record_session(
        self,
        *,
        animal: Animal,
        record_date: date,
        period: MilkPeriod,
        quantity: float,
        recorded_at: datetime,
        recorder: str,
    ) -> MilkMeasurement:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO milk_records(animal_id, animal_tag, record_date)
                VALUES(%s,%s,%s)
                ON DUPLICATE KEY UPDATE record_id=LAST_INSERT_ID(record_id)
                """,
                (animal.animal_id, animal.animal_tag, record_date),
            )
            record_id = int(cur.lastrowid)

            cur.execute(
                """
                INSERT INTO milk_sessions(record_id, period, quantity, recorded_at, recorder)
                VALUES(%s,%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE
                    quantity=VALUES(quantity), recorded_at=VALUES(recorded_at), recorder=VALUES(recorder)
                """,
                (record_id, period.value, quantity, recorded_at, recorder),
            )

            cur.execute(
                """
                SELECT ms.session_id, ms.record_id, ms.period, ms.quantity, ms.recorded_at, ms.recorder,
                       mr.animal_tag, mr.record_date
                FROM milk_sessions ms
                JOIN milk_records mr ON mr.record_id = ms.record_id
                WHERE ms.record_id=%s AND ms.period=%s
                """,
                (record_id, period.value),
            )
            return _to_measurement(fetchone(cur))

    def snapshot(
        self,
        *,
        start_date: date,
        end_date: date,
        previous_start: date,
        previous_end: date,
        animal_tag: Optional[str] = None,
    ) -> MilkSnapshot:
        tag_sql, tag_params = _tag_filter(animal_tag)

        # Both reads share one InnoDB transaction, so they see the same snapshot.
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT ms.session_id, ms.record_id, ms.period, ms.quantity, ms.recorded_at, ms.recorder,
                       mr.animal_tag, mr.record_date
                FROM milk_sessions ms
                JOIN milk_records mr ON mr.record_id = ms.record_id
                WHERE mr.record_date BETWEEN %s AND %s{tag_sql}
                ORDER BY ms.recorded_at DESC, ms.session_id DESC
                """,
                (start_date, end_date, *tag_params),
            )
            measurements = [_to_measurement(r) for r in fetchall(cur)]

            cur.execute(
                f"""
                SELECT COALESCE(SUM(ms.quantity), 0) AS total
                FROM milk_sessions ms
                JOIN milk_records mr ON mr.record_id = ms.record_id
                WHERE mr.record_date BETWEEN %s AND %s{tag_sql}
                """,
                (previous_start, previous_end, *tag_params),
            )
            row = fetchone(cur)
            previous_total = float(row["total"]) if row else 0.0

        return MilkSnapshot(measurements=measurements, previous_total=previous_total)
