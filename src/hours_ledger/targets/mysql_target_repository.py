from __future__ import annotations

from decimal import Decimal
from typing import Any, Dict, Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_decimal, db_cursor, fetchall, fetchone
from .model import TargetHours
from .repository import TargetHoursRepository


def _to_target(r: Dict[str, Any]) -> TargetHours:
    return TargetHours(
        target_id=int(r["target_id"]),
        worker_id=int(r["worker_id"]),
        period=str(r["period"]),
        target_hours=as_decimal(r["target_hours"]),
        created_by=int(r["created_by"]),
        updated_at=r.get("updated_at"),
    )


class MySQLTargetHoursRepository(TargetHoursRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get(self, *, worker_id: int, period: str) -> Optional[TargetHours]:
        with db_cursor(self._conn_factory, operation="get target hours") as (_, cur):
            cur.execute(
                """
                SELECT target_id, worker_id, period, target_hours, created_by, updated_at
                FROM target_hours
                WHERE worker_id=%s AND period=%s
                """,
                (int(worker_id), period),
            )
            r = fetchone(cur)
            return _to_target(r) if r else None

    def list_for_period(self, period: str) -> Sequence[TargetHours]:
        with db_cursor(self._conn_factory, operation="list target hours") as (_, cur):
            cur.execute(
                """
                SELECT target_id, worker_id, period, target_hours, created_by, updated_at
                FROM target_hours
                WHERE period=%s
                """,
                (period,),
            )
            return [_to_target(r) for r in fetchall(cur)]

    def upsert(self, *, worker_id: int, period: str, target_hours: Decimal, created_by: int) -> int:
        with db_cursor(self._conn_factory, operation="upsert target hours") as (_, cur):
            cur.execute(
                """
                INSERT INTO target_hours(worker_id, period, target_hours, created_by)
                VALUES(%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE
                    target_hours=VALUES(target_hours),
                    created_by=VALUES(created_by),
                    target_id=LAST_INSERT_ID(target_id)
                """,
                (int(worker_id), period, target_hours, int(created_by)),
            )
            return int(cur.lastrowid)
