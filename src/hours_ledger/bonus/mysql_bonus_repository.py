from __future__ import annotations

from typing import Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_decimal, db_cursor, fetchone
from .model import BonusFormula, FormulaTerms
from .repository import BonusRepository


class MySQLBonusRepository(BonusRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_latest_for_worker(self, worker_id: int) -> Optional[BonusFormula]:
        with db_cursor(self._conn_factory, operation="get bonus formula") as (_, cur):
            cur.execute(
                """
                SELECT formula_id, worker_id, amount_per_hour, hours_threshold,
                       created_by, created_at, updated_by, updated_at
                FROM bonus_formulas
                WHERE worker_id=%s
                ORDER BY created_at DESC, formula_id DESC
                LIMIT 1
                """,
                (int(worker_id),),
            )
            r = fetchone(cur)
            if not r:
                return None
            return BonusFormula(
                formula_id=int(r["formula_id"]),
                worker_id=int(r["worker_id"]),
                amount_per_hour=as_decimal(r["amount_per_hour"]),
                hours_threshold=as_decimal(r["hours_threshold"]),
                created_by=int(r["created_by"]),
                created_at=r.get("created_at"),
                updated_by=r.get("updated_by"),
                updated_at=r.get("updated_at"),
            )

    def create(self, *, worker_id: int, terms: FormulaTerms, created_by: int) -> int:
        with db_cursor(self._conn_factory, operation="insert bonus formula") as (_, cur):
            cur.execute(
                """
                INSERT INTO bonus_formulas(worker_id, amount_per_hour, hours_threshold, created_by)
                VALUES(%s,%s,%s,%s)
                """,
                (int(worker_id), terms.amount_per_hour, terms.hours_threshold, int(created_by)),
            )
            return int(cur.lastrowid)

    def update(self, *, formula_id: int, terms: FormulaTerms, updated_by: int) -> bool:
        with db_cursor(self._conn_factory, operation="update bonus formula") as (_, cur):
            cur.execute(
                """
                UPDATE bonus_formulas
                SET amount_per_hour=%s, hours_threshold=%s, updated_by=%s
                WHERE formula_id=%s
                """,
                (terms.amount_per_hour, terms.hours_threshold, int(updated_by), int(formula_id)),
            )
            return cur.rowcount > 0
