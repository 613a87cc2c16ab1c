from __future__ import annotations

from typing import Any, Dict, Iterable, Mapping, Optional, Sequence

from ..core.enums import RecordSource, RecordStatus
from ..core.exceptions import NotFoundError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_date, as_decimal, as_optional_bool, db_cursor, fetchall, fetchone, in_clause
from .model import AttendanceRecord, NewAttendanceRecord
from .repository import UPDATABLE_FIELDS, RecordFilter, WorkTimeRepository

_COLUMNS = """
    record_id, worker_id, work_date, hours_worked, location, description,
    submitted_by, source, status, rejected_by, rejection_reason, agreement,
    created_at, updated_at
"""


def _to_record(r: Dict[str, Any]) -> AttendanceRecord:
    return AttendanceRecord(
        record_id=int(r["record_id"]),
        worker_id=int(r["worker_id"]),
        work_date=as_date(r["work_date"]),
        hours_worked=as_decimal(r["hours_worked"]),
        source=RecordSource(r["source"]),
        status=RecordStatus(r["status"]),
        submitted_by=int(r["submitted_by"]),
        location=r.get("location"),
        description=r.get("description"),
        rejected_by=r.get("rejected_by"),
        rejection_reason=r.get("rejection_reason"),
        agreement=as_optional_bool(r.get("agreement")),
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
    )


def _db_value(value: Any) -> Any:
    if isinstance(value, (RecordStatus, RecordSource)):
        return value.value
    return value


class MySQLWorkTimeRepository(WorkTimeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(self, record: NewAttendanceRecord) -> int:
        with db_cursor(self._conn_factory, operation="insert work time") as (_, cur):
            cur.execute(
                """
                INSERT INTO work_time(
                    worker_id, work_date, hours_worked, location, description,
                    submitted_by, source, status
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(record.worker_id),
                    record.work_date,
                    record.hours_worked,
                    record.location,
                    record.description,
                    int(record.submitted_by),
                    record.source.value,
                    record.status.value,
                ),
            )
            return int(cur.lastrowid)

    def get_by_id(self, record_id: int) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory, operation="get work time") as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM work_time WHERE record_id=%s", (int(record_id),))
            r = fetchone(cur)
            return _to_record(r) if r else None

    def update(self, record_id: int, changes: Mapping[str, Any]) -> AttendanceRecord:
        unknown = set(changes) - UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"Fields not updatable: {sorted(unknown)}")

        with db_cursor(self._conn_factory, operation="update work time") as (_, cur):
            if changes:
                assignments = ", ".join(f"{k}=%s" for k in changes)
                cur.execute(
                    f"UPDATE work_time SET {assignments}, updated_at=CURRENT_TIMESTAMP WHERE record_id=%s",
                    tuple(_db_value(v) for v in changes.values()) + (int(record_id),),
                )
            # rowcount is 0 for no-op updates too, so re-read to tell "missing" apart.
            cur.execute(f"SELECT {_COLUMNS} FROM work_time WHERE record_id=%s", (int(record_id),))
            r = fetchone(cur)
            if not r:
                raise NotFoundError(f"Work time record {record_id} not found")
            return _to_record(r)

    def query(self, flt: RecordFilter) -> Sequence[AttendanceRecord]:
        clauses: list[str] = []
        params: list[object] = []

        if flt.worker_id is not None:
            clauses.append("worker_id=%s")
            params.append(int(flt.worker_id))
        if flt.worker_ids is not None:
            if not flt.worker_ids:
                return []
            clause, values = in_clause("worker_id", [int(i) for i in flt.worker_ids])
            clauses.append(clause)
            params.extend(values)
        if flt.work_date is not None:
            clauses.append("work_date=%s")
            params.append(flt.work_date)
        if flt.start_date is not None:
            clauses.append("work_date>=%s")
            params.append(flt.start_date)
        if flt.end_date is not None:
            clauses.append("work_date<=%s")
            params.append(flt.end_date)
        if flt.source is not None:
            clauses.append("source=%s")
            params.append(flt.source.value)
        if flt.statuses is not None:
            if not flt.statuses:
                return []
            clause, values = in_clause("status", [s.value for s in flt.statuses])
            clauses.append(clause)
            params.extend(values)

        where = " AND ".join(clauses) if clauses else "1=1"

        with db_cursor(self._conn_factory, operation="query work time") as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM work_time
                WHERE {where}
                ORDER BY work_date ASC, worker_id ASC, source ASC
                """,
                tuple(params),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def set_agreement(self, record_ids: Iterable[int], agreement: Optional[bool]) -> None:
        ids = [int(i) for i in record_ids]
        if not ids:
            return
        clause, params = in_clause("record_id", ids)
        with db_cursor(self._conn_factory, operation="refresh agreement") as (_, cur):
            cur.execute(
                f"UPDATE work_time SET agreement=%s WHERE {clause}",
                (None if agreement is None else int(agreement), *params),
            )
