from __future__ import annotations

from typing import Any, Dict, Iterable, Optional, Sequence

from ..core.enums import Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, in_clause
from .model import Profile
from .repository import ProfileRepository

_COLUMNS = "profile_id, name, role, supervisor_id, manager_id, is_active"


def _to_profile(r: Dict[str, Any]) -> Profile:
    return Profile(
        profile_id=int(r["profile_id"]),
        name=r["name"],
        role=Role(r["role"]),
        supervisor_id=r.get("supervisor_id"),
        manager_id=r.get("manager_id"),
        is_active=bool(r.get("is_active", True)),
    )


class MySQLProfileRepository(ProfileRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, profile_id: int) -> Optional[Profile]:
        with db_cursor(self._conn_factory, operation="get profile") as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM profiles WHERE profile_id=%s", (int(profile_id),))
            r = fetchone(cur)
            return _to_profile(r) if r else None

    def list_by_ids(self, profile_ids: Iterable[int]) -> Sequence[Profile]:
        ids = [int(i) for i in profile_ids]
        if not ids:
            return []
        where, params = in_clause("profile_id", ids)
        with db_cursor(self._conn_factory, operation="list profiles") as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM profiles WHERE {where}", tuple(params))
            return [_to_profile(r) for r in fetchall(cur)]

    def list_active_staff(self) -> Sequence[Profile]:
        with db_cursor(self._conn_factory, operation="list active staff") as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM profiles
                WHERE role=%s AND is_active=1
                ORDER BY name ASC
                """,
                (Role.STAFF.value,),
            )
            return [_to_profile(r) for r in fetchall(cur)]

    def list_staff_for_supervisor(self, supervisor_id: int) -> Sequence[Profile]:
        with db_cursor(self._conn_factory, operation="list staff for supervisor") as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM profiles
                WHERE supervisor_id=%s AND is_active=1
                ORDER BY name ASC
                """,
                (int(supervisor_id),),
            )
            return [_to_profile(r) for r in fetchall(cur)]
