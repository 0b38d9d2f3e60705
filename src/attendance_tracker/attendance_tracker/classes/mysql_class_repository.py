from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import SchoolClass
from .repository import ClassRepository

_COLUMNS = (
    "class_id, teacher_id, name, subject, code, section, room_number, description, "
    "total_sessions, last_attendance_date, is_active"
)


def _row_to_class(row: dict) -> SchoolClass:
    return SchoolClass(
        class_id=str(row["class_id"]),
        teacher_id=str(row["teacher_id"]),
        name=row["name"],
        subject=row["subject"],
        code=row.get("code"),
        section=row.get("section") or "A",
        room_number=row.get("room_number"),
        description=row.get("description"),
        total_sessions=int(row.get("total_sessions") or 0),
        last_attendance_date=row.get("last_attendance_date"),
        is_active=bool(row.get("is_active", True)),
    )


class MySQLClassRepository(ClassRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, class_id: str) -> Optional[SchoolClass]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM classes WHERE class_id=%s", (class_id,))
            row = fetchone(cur)
            return _row_to_class(row) if row else None

    def list_for_teacher(self, teacher_id: str) -> Sequence[SchoolClass]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM classes WHERE teacher_id=%s AND is_active=1 ORDER BY name ASC, section ASC",
                (teacher_id,),
            )
            return [_row_to_class(r) for r in fetchall(cur)]

    def update_session_counters(
        self,
        class_id: str,
        *,
        total_sessions: int,
        last_attendance_date: Optional[date],
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE classes SET total_sessions=%s, last_attendance_date=%s WHERE class_id=%s",
                (int(total_sessions), last_attendance_date, class_id),
            )
            return cur.rowcount > 0
