from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Optional, Sequence

from mysql.connector import errors as mysql_errors

from ..core.enums import AttendanceStatus, MarkSource
from ..core.exceptions import ConflictError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, is_duplicate_key
from .model import AttendanceMark
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)

_COLUMNS = (
    "mark_id, student_id, class_id, teacher_id, mark_date, status, notes, "
    "marked_by, marked_at, edited_at, edited_by"
)


def _row_to_mark(r: dict) -> AttendanceMark:
    return AttendanceMark(
        mark_id=str(r["mark_id"]),
        student_id=str(r["student_id"]),
        class_id=str(r["class_id"]),
        teacher_id=str(r["teacher_id"]),
        mark_date=r["mark_date"],
        status=AttendanceStatus(r["status"]),
        notes=r.get("notes"),
        marked_by=MarkSource(r.get("marked_by") or MarkSource.SWIPE.value),
        marked_at=r["marked_at"],
        edited_at=r.get("edited_at"),
        edited_by=r.get("edited_by"),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, mark_id: str) -> Optional[AttendanceMark]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM attendance_marks WHERE mark_id=%s", (mark_id,))
            r = fetchone(cur)
            return _row_to_mark(r) if r else None

    def get_for_key(self, student_id: str, class_id: str, mark_date: date) -> Optional[AttendanceMark]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_marks
                WHERE student_id=%s AND class_id=%s AND mark_date=%s
                """,
                (student_id, class_id, mark_date),
            )
            r = fetchone(cur)
            return _row_to_mark(r) if r else None

    def create_mark(self, mark: AttendanceMark) -> AttendanceMark:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO attendance_marks(
                        mark_id, student_id, class_id, teacher_id, mark_date,
                        status, notes, marked_by, marked_at
                    )
                    VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s)
                    """,
                    (
                        mark.mark_id,
                        mark.student_id,
                        mark.class_id,
                        mark.teacher_id,
                        mark.mark_date,
                        mark.status.value,
                        mark.notes,
                        mark.marked_by.value,
                        mark.marked_at,
                    ),
                )
        except mysql_errors.IntegrityError as exc:
            if is_duplicate_key(exc):
                logger.warning(
                    "Duplicate mark rejected - student: %s, class: %s, date: %s",
                    mark.student_id,
                    mark.class_id,
                    mark.mark_date,
                )
                raise ConflictError("Attendance was marked concurrently; retry as an update") from exc
            raise
        return mark

    def update_mark(
        self,
        *,
        mark_id: str,
        status: AttendanceStatus,
        notes: Optional[str],
        edited_at: datetime,
        edited_by: str,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_marks
                SET status=%s, notes=%s, edited_at=%s, edited_by=%s
                WHERE mark_id=%s
                """,
                (status.value, notes, edited_at, edited_by, mark_id),
            )
            return cur.rowcount > 0

    def list_for_class_and_date(self, class_id: str, mark_date: date) -> Sequence[AttendanceMark]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance_marks WHERE class_id=%s AND mark_date=%s",
                (class_id, mark_date),
            )
            return [_row_to_mark(r) for r in fetchall(cur)]

    def list_for_class(self, class_id: str) -> Sequence[AttendanceMark]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance_marks WHERE class_id=%s ORDER BY mark_date ASC",
                (class_id,),
            )
            return [_row_to_mark(r) for r in fetchall(cur)]

    def list_for_student(
        self,
        student_id: str,
        *,
        class_id: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> Sequence[AttendanceMark]:
        clauses = ["student_id=%s"]
        params: list[object] = [student_id]

        if class_id is not None:
            clauses.append("class_id=%s")
            params.append(class_id)

        sql = f"""
            SELECT {_COLUMNS}
            FROM attendance_marks
            WHERE {" AND ".join(clauses)}
            ORDER BY mark_date DESC, marked_at DESC
        """
        if limit is not None:
            sql += " LIMIT %s"
            params.append(int(limit))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params))
            return [_row_to_mark(r) for r in fetchall(cur)]

    def list_session_dates(self, class_id: str) -> Sequence[date]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT DISTINCT mark_date FROM attendance_marks WHERE class_id=%s ORDER BY mark_date ASC",
                (class_id,),
            )
            return [r["mark_date"] for r in fetchall(cur)]
