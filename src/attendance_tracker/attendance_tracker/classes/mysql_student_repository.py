from __future__ import annotations

from typing import Optional, Sequence

from ..core.exceptions import ValidationError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, is_duplicate_key
from .model import Student, StudentStats
from .repository import StudentRepository

_COLUMNS = (
    "student_id, class_id, name, roll_no, email, phone, roster_position, "
    "total_classes, present_count, absent_count, late_count, excused_count, is_active"
)


def _row_to_student(row: dict) -> Student:
    return Student(
        student_id=str(row["student_id"]),
        class_id=str(row["class_id"]),
        name=row["name"],
        roll_no=str(row["roll_no"]),
        roster_position=int(row["roster_position"]),
        email=row.get("email"),
        phone=row.get("phone"),
        stats=StudentStats(
            total_classes=int(row.get("total_classes") or 0),
            present_count=int(row.get("present_count") or 0),
            absent_count=int(row.get("absent_count") or 0),
            late_count=int(row.get("late_count") or 0),
            excused_count=int(row.get("excused_count") or 0),
        ),
        is_active=bool(row.get("is_active", True)),
    )


class MySQLStudentRepository(StudentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, student_id: str) -> Optional[Student]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM students WHERE student_id=%s", (student_id,))
            row = fetchone(cur)
            return _row_to_student(row) if row else None

    def list_for_class(self, class_id: str) -> Sequence[Student]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM students WHERE class_id=%s AND is_active=1 ORDER BY roster_position ASC",
                (class_id,),
            )
            return [_row_to_student(r) for r in fetchall(cur)]

    def count_for_class(self, class_id: str) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT COUNT(*) AS n FROM students WHERE class_id=%s AND is_active=1", (class_id,))
            row = fetchone(cur)
            return int(row["n"]) if row else 0

    def get_by_roll_no(self, class_id: str, roll_no: str) -> Optional[Student]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM students WHERE class_id=%s AND roll_no=%s",
                (class_id, roll_no),
            )
            row = fetchone(cur)
            return _row_to_student(row) if row else None

    def create_student(
        self,
        *,
        student_id: str,
        class_id: str,
        name: str,
        roll_no: str,
        email: Optional[str] = None,
        phone: Optional[str] = None,
    ) -> Student:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                # Lock the class's roster rows so concurrent enrolments get distinct positions.
                cur.execute(
                    "SELECT COALESCE(MAX(roster_position), 0) AS pos FROM students WHERE class_id=%s FOR UPDATE",
                    (class_id,),
                )
                position = int(fetchone(cur)["pos"]) + 1
                cur.execute(
                    """
                    INSERT INTO students(student_id, class_id, name, roll_no, email, phone, roster_position)
                    VALUES(%s,%s,%s,%s,%s,%s,%s)
                    """,
                    (student_id, class_id, name, roll_no, email, phone, position),
                )
        except Exception as exc:
            if is_duplicate_key(exc):
                raise ValidationError("Roll number already exists in this class") from exc
            raise
        return Student(
            student_id=student_id,
            class_id=class_id,
            name=name,
            roll_no=roll_no,
            roster_position=position,
            email=email,
            phone=phone,
        )

    def update_stats(self, student_id: str, stats: StudentStats) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE students
                SET total_classes=%s, present_count=%s, absent_count=%s, late_count=%s, excused_count=%s
                WHERE student_id=%s
                """,
                (
                    stats.total_classes,
                    stats.present_count,
                    stats.absent_count,
                    stats.late_count,
                    stats.excused_count,
                    student_id,
                ),
            )
            return cur.rowcount > 0
