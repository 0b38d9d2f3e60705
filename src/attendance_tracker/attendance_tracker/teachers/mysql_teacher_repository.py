from __future__ import annotations

from datetime import datetime
from typing import Optional

from ..core.exceptions import ValidationError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone, is_duplicate_key
from .model import Teacher
from .repository import TeacherRepository

_COLUMNS = "teacher_id, full_name, email, password_hash, phone, department, is_active, last_login_at"


def _row_to_teacher(row: dict) -> Teacher:
    return Teacher(
        teacher_id=str(row["teacher_id"]),
        full_name=row["full_name"],
        email=row["email"],
        password_hash=row["password_hash"],
        phone=row.get("phone"),
        department=row.get("department"),
        is_active=bool(row.get("is_active", True)),
        last_login_at=row.get("last_login_at"),
    )


class MySQLTeacherRepository(TeacherRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, teacher_id: str) -> Optional[Teacher]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM teachers WHERE teacher_id=%s", (teacher_id,))
            row = fetchone(cur)
            return _row_to_teacher(row) if row else None

    def get_by_email(self, email: str) -> Optional[Teacher]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM teachers WHERE email=%s", (email,))
            row = fetchone(cur)
            return _row_to_teacher(row) if row else None

    def create_teacher(
        self,
        *,
        teacher_id: str,
        full_name: str,
        email: str,
        password_hash: str,
        phone: Optional[str] = None,
        department: Optional[str] = None,
    ) -> Teacher:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO teachers(teacher_id, full_name, email, password_hash, phone, department, is_active)
                    VALUES(%s,%s,%s,%s,%s,%s,1)
                    """,
                    (teacher_id, full_name, email, password_hash, phone, department),
                )
        except Exception as exc:
            if is_duplicate_key(exc):
                raise ValidationError("Teacher with this email already exists") from exc
            raise
        return Teacher(
            teacher_id=teacher_id,
            full_name=full_name,
            email=email,
            password_hash=password_hash,
            phone=phone,
            department=department,
        )

    def touch_last_login(self, teacher_id: str, *, at: datetime) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE teachers SET last_login_at=%s WHERE teacher_id=%s", (at, teacher_id))
