from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import AttendanceStatus
from .model import AttendanceMark


class AttendanceRepository(Protocol):
    def get_by_id(self, mark_id: str) -> Optional[AttendanceMark]:
        raise NotImplementedError

    def get_for_key(self, student_id: str, class_id: str, mark_date: date) -> Optional[AttendanceMark]:
        raise NotImplementedError

    def create_mark(self, mark: AttendanceMark) -> AttendanceMark:
        """Insert a new mark.

        Must raise ``ConflictError`` when another mark already holds the same
        (student_id, class_id, mark_date) key.
        """

        raise NotImplementedError

    def update_mark(
        self,
        *,
        mark_id: str,
        status: AttendanceStatus,
        notes: Optional[str],
        edited_at: datetime,
        edited_by: str,
    ) -> bool:
        raise NotImplementedError

    def list_for_class_and_date(self, class_id: str, mark_date: date) -> Sequence[AttendanceMark]:
        raise NotImplementedError

    def list_for_class(self, class_id: str) -> Sequence[AttendanceMark]:
        raise NotImplementedError

    def list_for_student(
        self,
        student_id: str,
        *,
        class_id: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> Sequence[AttendanceMark]:
        """Marks of a student, newest first."""

        raise NotImplementedError

    def list_session_dates(self, class_id: str) -> Sequence[date]:
        """Distinct marked dates of a class, oldest first."""

        raise NotImplementedError
