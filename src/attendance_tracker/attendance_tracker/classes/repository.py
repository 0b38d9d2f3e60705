from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import SchoolClass, Student, StudentStats


class ClassRepository(Protocol):
    def get_by_id(self, class_id: str) -> Optional[SchoolClass]:
        raise NotImplementedError

    def list_for_teacher(self, teacher_id: str) -> Sequence[SchoolClass]:
        raise NotImplementedError

    def update_session_counters(
        self,
        class_id: str,
        *,
        total_sessions: int,
        last_attendance_date: Optional[date],
    ) -> bool:
        raise NotImplementedError


class StudentRepository(Protocol):
    def get_by_id(self, student_id: str) -> Optional[Student]:
        raise NotImplementedError

    def list_for_class(self, class_id: str) -> Sequence[Student]:
        """Students of a class in roster order."""

        raise NotImplementedError

    def count_for_class(self, class_id: str) -> int:
        raise NotImplementedError

    def get_by_roll_no(self, class_id: str, roll_no: str) -> Optional[Student]:
        raise NotImplementedError

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
        """Append a student at the end of the roster."""

        raise NotImplementedError

    def update_stats(self, student_id: str, stats: StudentStats) -> bool:
        raise NotImplementedError
