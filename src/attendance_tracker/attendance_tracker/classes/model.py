from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Optional


@dataclass(frozen=True)
class StudentStats:
    """Denormalized attendance tally kept on the student row.

    ``total_classes`` counts PRESENT, ABSENT and LATE marks; EXCUSED marks are
    a separate bucket outside the percentage base.
    """

    total_classes: int = 0
    present_count: int = 0
    absent_count: int = 0
    late_count: int = 0
    excused_count: int = 0

    @property
    def percentage(self) -> int:
        return percentage_of(self.present_count, self.total_classes)

    def to_dict(self) -> dict:
        return {
            "total_classes": self.total_classes,
            "present_count": self.present_count,
            "absent_count": self.absent_count,
            "late_count": self.late_count,
            "excused_count": self.excused_count,
        }


def percentage_of(present: int, total: int) -> int:
    # Half-up rounding in integers, so 62.5 -> 63 (round() would give 62).
    total = max(total, 1)
    return (present * 200 + total) // (2 * total)


@dataclass(frozen=True)
class SchoolClass:
    """Domain entity: a class owned by exactly one teacher."""

    class_id: str
    teacher_id: str
    name: str
    subject: str
    code: Optional[str] = None
    section: str = "A"
    room_number: Optional[str] = None
    description: Optional[str] = None
    total_sessions: int = 0
    last_attendance_date: Optional[date] = None
    is_active: bool = True

    def to_dict(self) -> dict:
        return {
            "id": self.class_id,
            "name": self.name,
            "subject": self.subject,
            "section": self.section,
            "code": self.code,
            "room_number": self.room_number,
            "description": self.description,
            "total_sessions": self.total_sessions,
            "last_attendance_date": self.last_attendance_date.isoformat() if self.last_attendance_date else None,
            "is_active": self.is_active,
        }


@dataclass(frozen=True)
class Student:
    """Domain entity: a student enrolled in one class."""

    student_id: str
    class_id: str
    name: str
    roll_no: str
    roster_position: int
    email: Optional[str] = None
    phone: Optional[str] = None
    stats: StudentStats = field(default_factory=StudentStats)
    is_active: bool = True

    def to_dict(self) -> dict:
        return {
            "id": self.student_id,
            "name": self.name,
            "roll_no": self.roll_no,
            "email": self.email,
            "phone": self.phone,
            "attendance_percentage": self.stats.percentage,
            "stats": self.stats.to_dict(),
        }
