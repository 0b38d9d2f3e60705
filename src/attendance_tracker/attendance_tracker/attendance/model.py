from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional

from ..classes.model import SchoolClass, Student
from ..core.enums import AttendanceStatus, MarkSource, ReportStatus


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


@dataclass(frozen=True)
class AttendanceMark:
    """Domain entity: one student's status in one class on one calendar day.

    Student, class, date and teacher never change after creation; re-marks and
    edits only touch ``status``/``notes`` and stamp ``edited_at``/``edited_by``.
    """

    mark_id: str
    student_id: str
    class_id: str
    teacher_id: str
    mark_date: date
    status: AttendanceStatus
    marked_at: datetime
    notes: Optional[str] = None
    marked_by: MarkSource = MarkSource.SWIPE
    edited_at: Optional[datetime] = None
    edited_by: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "id": self.mark_id,
            "student_id": self.student_id,
            "class_id": self.class_id,
            "teacher_id": self.teacher_id,
            "date": self.mark_date.isoformat(),
            "status": self.status.value,
            "notes": self.notes,
            "marked_by": self.marked_by.value,
            "marked_at": _iso(self.marked_at),
            "edited_at": _iso(self.edited_at),
            "edited_by": self.edited_by,
        }


@dataclass(frozen=True)
class MarkEntry:
    """One line of a batch-mark request."""

    student_id: str
    status: str
    notes: Optional[str] = None


@dataclass(frozen=True)
class BatchEntryError:
    index: int
    student_id: str
    kind: str
    message: str

    def to_dict(self) -> dict:
        return {"index": self.index, "student_id": self.student_id, "kind": self.kind, "message": self.message}


@dataclass(frozen=True)
class BatchResult:
    marked_count: int
    errors: list[BatchEntryError] = field(default_factory=list)


@dataclass(frozen=True)
class ClassReportRow:
    """Read-model: one roster line of a class report for a single day."""

    student_id: str
    student_name: str
    roll_no: str
    status: ReportStatus
    mark_id: Optional[str] = None
    noted_at: Optional[datetime] = None
    notes: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "id": self.mark_id,
            "student_id": self.student_id,
            "student_name": self.student_name,
            "roll_no": self.roll_no,
            "status": self.status.value,
            "marked_at": _iso(self.noted_at),
            "notes": self.notes,
        }


@dataclass(frozen=True)
class ClassReport:
    school_class: SchoolClass
    report_date: date
    rows: list[ClassReportRow]


@dataclass(frozen=True)
class StudentHistory:
    student: Student
    marks: list[AttendanceMark]
