from __future__ import annotations

from dataclasses import dataclass

from ..classes.model import SchoolClass
from ..core.enums import AttendanceBand


@dataclass(frozen=True)
class StudentAnalytics:
    """Read-model: one student's attendance summary inside a class."""

    student_id: str
    student_name: str
    roll_no: str
    total_classes: int
    present: int
    absent: int
    late: int
    excused: int
    percentage: int
    band: AttendanceBand

    def to_dict(self) -> dict:
        return {
            "student_id": self.student_id,
            "student_name": self.student_name,
            "roll_no": self.roll_no,
            "total_classes": self.total_classes,
            "present": self.present,
            "absent": self.absent,
            "late": self.late,
            "excused": self.excused,
            "attendance_percentage": self.percentage,
            "status": self.band.value,
        }


@dataclass(frozen=True)
class ClassAnalytics:
    school_class: SchoolClass
    students: list[StudentAnalytics]
