from __future__ import annotations

import logging
from collections import defaultdict
from datetime import date
from typing import Optional

from ..access.guard import AccessGuard
from ..attendance.model import AttendanceMark
from ..attendance.repository import AttendanceRepository
from ..classes.model import StudentStats
from ..classes.repository import ClassRepository, StudentRepository
from .calculator.base import StatsCalculator
from .calculator.standard_calculator import StandardStatsCalculator
from .model import ClassAnalytics, StudentAnalytics

logger = logging.getLogger(__name__)


class StatisticsAggregator:
    """Derives attendance counts from the marks.

    ``recompute_*`` write denormalized counters back onto students and
    classes; ``class_analytics`` is computed live from the marks.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        students: StudentRepository,
        classes: ClassRepository,
        guard: AccessGuard,
        *,
        calculator: Optional[StatsCalculator] = None,
    ):
        self._attendance = attendance
        self._students = students
        self._classes = classes
        self._guard = guard
        self._calculator = calculator or StandardStatsCalculator()

    def recompute_student_stats(self, student_id: str, *, class_id: Optional[str] = None) -> StudentStats:
        marks = self._attendance.list_for_student(student_id, class_id=class_id)
        stats = self._calculator.tally(marks)
        self._students.update_stats(student_id, stats)
        logger.debug("Student stats recomputed - student: %s, stats: %s", student_id, stats)
        return stats

    def recompute_class_sessions(self, class_id: str) -> tuple[int, Optional[date]]:
        dates = list(self._attendance.list_session_dates(class_id))
        total_sessions = len(dates)
        last_date = max(dates) if dates else None
        self._classes.update_session_counters(
            class_id,
            total_sessions=total_sessions,
            last_attendance_date=last_date,
        )
        return total_sessions, last_date

    def class_analytics(self, *, class_id: str, acting_teacher_id: str) -> ClassAnalytics:
        school_class = self._guard.authorize_read(acting_teacher_id, class_id)
        roster = self._students.list_for_class(class_id)

        marks_by_student: dict[str, list[AttendanceMark]] = defaultdict(list)
        for m in self._attendance.list_for_class(class_id):
            marks_by_student[m.student_id].append(m)

        rows: list[StudentAnalytics] = []
        for student in roster:
            stats = self._calculator.tally(marks_by_student.get(student.student_id, []))
            percentage = stats.percentage
            rows.append(
                StudentAnalytics(
                    student_id=student.student_id,
                    student_name=student.name,
                    roll_no=student.roll_no,
                    total_classes=stats.total_classes,
                    present=stats.present_count,
                    absent=stats.absent_count,
                    late=stats.late_count,
                    excused=stats.excused_count,
                    percentage=percentage,
                    band=self._calculator.band(percentage),
                )
            )

        # sort() is stable: equal percentages keep roster order.
        rows.sort(key=lambda r: r.percentage, reverse=True)
        return ClassAnalytics(school_class=school_class, students=rows)
