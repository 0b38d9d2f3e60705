from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, replace
from datetime import date, datetime
from typing import Callable, Iterable, Optional

from ..access.guard import AccessGuard
from ..classes.repository import StudentRepository
from ..common.datetime_utils import now_local, parse_iso_date
from ..common.validators import clean_notes, parse_status, require_non_empty
from ..core.constants import STUDENT_HISTORY_LIMIT
from ..core.enums import AttendanceStatus, MarkSource, ReportStatus
from ..core.exceptions import DomainError, NotFoundError, ValidationError
from ..stats.service import StatisticsAggregator
from .model import (
    AttendanceMark,
    BatchEntryError,
    BatchResult,
    ClassReport,
    ClassReportRow,
    MarkEntry,
    StudentHistory,
)
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _MarkInput:
    student_id: str
    status: AttendanceStatus
    notes: Optional[str]


class AttendanceLedger:
    """Mutation and query surface over attendance marks.

    Business rules:
    - At most one mark per (student, class, calendar day). Marking the same
      key again updates the existing mark in place and keeps its id.
    - Dates are normalized to calendar days and may not lie in the future.
    - Every write is authorized against the class owner first.
    - Student/class counters are refreshed after each write on a best-effort
      basis; a failed refresh never undoes the mark.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        students: StudentRepository,
        guard: AccessGuard,
        stats: StatisticsAggregator,
        *,
        clock: Callable[[], datetime] | None = None,
    ):
        self._attendance = attendance
        self._students = students
        self._guard = guard
        self._stats = stats
        self._clock = clock or now_local

    # ----- writes -----

    def mark_one(
        self,
        *,
        student_id: str,
        class_id: str,
        teacher_id: str,
        status,
        mark_date,
        notes: Optional[str] = None,
    ) -> AttendanceMark:
        now = self._clock()
        day = self._validate_date(mark_date, now=now)
        class_id = require_non_empty(class_id, "Class id")
        entry = self._validate_entry(student_id, status, notes)

        self._guard.authorize(teacher_id, class_id)

        mark = self._write_mark(entry, class_id=class_id, teacher_id=teacher_id, day=day, now=now)
        self._refresh_stats(student_id=mark.student_id, class_id=class_id)
        return mark

    def mark_batch(
        self,
        *,
        class_id: str,
        teacher_id: str,
        mark_date,
        entries: Iterable[Optional[MarkEntry]],
    ) -> BatchResult:
        now = self._clock()
        day = self._validate_date(mark_date, now=now)
        class_id = require_non_empty(class_id, "Class id")
        self._guard.authorize(teacher_id, class_id)

        marked_count = 0
        errors: list[BatchEntryError] = []

        for index, raw in enumerate(entries):
            raw_student_id = raw.student_id if raw is not None else ""
            try:
                if raw is None:
                    raise ValidationError("Each entry must be an object")
                entry = self._validate_entry(raw.student_id, raw.status, raw.notes)
                mark = self._write_mark(entry, class_id=class_id, teacher_id=teacher_id, day=day, now=now)
            except DomainError as e:
                logger.warning(
                    "Batch entry skipped - class: %s, index: %s, student: %s, %s: %s",
                    class_id,
                    index,
                    raw_student_id,
                    e.kind,
                    e.message,
                )
                errors.append(
                    BatchEntryError(index=index, student_id=str(raw_student_id or ""), kind=e.kind, message=e.message)
                )
                continue

            marked_count += 1
            self._refresh_student(mark.student_id)

        if marked_count:
            self._refresh_class(class_id)

        logger.info(
            "Batch marked - class: %s, date: %s, marked: %s, failed: %s",
            class_id,
            day.isoformat(),
            marked_count,
            len(errors),
        )
        return BatchResult(marked_count=marked_count, errors=errors)

    def update_one(
        self,
        *,
        mark_id: str,
        acting_teacher_id: str,
        status,
        notes: Optional[str] = None,
    ) -> AttendanceMark:
        new_status = parse_status(status)
        new_notes = clean_notes(notes)

        existing = self._attendance.get_by_id(mark_id)
        if not existing:
            raise NotFoundError("Attendance record not found")

        self._guard.authorize(acting_teacher_id, existing.class_id)

        now = self._clock()
        if not self._attendance.update_mark(
            mark_id=existing.mark_id,
            status=new_status,
            notes=new_notes,
            edited_at=now,
            edited_by=acting_teacher_id,
        ):
            raise NotFoundError("Attendance record not found")

        logger.info("Mark edited - mark: %s, status: %s, by: %s", existing.mark_id, new_status.value, acting_teacher_id)
        self._refresh_stats(student_id=existing.student_id, class_id=existing.class_id)
        return replace(existing, status=new_status, notes=new_notes, edited_at=now, edited_by=acting_teacher_id)

    # ----- reads -----

    def class_report(self, *, class_id: str, acting_teacher_id: str, report_date) -> ClassReport:
        if not report_date:
            raise ValidationError("Date parameter is required")
        day = parse_iso_date(report_date)

        school_class = self._guard.authorize_read(acting_teacher_id, class_id)
        roster = self._students.list_for_class(class_id)
        marks = {m.student_id: m for m in self._attendance.list_for_class_and_date(class_id, day)}

        rows: list[ClassReportRow] = []
        for student in roster:
            m = marks.get(student.student_id)
            rows.append(
                ClassReportRow(
                    student_id=student.student_id,
                    student_name=student.name,
                    roll_no=student.roll_no,
                    status=ReportStatus(m.status.value) if m else ReportStatus.NOT_MARKED,
                    mark_id=m.mark_id if m else None,
                    noted_at=m.marked_at if m else None,
                    notes=m.notes if m else None,
                )
            )
        return ClassReport(school_class=school_class, report_date=day, rows=rows)

    def student_history(
        self,
        *,
        student_id: str,
        acting_teacher_id: str,
        limit: int = STUDENT_HISTORY_LIMIT,
    ) -> StudentHistory:
        student = self._students.get_by_id(student_id)
        if not student:
            raise NotFoundError("No attendance records found")
        self._guard.authorize_read(acting_teacher_id, student.class_id)

        marks = list(self._attendance.list_for_student(student_id, limit=min(int(limit), STUDENT_HISTORY_LIMIT)))
        if not marks:
            raise NotFoundError("No attendance records found")
        return StudentHistory(student=student, marks=marks)

    # ----- helpers -----

    def _validate_date(self, value, *, now: datetime) -> date:
        if not value:
            raise ValidationError("Date is required")
        day = parse_iso_date(value)
        if day > now.date():
            raise ValidationError("Attendance date cannot be in the future")
        return day

    @staticmethod
    def _validate_entry(student_id, status, notes) -> _MarkInput:
        return _MarkInput(
            student_id=require_non_empty(student_id, "Student id"),
            status=parse_status(status),
            notes=clean_notes(notes),
        )

    def _write_mark(
        self,
        entry: _MarkInput,
        *,
        class_id: str,
        teacher_id: str,
        day: date,
        now: datetime,
    ) -> AttendanceMark:
        student = self._students.get_by_id(entry.student_id)
        if not student or student.class_id != class_id:
            raise NotFoundError("Student not found in this class")

        existing = self._attendance.get_for_key(entry.student_id, class_id, day)
        if existing:
            if not self._attendance.update_mark(
                mark_id=existing.mark_id,
                status=entry.status,
                notes=entry.notes,
                edited_at=now,
                edited_by=teacher_id,
            ):
                raise NotFoundError("Attendance record not found")
            logger.info(
                "Mark updated - mark: %s, student: %s, date: %s, status: %s",
                existing.mark_id,
                entry.student_id,
                day.isoformat(),
                entry.status.value,
            )
            return replace(existing, status=entry.status, notes=entry.notes, edited_at=now, edited_by=teacher_id)

        mark = self._attendance.create_mark(
            AttendanceMark(
                mark_id=uuid.uuid4().hex,
                student_id=entry.student_id,
                class_id=class_id,
                teacher_id=teacher_id,
                mark_date=day,
                status=entry.status,
                notes=entry.notes,
                marked_by=MarkSource.SWIPE,
                marked_at=now,
            )
        )
        logger.info(
            "Mark created - mark: %s, student: %s, date: %s, status: %s",
            mark.mark_id,
            entry.student_id,
            day.isoformat(),
            entry.status.value,
        )
        return mark

    def _refresh_stats(self, *, student_id: str, class_id: str) -> None:
        self._refresh_student(student_id)
        self._refresh_class(class_id)

    def _refresh_student(self, student_id: str) -> None:
        try:
            self._stats.recompute_student_stats(student_id)
        except Exception:
            # Mark stays stored; counters catch up on the next write.
            logger.exception("Stats recompute failed - student: %s", student_id)

    def _refresh_class(self, class_id: str) -> None:
        try:
            self._stats.recompute_class_sessions(class_id)
        except Exception:
            logger.exception("Session counters recompute failed - class: %s", class_id)
