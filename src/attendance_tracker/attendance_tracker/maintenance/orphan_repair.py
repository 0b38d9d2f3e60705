"""Remove rows whose parent no longer exists.

Cascade: a class without a teacher is orphaned, which orphans its students,
which orphans their marks. Marks pointing at a missing class are orphaned too.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, Mapping

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MarkRef:
    mark_id: str
    student_id: str
    class_id: str


@dataclass
class RepairReport:
    dry_run: bool
    classes: list[str] = field(default_factory=list)
    students: list[str] = field(default_factory=list)
    marks: list[str] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.classes) + len(self.students) + len(self.marks)


def find_orphans(
    *,
    teacher_ids: Iterable[str],
    class_owners: Mapping[str, str],
    student_classes: Mapping[str, str],
    marks: Iterable[MarkRef],
    report: RepairReport,
) -> RepairReport:
    teachers = set(teacher_ids)

    report.classes = sorted(cid for cid, tid in class_owners.items() if tid not in teachers)
    live_classes = set(class_owners) - set(report.classes)

    report.students = sorted(sid for sid, cid in student_classes.items() if cid not in live_classes)
    live_students = set(student_classes) - set(report.students)

    report.marks = sorted(
        m.mark_id for m in marks if m.student_id not in live_students or m.class_id not in live_classes
    )
    return report


class OrphanRepairJob:
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def run(self, *, dry_run: bool = True) -> RepairReport:
        report = RepairReport(dry_run=dry_run)

        with db_cursor(self._conn_factory, commit=not dry_run) as (_, cur):
            cur.execute("SELECT teacher_id FROM teachers")
            teacher_ids = [str(r["teacher_id"]) for r in fetchall(cur)]
            cur.execute("SELECT class_id, teacher_id FROM classes")
            class_owners = {str(r["class_id"]): str(r["teacher_id"]) for r in fetchall(cur)}
            cur.execute("SELECT student_id, class_id FROM students")
            student_classes = {str(r["student_id"]): str(r["class_id"]) for r in fetchall(cur)}
            cur.execute("SELECT mark_id, student_id, class_id FROM attendance_marks")
            marks = [MarkRef(str(r["mark_id"]), str(r["student_id"]), str(r["class_id"])) for r in fetchall(cur)]

            find_orphans(
                teacher_ids=teacher_ids,
                class_owners=class_owners,
                student_classes=student_classes,
                marks=marks,
                report=report,
            )

            _delete_ids(cur, "attendance_marks", "mark_id", report.marks)
            _delete_ids(cur, "students", "student_id", report.students)
            _delete_ids(cur, "classes", "class_id", report.classes)

        for cid in report.classes:
            logger.info("[DELETE] Orphaned class %s (teacher %s no longer exists)", cid, class_owners[cid])
        logger.info(
            "Orphan repair %s - classes: %s, students: %s, marks: %s",
            "dry-run" if dry_run else "applied",
            len(report.classes),
            len(report.students),
            len(report.marks),
        )
        return report


def _delete_ids(cur, table: str, column: str, ids: list[str], *, chunk: int = 500) -> None:
    for start in range(0, len(ids), chunk):
        part = ids[start : start + chunk]
        placeholders = ",".join(["%s"] * len(part))
        cur.execute(f"DELETE FROM {table} WHERE {column} IN ({placeholders})", tuple(part))
