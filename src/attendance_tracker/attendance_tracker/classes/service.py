from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from typing import Optional

from ..access.guard import AccessGuard
from ..common.validators import optional_text, require_non_empty
from ..core.exceptions import ValidationError
from .model import SchoolClass, Student
from .repository import ClassRepository, StudentRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ClassDetail:
    school_class: SchoolClass
    students: list[Student]


@dataclass(frozen=True)
class Dashboard:
    total_classes: int
    total_students: int
    classes: list[SchoolClass]


class ClassService:
    """Use case: a teacher's view of their classes and rosters."""

    def __init__(self, classes: ClassRepository, students: StudentRepository, guard: AccessGuard):
        self._classes = classes
        self._students = students
        self._guard = guard

    def list_classes(self, teacher_id: str) -> list[SchoolClass]:
        return list(self._classes.list_for_teacher(teacher_id))

    def class_detail(self, *, class_id: str, teacher_id: str) -> ClassDetail:
        school_class = self._guard.authorize_read(teacher_id, class_id)
        return ClassDetail(school_class=school_class, students=list(self._students.list_for_class(class_id)))

    def roster(self, *, class_id: str, teacher_id: str) -> list[Student]:
        self._guard.authorize_read(teacher_id, class_id)
        return list(self._students.list_for_class(class_id))

    def dashboard(self, teacher_id: str) -> Dashboard:
        classes = self.list_classes(teacher_id)
        total_students = sum(self._students.count_for_class(c.class_id) for c in classes)
        return Dashboard(total_classes=len(classes), total_students=total_students, classes=classes)

    def enroll_student(
        self,
        *,
        class_id: str,
        teacher_id: str,
        name: str,
        roll_no: str,
        email: Optional[str] = None,
        phone: Optional[str] = None,
    ) -> Student:
        name = require_non_empty(name, "Student name")
        roll_no = require_non_empty(roll_no, "Roll number")
        email = optional_text(email, "Email")
        phone = optional_text(phone, "Phone")
        if not 3 <= len(name) <= 50:
            raise ValidationError("Name must be between 3 and 50 characters")

        self._guard.authorize(teacher_id, class_id)

        if self._students.get_by_roll_no(class_id, roll_no):
            raise ValidationError("Roll number already exists in this class")

        student = self._students.create_student(
            student_id=uuid.uuid4().hex,
            class_id=class_id,
            name=name,
            roll_no=roll_no,
            email=email,
            phone=phone,
        )
        logger.info("Student enrolled - class: %s, student: %s, roll: %s", class_id, student.student_id, roll_no)
        return student
