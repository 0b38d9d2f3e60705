from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date, datetime
from typing import Optional

import pytest
from werkzeug.security import generate_password_hash

from src.attendance_tracker.attendance_tracker.attendance.model import AttendanceMark
from src.attendance_tracker.attendance_tracker.classes.model import SchoolClass, Student, StudentStats
from src.attendance_tracker.attendance_tracker.container import assemble
from src.attendance_tracker.attendance_tracker.core.exceptions import ConflictError, ValidationError
from src.attendance_tracker.attendance_tracker.main import create_app
from src.attendance_tracker.attendance_tracker.teachers.model import Teacher

PASSWORD = "password123"


class InMemoryTeachers:
    def __init__(self, teachers=()):
        self._by_id: dict[str, Teacher] = {t.teacher_id: t for t in teachers}

    def get_by_id(self, teacher_id: str) -> Optional[Teacher]:
        return self._by_id.get(teacher_id)

    def get_by_email(self, email: str) -> Optional[Teacher]:
        for t in self._by_id.values():
            if t.email.lower() == (email or "").lower():
                return t
        return None

    def create_teacher(self, *, teacher_id, full_name, email, password_hash, phone=None, department=None) -> Teacher:
        if self.get_by_email(email) or teacher_id in self._by_id:
            raise ValidationError("Teacher with this email already exists")
        teacher = Teacher(
            teacher_id=teacher_id,
            full_name=full_name,
            email=email,
            password_hash=password_hash,
            phone=phone,
            department=department,
        )
        self._by_id[teacher_id] = teacher
        return teacher

    def touch_last_login(self, teacher_id: str, *, at: datetime) -> None:
        self._by_id[teacher_id] = replace(self._by_id[teacher_id], last_login_at=at)


class InMemoryClasses:
    def __init__(self, classes=()):
        self._by_id: dict[str, SchoolClass] = {c.class_id: c for c in classes}

    def get_by_id(self, class_id: str) -> Optional[SchoolClass]:
        return self._by_id.get(class_id)

    def list_for_teacher(self, teacher_id: str):
        items = [c for c in self._by_id.values() if c.teacher_id == teacher_id and c.is_active]
        return sorted(items, key=lambda c: (c.name, c.section))

    def update_session_counters(self, class_id: str, *, total_sessions: int, last_attendance_date) -> bool:
        if class_id not in self._by_id:
            return False
        self._by_id[class_id] = replace(
            self._by_id[class_id], total_sessions=total_sessions, last_attendance_date=last_attendance_date
        )
        return True


class InMemoryStudents:
    def __init__(self, students=()):
        self._by_id: dict[str, Student] = {s.student_id: s for s in students}

    def get_by_id(self, student_id: str) -> Optional[Student]:
        return self._by_id.get(student_id)

    def list_for_class(self, class_id: str):
        items = [s for s in self._by_id.values() if s.class_id == class_id and s.is_active]
        return sorted(items, key=lambda s: s.roster_position)

    def count_for_class(self, class_id: str) -> int:
        return len(self.list_for_class(class_id))

    def get_by_roll_no(self, class_id: str, roll_no: str) -> Optional[Student]:
        for s in self._by_id.values():
            if s.class_id == class_id and s.roll_no == roll_no:
                return s
        return None

    def create_student(self, *, student_id, class_id, name, roll_no, email=None, phone=None) -> Student:
        position = max((s.roster_position for s in self._by_id.values() if s.class_id == class_id), default=0) + 1
        student = Student(
            student_id=student_id,
            class_id=class_id,
            name=name,
            roll_no=roll_no,
            roster_position=position,
            email=email,
            phone=phone,
        )
        self._by_id[student_id] = student
        return student

    def update_stats(self, student_id: str, stats: StudentStats) -> bool:
        if student_id not in self._by_id:
            return False
        self._by_id[student_id] = replace(self._by_id[student_id], stats=stats)
        return True


class BrokenStatsStudents(InMemoryStudents):
    """Counter writes fail; everything else works."""

    def update_stats(self, student_id: str, stats: StudentStats) -> bool:
        raise RuntimeError("stats store unavailable")


class InMemoryAttendance:
    def __init__(self):
        self._by_id: dict[str, AttendanceMark] = {}

    def all(self) -> list[AttendanceMark]:
        return list(self._by_id.values())

    def get_by_id(self, mark_id: str) -> Optional[AttendanceMark]:
        return self._by_id.get(mark_id)

    def _find_key(self, student_id: str, class_id: str, mark_date: date) -> Optional[AttendanceMark]:
        for m in self._by_id.values():
            if (m.student_id, m.class_id, m.mark_date) == (student_id, class_id, mark_date):
                return m
        return None

    def get_for_key(self, student_id: str, class_id: str, mark_date: date) -> Optional[AttendanceMark]:
        return self._find_key(student_id, class_id, mark_date)

    def create_mark(self, mark: AttendanceMark) -> AttendanceMark:
        # Unique (student_id, class_id, mark_date), like the table constraint.
        if self._find_key(mark.student_id, mark.class_id, mark.mark_date):
            raise ConflictError("Attendance was marked concurrently; retry as an update")
        self._by_id[mark.mark_id] = mark
        return mark

    def update_mark(self, *, mark_id, status, notes, edited_at, edited_by) -> bool:
        if mark_id not in self._by_id:
            return False
        self._by_id[mark_id] = replace(
            self._by_id[mark_id], status=status, notes=notes, edited_at=edited_at, edited_by=edited_by
        )
        return True

    def list_for_class_and_date(self, class_id: str, mark_date: date):
        return [m for m in self._by_id.values() if m.class_id == class_id and m.mark_date == mark_date]

    def list_for_class(self, class_id: str):
        return sorted((m for m in self._by_id.values() if m.class_id == class_id), key=lambda m: m.mark_date)

    def list_for_student(self, student_id: str, *, class_id=None, limit=None):
        items = [
            m for m in self._by_id.values() if m.student_id == student_id and (class_id is None or m.class_id == class_id)
        ]
        items.sort(key=lambda m: (m.mark_date, m.marked_at), reverse=True)
        return items[:limit] if limit is not None else items

    def list_session_dates(self, class_id: str):
        return sorted({m.mark_date for m in self._by_id.values() if m.class_id == class_id})


@dataclass
class World:
    teachers: InMemoryTeachers
    classes: InMemoryClasses
    students: InMemoryStudents
    attendance: InMemoryAttendance


def _teacher(teacher_id: str, name: str, email: str) -> Teacher:
    return Teacher(
        teacher_id=teacher_id,
        full_name=name,
        email=email,
        password_hash=generate_password_hash(PASSWORD),
        department="Computer Science",
    )


def make_world(*, students_cls=InMemoryStudents) -> World:
    """Two teachers; t-rajesh owns class c-cs (three students), t-priya owns c-ma (one)."""
    teachers = InMemoryTeachers(
        [
            _teacher("t-rajesh", "Rajesh Kumar", "rajesh@school.edu"),
            _teacher("t-priya", "Priya Singh", "priya@school.edu"),
        ]
    )
    classes = InMemoryClasses(
        [
            SchoolClass(class_id="c-cs", teacher_id="t-rajesh", name="Computer Science", subject="CS", code="CS10A"),
            SchoolClass(class_id="c-ma", teacher_id="t-priya", name="Mathematics", subject="Math", code="MA10A"),
        ]
    )
    students = students_cls(
        [
            Student(student_id="s-1", class_id="c-cs", name="Aarav Sharma", roll_no="1", roster_position=1),
            Student(student_id="s-2", class_id="c-cs", name="Bhavya Patel", roll_no="2", roster_position=2),
            Student(student_id="s-3", class_id="c-cs", name="Chirag Rao", roll_no="3", roster_position=3),
            Student(student_id="s-4", class_id="c-ma", name="Diya Menon", roll_no="1", roster_position=1),
        ]
    )
    return World(teachers=teachers, classes=classes, students=students, attendance=InMemoryAttendance())


def build(world: World, now: datetime):
    return assemble(
        teachers_repo=world.teachers,
        classes_repo=world.classes,
        students_repo=world.students,
        attendance_repo=world.attendance,
        jwt_secret="test-jwt-secret",
        token_ttl_hours=1,
        clock=lambda: now,
    )


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2024, 1, 10, 9, 30, 0)


@pytest.fixture
def world() -> World:
    return make_world()


@pytest.fixture
def container(world, fixed_now):
    return build(world, fixed_now)


@pytest.fixture
def client(container):
    app = create_app(container, settings_module="config.testing")
    return app.test_client()


@pytest.fixture
def auth_headers(client):
    def _login(email: str = "rajesh@school.edu") -> dict:
        resp = client.post("/api/auth/login", json={"email": email, "password": PASSWORD})
        assert resp.status_code == 200, resp.get_json()
        return {"Authorization": f"Bearer {resp.get_json()['token']}"}

    return _login


@pytest.fixture
def broken_stats_world() -> World:
    return make_world(students_cls=BrokenStatsStudents)


@pytest.fixture
def build_container(fixed_now):
    return lambda w: build(w, fixed_now)
