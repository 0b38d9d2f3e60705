from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional

from .access.guard import AccessGuard
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceLedger
from .classes.mysql_class_repository import MySQLClassRepository
from .classes.mysql_student_repository import MySQLStudentRepository
from .classes.repository import ClassRepository, StudentRepository
from .classes.service import ClassService
from .core.constants import DEFAULT_TOKEN_TTL_HOURS
from .database.connection import DBConfig, DatabaseConnection
from .stats.service import StatisticsAggregator
from .teachers.mysql_teacher_repository import MySQLTeacherRepository
from .teachers.repository import TeacherRepository
from .teachers.service import AuthService, TeacherService
from .teachers.tokens import TokenService


@dataclass(frozen=True)
class Container:
    teachers_repo: TeacherRepository
    classes_repo: ClassRepository
    students_repo: StudentRepository
    attendance_repo: AttendanceRepository

    guard: AccessGuard
    auth_service: AuthService
    teacher_service: TeacherService
    class_service: ClassService
    stats: StatisticsAggregator
    ledger: AttendanceLedger

    conn: Optional[DatabaseConnection] = None


def assemble(
    *,
    teachers_repo: TeacherRepository,
    classes_repo: ClassRepository,
    students_repo: StudentRepository,
    attendance_repo: AttendanceRepository,
    jwt_secret: str,
    token_ttl_hours: int = DEFAULT_TOKEN_TTL_HOURS,
    clock: Callable[[], datetime] | None = None,
    conn: Optional[DatabaseConnection] = None,
) -> Container:
    """Wire services over any repositories satisfying the protocols."""
    guard = AccessGuard(classes_repo)
    tokens = TokenService(jwt_secret, ttl_hours=token_ttl_hours)
    stats = StatisticsAggregator(attendance_repo, students_repo, classes_repo, guard)

    return Container(
        teachers_repo=teachers_repo,
        classes_repo=classes_repo,
        students_repo=students_repo,
        attendance_repo=attendance_repo,
        guard=guard,
        auth_service=AuthService(teachers_repo, tokens, clock=clock),
        teacher_service=TeacherService(teachers_repo),
        class_service=ClassService(classes_repo, students_repo, guard),
        stats=stats,
        ledger=AttendanceLedger(attendance_repo, students_repo, guard, stats, clock=clock),
        conn=conn,
    )


def build_container(*, db_config: dict, jwt_secret: str, token_ttl_hours: int = DEFAULT_TOKEN_TTL_HOURS) -> Container:
    conn = DatabaseConnection(DBConfig.from_dict(db_config))

    return assemble(
        teachers_repo=MySQLTeacherRepository(conn),
        classes_repo=MySQLClassRepository(conn),
        students_repo=MySQLStudentRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        jwt_secret=jwt_secret,
        token_ttl_hours=token_ttl_hours,
        conn=conn,
    )
