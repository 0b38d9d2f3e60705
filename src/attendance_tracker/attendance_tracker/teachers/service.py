from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from typing import Callable, Optional

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.datetime_utils import now_local
from ..common.validators import optional_text, require_min_length, require_non_empty
from ..core.constants import MIN_PASSWORD_LENGTH
from ..core.exceptions import AuthenticationError, ValidationError
from .model import Teacher
from .repository import TeacherRepository
from .tokens import TokenService

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LoginResult:
    teacher: Teacher
    token: str


class AuthService:
    """Use case: authenticate a teacher and resolve bearer tokens."""

    def __init__(self, teachers: TeacherRepository, tokens: TokenService, *, clock: Callable | None = None):
        self._teachers = teachers
        self._tokens = tokens
        self._clock = clock or now_local

    def authenticate(self, email: str, password: str) -> LoginResult:
        if not isinstance(email, str) or not isinstance(password, str):
            raise ValidationError("Email and password must be strings")
        email = email.strip().lower()
        teacher = self._teachers.get_by_email(email)
        if not teacher or not teacher.is_active:
            logger.warning("Login failed - unknown or inactive teacher: %s", email)
            raise AuthenticationError("Invalid email or password")

        try:
            ok = check_password_hash(teacher.password_hash, password)
        except ValueError:
            # e.g. placeholder hashes like 'CHANGE_ME' or corrupted values
            ok = False

        if not ok:
            logger.warning("Login failed - wrong password for teacher: %s", teacher.teacher_id)
            raise AuthenticationError("Invalid email or password")

        self._teachers.touch_last_login(teacher.teacher_id, at=self._clock())
        token = self._tokens.issue(teacher_id=teacher.teacher_id, email=teacher.email)
        logger.info("Login successful - teacher: %s", teacher.teacher_id)
        return LoginResult(teacher=teacher, token=token)

    def current_teacher(self, token: str) -> Teacher:
        """Resolve the acting teacher from a bearer token."""
        teacher_id = self._tokens.verify(token)
        teacher = self._teachers.get_by_id(teacher_id)
        if not teacher or not teacher.is_active:
            raise AuthenticationError("Teacher not found or inactive")
        return teacher


class TeacherService:
    """Use case: register teacher accounts."""

    def __init__(self, teachers: TeacherRepository):
        self._teachers = teachers

    def register(
        self,
        *,
        full_name: str,
        email: str,
        password: str,
        teacher_id: Optional[str] = None,
        phone: Optional[str] = None,
        department: Optional[str] = None,
    ) -> Teacher:
        full_name = require_non_empty(full_name, "Name")
        email = require_non_empty(email, "Email").lower()
        if "@" not in email:
            raise ValidationError("Please provide a valid email")
        require_min_length(password, "Password", MIN_PASSWORD_LENGTH)
        teacher_id = optional_text(teacher_id, "Teacher id")
        phone = optional_text(phone, "Phone")
        department = optional_text(department, "Department")

        if self._teachers.get_by_email(email):
            raise ValidationError("Teacher with this email already exists")

        teacher = self._teachers.create_teacher(
            teacher_id=teacher_id or uuid.uuid4().hex,
            full_name=full_name,
            email=email,
            password_hash=generate_password_hash(password),
            phone=phone,
            department=department,
        )
        logger.info("Teacher registered - id: %s", teacher.teacher_id)
        return teacher
