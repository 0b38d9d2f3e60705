from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol

from .model import Teacher


class TeacherRepository(Protocol):
    """Repository interface for Teacher.

    Note (DIP): services depend on this interface, never on a concrete DB.
    """

    def get_by_id(self, teacher_id: str) -> Optional[Teacher]:
        raise NotImplementedError

    def get_by_email(self, email: str) -> Optional[Teacher]:
        raise NotImplementedError

    def create_teacher(
        self,
        *,
        teacher_id: str,
        full_name: str,
        email: str,
        password_hash: str,
        phone: Optional[str] = None,
        department: Optional[str] = None,
    ) -> Teacher:
        raise NotImplementedError

    def touch_last_login(self, teacher_id: str, *, at: datetime) -> None:
        raise NotImplementedError
