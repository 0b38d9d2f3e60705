from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class Teacher:
    """Domain entity: a teacher account.

    ``teacher_id`` is issued by the external identity provider. The password
    hash is write-only: it never leaves the service layer.
    """

    teacher_id: str
    full_name: str
    email: str
    password_hash: str
    phone: Optional[str] = None
    department: Optional[str] = None
    is_active: bool = True
    last_login_at: Optional[datetime] = None

    def to_public_dict(self) -> dict:
        return {
            "id": self.teacher_id,
            "name": self.full_name,
            "email": self.email,
            "phone": self.phone,
            "department": self.department,
        }
