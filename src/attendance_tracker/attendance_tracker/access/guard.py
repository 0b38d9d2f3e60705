from __future__ import annotations

from ..classes.model import SchoolClass
from ..classes.repository import ClassRepository
from ..core.exceptions import AuthorizationError, NotFoundError


class AccessGuard:
    """Ownership check run before any write scoped to a class.

    ``authorize`` has no side effects: it reads the class and compares its
    owning teacher with the actor. A missing class is denied the same way as a
    foreign one.
    """

    def __init__(self, classes: ClassRepository):
        self._classes = classes

    def authorize(self, acting_teacher_id: str, class_id: str) -> SchoolClass:
        school_class = self._classes.get_by_id(class_id) if isinstance(class_id, str) and class_id else None
        if not school_class or school_class.teacher_id != acting_teacher_id:
            raise AuthorizationError("Unauthorized to access this class")
        return school_class

    def authorize_read(self, acting_teacher_id: str, class_id: str) -> SchoolClass:
        """Like ``authorize`` but reports a denial as "Class not found"."""
        try:
            return self.authorize(acting_teacher_id, class_id)
        except AuthorizationError:
            raise NotFoundError("Class not found")
