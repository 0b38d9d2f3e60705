from __future__ import annotations

from flask import Flask

from ..common.web import current_teacher_id, json_body, ok, pick, token_required
from ..container import Container


def register(app: Flask, container: Container) -> None:
    auth_required = token_required(container)

    @app.route("/api/teacher/classes", methods=["GET"], endpoint="teacher_classes")
    @auth_required
    def classes():
        items = container.class_service.list_classes(current_teacher_id())
        return ok(count=len(items), classes=[c.to_dict() for c in items])

    @app.route("/api/teacher/class/<class_id>", methods=["GET"], endpoint="teacher_class_detail")
    @auth_required
    def class_detail(class_id: str):
        detail = container.class_service.class_detail(class_id=class_id, teacher_id=current_teacher_id())
        return ok(
            **{
                "class": dict(
                    detail.school_class.to_dict(),
                    students=[s.to_dict() for s in detail.students],
                    total_students=len(detail.students),
                )
            }
        )

    @app.route("/api/teacher/class/<class_id>/students", methods=["GET"], endpoint="teacher_class_students")
    @auth_required
    def class_students(class_id: str):
        students = container.class_service.roster(class_id=class_id, teacher_id=current_teacher_id())
        return ok(count=len(students), students=[s.to_dict() for s in students])

    @app.route("/api/teacher/class/<class_id>/students", methods=["POST"], endpoint="teacher_enroll_student")
    @auth_required
    def enroll_student(class_id: str):
        data = json_body()
        student = container.class_service.enroll_student(
            class_id=class_id,
            teacher_id=current_teacher_id(),
            name=pick(data, "name", default=""),
            roll_no=pick(data, "rollNo", "roll_no", default=""),
            email=pick(data, "email"),
            phone=pick(data, "phone"),
        )
        return ok(201, message="Student enrolled", student=student.to_dict())

    @app.route("/api/teacher/dashboard", methods=["GET"], endpoint="teacher_dashboard")
    @auth_required
    def dashboard():
        data = container.class_service.dashboard(current_teacher_id())
        return ok(
            dashboard={
                "total_classes": data.total_classes,
                "total_students": data.total_students,
                "classes": [{"id": c.class_id, "name": c.name, "subject": c.subject} for c in data.classes],
            }
        )
