from __future__ import annotations

from flask import Flask, request

from ..common.web import current_teacher_id, json_body, ok, pick, token_required
from ..container import Container
from ..core.exceptions import ValidationError
from .model import MarkEntry


def register(app: Flask, container: Container) -> None:
    auth_required = token_required(container)

    @app.route("/api/attendance/mark", methods=["POST"], endpoint="attendance_mark")
    @auth_required
    def mark():
        data = json_body()
        mark = container.ledger.mark_one(
            student_id=pick(data, "studentId", "student_id", default=""),
            class_id=pick(data, "classId", "class_id", default=""),
            teacher_id=current_teacher_id(),
            status=pick(data, "status", default=""),
            mark_date=pick(data, "date", default=""),
            notes=pick(data, "notes"),
        )
        return ok(201, message="Attendance marked successfully", attendance=mark.to_dict())

    @app.route("/api/attendance/batch-mark", methods=["POST"], endpoint="attendance_batch_mark")
    @auth_required
    def batch_mark():
        data = json_body()
        raw_entries = pick(data, "entries", "attendance_data", default=None)
        if not isinstance(raw_entries, list):
            raise ValidationError("entries must be a list")

        # Non-object entries stay in place as None and are reported by index.
        entries = [
            MarkEntry(
                student_id=pick(e, "studentId", "student_id", default=""),
                status=pick(e, "status", default=""),
                notes=pick(e, "notes"),
            )
            if isinstance(e, dict)
            else None
            for e in raw_entries
        ]

        result = container.ledger.mark_batch(
            class_id=pick(data, "classId", "class_id", default=""),
            teacher_id=current_teacher_id(),
            mark_date=pick(data, "date", default=""),
            entries=entries,
        )
        return ok(
            201,
            message="Batch attendance marked successfully",
            marked_count=result.marked_count,
            errors=[err.to_dict() for err in result.errors],
        )

    @app.route("/api/attendance/<mark_id>", methods=["PUT"], endpoint="attendance_update")
    @auth_required
    def update(mark_id: str):
        data = json_body()
        mark = container.ledger.update_one(
            mark_id=mark_id,
            acting_teacher_id=current_teacher_id(),
            status=pick(data, "status", default=""),
            notes=pick(data, "notes"),
        )
        return ok(message="Attendance updated successfully", attendance=mark.to_dict())

    @app.route("/api/attendance/class/<class_id>", methods=["GET"], endpoint="attendance_class_report")
    @auth_required
    def class_report(class_id: str):
        report = container.ledger.class_report(
            class_id=class_id,
            acting_teacher_id=current_teacher_id(),
            report_date=request.args.get("date", ""),
        )
        return ok(
            date=report.report_date.isoformat(),
            class_name=report.school_class.name,
            total_students=len(report.rows),
            attendance=[r.to_dict() for r in report.rows],
        )

    @app.route("/api/attendance/student/<student_id>", methods=["GET"], endpoint="attendance_student_history")
    @auth_required
    def student_history(student_id: str):
        history = container.ledger.student_history(student_id=student_id, acting_teacher_id=current_teacher_id())
        return ok(
            student=history.student.to_dict(),
            attendance_history=[
                {
                    "id": m.mark_id,
                    "date": m.mark_date.isoformat(),
                    "status": m.status.value,
                    "marked_at": m.marked_at.isoformat(),
                    "notes": m.notes,
                }
                for m in history.marks
            ],
        )

    @app.route("/api/attendance/analytics/<class_id>", methods=["GET"], endpoint="attendance_analytics")
    @auth_required
    def analytics(class_id: str):
        result = container.stats.class_analytics(class_id=class_id, acting_teacher_id=current_teacher_id())
        return ok(class_name=result.school_class.name, analytics=[a.to_dict() for a in result.students])
