from __future__ import annotations

import pytest

from src.attendance_tracker.attendance_tracker.core.exceptions import ValidationError
from src.attendance_tracker.attendance_tracker.maintenance.orphan_repair import (
    MarkRef,
    OrphanRepairJob,
    RepairReport,
    find_orphans,
)
from src.attendance_tracker.attendance_tracker.maintenance.teacher_id_remap import (
    RemapAction,
    TeacherIdRemapJob,
    load_mapping,
    plan_remap,
    validate_mapping,
)


class ScriptedCursor:
    """Answers SELECTs from ``tables`` and reports ``rowcount`` for writes."""

    def __init__(self, answer, rowcount: int = 1):
        self._answer = answer
        self._rows: list = []
        self.rowcount = 0
        self.default_rowcount = rowcount
        self.statements: list[tuple[str, tuple]] = []

    def execute(self, sql, params=()):
        self.statements.append((sql, tuple(params or ())))
        if sql.lstrip().upper().startswith("SELECT"):
            self._rows = self._answer(sql, params)
        else:
            self.rowcount = self.default_rowcount

    def fetchall(self):
        return self._rows

    def fetchone(self):
        return self._rows[0] if self._rows else None

    def close(self):
        pass


class FakeConnection:
    def __init__(self, cursor: ScriptedCursor):
        self._cursor = cursor
        self.committed = False
        self.rolled_back = False

    def cursor(self, dictionary=True):
        return self._cursor

    def commit(self):
        self.committed = True

    def rollback(self):
        self.rolled_back = True

    def close(self):
        pass


class FakeConnectionFactory:
    def __init__(self, cursor: ScriptedCursor):
        self.conn = FakeConnection(cursor)

    def connect(self):
        return self.conn


def test_plan_remap_classifies_each_pair():
    mapping = {"old-a": "uid-a", "old-b": "uid-b", "old-c": "uid-c", "old-d": "uid-d"}
    existing = ["old-a", "uid-b", "old-c", "uid-c"]

    steps = {s.legacy_id: s.action for s in plan_remap(mapping, existing)}

    assert steps == {
        "old-a": RemapAction.REKEY,
        "old-b": RemapAction.REPOINT,
        "old-c": RemapAction.SKIP_COLLISION,
        "old-d": RemapAction.SKIP_UNKNOWN,
    }


def test_plan_remap_ignores_identity_pairs():
    assert plan_remap({"same": "same"}, ["same"]) == []


@pytest.mark.parametrize("mapping", [{"a": "x", "b": "x"}, {"a": "b", "b": "c"}])
def test_validate_mapping_rejects_ambiguous_mappings(mapping):
    with pytest.raises(ValidationError):
        validate_mapping(mapping)


def test_load_mapping_reads_csv_with_header_and_comments(tmp_path):
    path = tmp_path / "ids.csv"
    path.write_text("legacy_id,provider_id\n# comment\nold-a, uid-a\n\nold-b,uid-b\n", encoding="utf-8")

    assert load_mapping(path) == {"old-a": "uid-a", "old-b": "uid-b"}


def test_load_mapping_rejects_short_rows(tmp_path):
    path = tmp_path / "ids.csv"
    path.write_text("old-a\n", encoding="utf-8")

    with pytest.raises(ValidationError):
        load_mapping(path)


def test_remap_dry_run_rolls_back():
    cursor = ScriptedCursor(lambda sql, params: [{"teacher_id": "old-a"}], rowcount=2)
    factory = FakeConnectionFactory(cursor)

    report = TeacherIdRemapJob(factory).run({"old-a": "uid-a"}, dry_run=True)

    assert factory.conn.rolled_back and not factory.conn.committed
    assert report.teachers_rekeyed == 2
    assert report.classes_updated == 2
    assert report.marks_updated == 2
    updates = [sql for sql, _ in cursor.statements if sql.startswith("UPDATE")]
    assert updates[0].startswith("UPDATE teachers")


def test_remap_second_run_only_repoints_leftovers():
    cursor = ScriptedCursor(lambda sql, params: [{"teacher_id": "uid-a"}], rowcount=0)
    factory = FakeConnectionFactory(cursor)

    report = TeacherIdRemapJob(factory).run({"old-a": "uid-a"}, dry_run=False)

    assert factory.conn.committed
    assert [s.action for s in report.steps] == [RemapAction.REPOINT]
    assert report.teachers_rekeyed == 0
    assert not any(sql.startswith("UPDATE teachers") for sql, _ in cursor.statements)


def test_find_orphans_cascades_from_missing_teacher():
    report = find_orphans(
        teacher_ids=["t-1"],
        class_owners={"c-1": "t-1", "c-2": "t-gone"},
        student_classes={"s-1": "c-1", "s-2": "c-2", "s-3": "c-gone"},
        marks=[
            MarkRef("m-1", "s-1", "c-1"),
            MarkRef("m-2", "s-2", "c-2"),
            MarkRef("m-3", "s-gone", "c-1"),
            MarkRef("m-4", "s-1", "c-gone"),
        ],
        report=RepairReport(dry_run=True),
    )

    assert report.classes == ["c-2"]
    assert report.students == ["s-2", "s-3"]
    assert report.marks == ["m-2", "m-3", "m-4"]
    assert report.total == 6


def test_orphan_repair_apply_deletes_children_first():
    tables = {
        "SELECT teacher_id": [{"teacher_id": "t-1"}],
        "SELECT class_id": [{"class_id": "c-1", "teacher_id": "t-1"}, {"class_id": "c-2", "teacher_id": "t-gone"}],
        "SELECT student_id": [{"student_id": "s-2", "class_id": "c-2"}],
        "SELECT mark_id": [{"mark_id": "m-2", "student_id": "s-2", "class_id": "c-2"}],
    }

    def answer(sql, params):
        return next(rows for prefix, rows in tables.items() if sql.startswith(prefix))

    cursor = ScriptedCursor(answer)
    factory = FakeConnectionFactory(cursor)

    report = OrphanRepairJob(factory).run(dry_run=False)

    assert factory.conn.committed
    assert (report.classes, report.students, report.marks) == (["c-2"], ["s-2"], ["m-2"])
    deletes = [sql.split(" WHERE")[0] for sql, _ in cursor.statements if sql.startswith("DELETE")]
    assert deletes == ["DELETE FROM attendance_marks", "DELETE FROM students", "DELETE FROM classes"]


def test_orphan_repair_with_clean_data_deletes_nothing():
    cursor = ScriptedCursor(lambda sql, params: [])
    factory = FakeConnectionFactory(cursor)

    report = OrphanRepairJob(factory).run()

    assert report.total == 0
    assert factory.conn.rolled_back
    assert not any(sql.startswith("DELETE") for sql, _ in cursor.statements)
