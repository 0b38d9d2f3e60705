"""Re-key teachers from legacy ids to identity-provider ids.

The mapping is explicit (legacy id -> provider id); nothing is inferred from
the shape or length of an id. All changes run in one transaction and a dry run
rolls it back, so the report shows exactly what ``--apply`` would change.
Running the same mapping twice is a no-op the second time.
"""

from __future__ import annotations

import csv
import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Iterable, Mapping

from ..core.exceptions import ValidationError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall

logger = logging.getLogger(__name__)


class RemapAction(str, Enum):
    REKEY = "REKEY"                  # move the teacher row and its references
    REPOINT = "REPOINT"              # teacher row already moved; fix leftover references
    SKIP_UNKNOWN = "SKIP_UNKNOWN"    # neither id exists
    SKIP_COLLISION = "SKIP_COLLISION"  # both ids exist; needs a human decision


@dataclass(frozen=True)
class RemapStep:
    legacy_id: str
    provider_id: str
    action: RemapAction


@dataclass
class RemapReport:
    dry_run: bool
    steps: list[RemapStep] = field(default_factory=list)
    teachers_rekeyed: int = 0
    classes_updated: int = 0
    marks_updated: int = 0

    @property
    def skipped(self) -> list[RemapStep]:
        return [s for s in self.steps if s.action in {RemapAction.SKIP_UNKNOWN, RemapAction.SKIP_COLLISION}]


def load_mapping(path: str | Path) -> dict[str, str]:
    """Read ``legacy_id,provider_id`` rows (header optional)."""
    mapping: dict[str, str] = {}
    with Path(path).open(newline="", encoding="utf-8") as fh:
        for row in csv.reader(fh):
            if not row or row[0].strip().startswith("#"):
                continue
            if len(row) < 2:
                raise ValidationError(f"Mapping row needs two columns: {row!r}")
            legacy, provider = row[0].strip(), row[1].strip()
            if (legacy, provider) == ("legacy_id", "provider_id"):
                continue
            if not legacy or not provider:
                raise ValidationError(f"Mapping row has an empty id: {row!r}")
            if legacy in mapping and mapping[legacy] != provider:
                raise ValidationError(f"Legacy id mapped twice: {legacy}")
            mapping[legacy] = provider
    validate_mapping(mapping)
    return mapping


def validate_mapping(mapping: Mapping[str, str]) -> None:
    targets = list(mapping.values())
    duplicates = {t for t in targets if targets.count(t) > 1}
    if duplicates:
        raise ValidationError(f"Provider ids mapped from several legacy ids: {sorted(duplicates)}")
    chained = set(mapping) & set(targets)
    if chained:
        raise ValidationError(f"Ids appear as both legacy and provider ids: {sorted(chained)}")


def plan_remap(mapping: Mapping[str, str], existing_teacher_ids: Iterable[str]) -> list[RemapStep]:
    existing = set(existing_teacher_ids)
    steps: list[RemapStep] = []
    for legacy_id, provider_id in sorted(mapping.items()):
        if legacy_id == provider_id:
            continue
        has_legacy = legacy_id in existing
        has_provider = provider_id in existing
        if has_legacy and has_provider:
            action = RemapAction.SKIP_COLLISION
        elif has_legacy:
            action = RemapAction.REKEY
        elif has_provider:
            action = RemapAction.REPOINT
        else:
            action = RemapAction.SKIP_UNKNOWN
        steps.append(RemapStep(legacy_id=legacy_id, provider_id=provider_id, action=action))
    return steps


class TeacherIdRemapJob:
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def run(self, mapping: Mapping[str, str], *, dry_run: bool = True) -> RemapReport:
        validate_mapping(mapping)
        report = RemapReport(dry_run=dry_run)

        with db_cursor(self._conn_factory, commit=not dry_run) as (_, cur):
            ids = list(mapping.keys()) + list(mapping.values())
            placeholders = ",".join(["%s"] * len(ids)) or "NULL"
            cur.execute(f"SELECT teacher_id FROM teachers WHERE teacher_id IN ({placeholders}) FOR UPDATE", tuple(ids))
            existing = [str(r["teacher_id"]) for r in fetchall(cur)]

            report.steps = plan_remap(mapping, existing)
            for step in report.steps:
                if step.action in {RemapAction.SKIP_UNKNOWN, RemapAction.SKIP_COLLISION}:
                    logger.warning("Remap skipped - %s -> %s (%s)", step.legacy_id, step.provider_id, step.action.value)
                    continue
                self._apply_step(cur, step, report)

        logger.info(
            "Teacher remap %s - rekeyed: %s, classes: %s, marks: %s, skipped: %s",
            "dry-run" if dry_run else "applied",
            report.teachers_rekeyed,
            report.classes_updated,
            report.marks_updated,
            len(report.skipped),
        )
        return report

    @staticmethod
    def _apply_step(cur, step: RemapStep, report: RemapReport) -> None:
        old, new = step.legacy_id, step.provider_id

        if step.action == RemapAction.REKEY:
            cur.execute("UPDATE teachers SET teacher_id=%s WHERE teacher_id=%s", (new, old))
            report.teachers_rekeyed += cur.rowcount

        cur.execute("UPDATE classes SET teacher_id=%s WHERE teacher_id=%s", (new, old))
        report.classes_updated += cur.rowcount

        cur.execute("UPDATE attendance_marks SET teacher_id=%s WHERE teacher_id=%s", (new, old))
        report.marks_updated += cur.rowcount
        cur.execute("UPDATE attendance_marks SET edited_by=%s WHERE edited_by=%s", (new, old))
