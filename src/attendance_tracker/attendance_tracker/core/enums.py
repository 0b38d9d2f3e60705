from __future__ import annotations

from enum import Enum


class AttendanceStatus(str, Enum):
    """Status stored on an attendance mark."""

    PRESENT = "PRESENT"
    ABSENT = "ABSENT"
    LATE = "LATE"
    EXCUSED = "EXCUSED"


class ReportStatus(str, Enum):
    """Status shown in a class report; a student without a mark is NOT_MARKED."""

    PRESENT = "PRESENT"
    ABSENT = "ABSENT"
    LATE = "LATE"
    EXCUSED = "EXCUSED"
    NOT_MARKED = "NOT_MARKED"


class MarkSource(str, Enum):
    """How a mark was first recorded."""

    SWIPE = "SWIPE"


class AttendanceBand(str, Enum):
    GOOD = "GOOD"
    FAIR = "FAIR"
    POOR = "POOR"
