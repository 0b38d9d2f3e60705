from __future__ import annotations

from typing import Iterable

from .base import StatsCalculator
from ...attendance.model import AttendanceMark
from ...classes.model import StudentStats
from ...core.constants import FAIR_BAND_PERCENTAGE, GOOD_BAND_PERCENTAGE
from ...core.enums import AttendanceBand, AttendanceStatus


class StandardStatsCalculator(StatsCalculator):
    """Standard rule: PRESENT/ABSENT/LATE form the base, EXCUSED is tallied apart.

    GOOD from 75%, FAIR from 50%, POOR below.
    """

    def tally(self, marks: Iterable[AttendanceMark]) -> StudentStats:
        counts = {status: 0 for status in AttendanceStatus}
        for m in marks:
            counts[m.status] += 1

        present = counts[AttendanceStatus.PRESENT]
        absent = counts[AttendanceStatus.ABSENT]
        late = counts[AttendanceStatus.LATE]
        return StudentStats(
            total_classes=present + absent + late,
            present_count=present,
            absent_count=absent,
            late_count=late,
            excused_count=counts[AttendanceStatus.EXCUSED],
        )

    def band(self, percentage: int) -> AttendanceBand:
        if percentage >= GOOD_BAND_PERCENTAGE:
            return AttendanceBand.GOOD
        if percentage >= FAIR_BAND_PERCENTAGE:
            return AttendanceBand.FAIR
        return AttendanceBand.POOR
