from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Iterable

from ...attendance.model import AttendanceMark
from ...classes.model import StudentStats
from ...core.enums import AttendanceBand


class StatsCalculator(ABC):
    """Calculator interface (Strategy Pattern for attendance statistics)."""

    @abstractmethod
    def tally(self, marks: Iterable[AttendanceMark]) -> StudentStats:
        raise NotImplementedError

    @abstractmethod
    def band(self, percentage: int) -> AttendanceBand:
        raise NotImplementedError
