from __future__ import annotations

from datetime import date, datetime

import pytest

from src.attendance_tracker.attendance_tracker.common.datetime_utils import parse_iso_date
from src.attendance_tracker.attendance_tracker.common.validators import (
    clean_notes,
    optional_text,
    parse_status,
    require_min_length,
    require_non_empty,
)
from src.attendance_tracker.attendance_tracker.core.enums import AttendanceStatus
from src.attendance_tracker.attendance_tracker.core.exceptions import ValidationError


@pytest.mark.parametrize(
    "value",
    [
        "2024-01-01",
        "2024-01-01T23:59:59Z",
        "2024-01-01T00:00:00+05:30",
        "2024-01-01 08:15:00",
        "2024-01-01T08:15:00.250",
        datetime(2024, 1, 1, 18, 0),
        date(2024, 1, 1),
    ],
)
def test_parse_iso_date_keeps_calendar_day(value):
    assert parse_iso_date(value) == date(2024, 1, 1)


@pytest.mark.parametrize(
    "value",
    [
        "",
        "yesterday",
        "2024-13-01",
        None,
        "2024-01-01junk",
        "2024-01-01 not a date",
        "2024-01-01T25:00:00",
        20240101,
        {"date": "2024-01-01"},
    ],
)
def test_parse_iso_date_rejects_garbage(value):
    with pytest.raises(ValidationError):
        parse_iso_date(value)


def test_parse_status_any_case():
    assert parse_status("Late") == AttendanceStatus.LATE
    with pytest.raises(ValidationError):
        parse_status("holiday")


@pytest.mark.parametrize("value", [["PRESENT"], {"status": "PRESENT"}, 1, None])
def test_parse_status_rejects_non_strings(value):
    with pytest.raises(ValidationError):
        parse_status(value)


def test_clean_notes():
    assert clean_notes("   ") is None
    assert clean_notes(None) is None
    with pytest.raises(ValidationError):
        clean_notes("n" * 501)
    with pytest.raises(ValidationError):
        clean_notes({"text": "late bus"})


def test_require_non_empty_accepts_numbers_and_trims():
    assert require_non_empty(" s-1 ", "Student id") == "s-1"
    assert require_non_empty(4, "Roll number") == "4"


@pytest.mark.parametrize("value", [None, "", "   ", {"x": 1}, ["s-1"], True, 1.5])
def test_require_non_empty_rejects_missing_and_non_text(value):
    with pytest.raises(ValidationError):
        require_non_empty(value, "Class id")


def test_optional_text():
    assert optional_text(None, "Email") is None
    assert optional_text("  ", "Email") is None
    assert optional_text(" a@school.edu ", "Email") == "a@school.edu"
    with pytest.raises(ValidationError):
        optional_text(["a@school.edu"], "Email")


def test_require_min_length_rejects_non_strings():
    with pytest.raises(ValidationError):
        require_min_length(["a", "b", "c", "d", "e", "f"], "Password", 6)
