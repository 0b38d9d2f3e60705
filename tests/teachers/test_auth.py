from __future__ import annotations

from datetime import datetime, timedelta, timezone

import jwt
import pytest

from src.attendance_tracker.attendance_tracker.core.exceptions import AuthenticationError, ValidationError
from src.attendance_tracker.attendance_tracker.teachers.tokens import JWT_ALGORITHM, TokenService


def test_login_is_case_insensitive_on_email_and_stamps_last_login(container, world, fixed_now):
    result = container.auth_service.authenticate("  Rajesh@School.EDU ", "password123")

    assert result.teacher.teacher_id == "t-rajesh"
    assert result.token
    assert world.teachers.get_by_id("t-rajesh").last_login_at == fixed_now


@pytest.mark.parametrize("email, password", [("rajesh@school.edu", "wrong"), ("nobody@school.edu", "password123"), ("", "")])
def test_login_failures_share_one_message(container, email, password):
    with pytest.raises(AuthenticationError) as exc:
        container.auth_service.authenticate(email, password)
    assert exc.value.message == "Invalid email or password"


def test_placeholder_hash_never_authenticates(container, world):
    world.teachers.create_teacher(
        teacher_id="t-seed", full_name="Seed Teacher", email="seed@school.edu", password_hash="CHANGE_ME"
    )

    with pytest.raises(AuthenticationError):
        container.auth_service.authenticate("seed@school.edu", "CHANGE_ME")


def test_current_teacher_resolves_issued_token(container):
    token = container.auth_service.authenticate("priya@school.edu", "password123").token

    assert container.auth_service.current_teacher(token).teacher_id == "t-priya"


def test_token_round_trip_carries_subject():
    tokens = TokenService("secret", ttl_hours=1)
    token = tokens.issue(teacher_id="t-1", email="a@school.edu")

    assert tokens.verify(token) == "t-1"
    assert jwt.decode(token, "secret", algorithms=[JWT_ALGORITHM])["email"] == "a@school.edu"


def test_expired_token_is_rejected():
    issued_at = datetime.now(timezone.utc) - timedelta(hours=3)
    tokens = TokenService("secret", ttl_hours=1, clock=lambda: issued_at)
    token = tokens.issue(teacher_id="t-1", email="a@school.edu")

    with pytest.raises(AuthenticationError) as exc:
        tokens.verify(token)
    assert exc.value.message == "Token has expired"


def test_token_signed_with_other_secret_is_rejected():
    token = TokenService("other").issue(teacher_id="t-1", email="a@school.edu")

    with pytest.raises(AuthenticationError) as exc:
        TokenService("secret").verify(token)
    assert exc.value.message == "Invalid token"


def test_register_hashes_password_and_normalizes_email(container, world):
    teacher = container.teacher_service.register(
        full_name="Meera Iyer", email="Meera@School.edu", password="secret1", teacher_id="uid-123"
    )

    assert teacher.teacher_id == "uid-123"
    assert teacher.email == "meera@school.edu"
    assert teacher.password_hash != "secret1"
    assert container.auth_service.authenticate("meera@school.edu", "secret1").teacher.teacher_id == "uid-123"


def test_register_rejects_short_password_and_duplicate_email(container):
    with pytest.raises(ValidationError):
        container.teacher_service.register(full_name="Meera Iyer", email="meera@school.edu", password="123")

    with pytest.raises(ValidationError):
        container.teacher_service.register(full_name="Rajesh Again", email="rajesh@school.edu", password="password123")


def test_login_with_non_string_credentials_is_invalid_input(container):
    with pytest.raises(ValidationError):
        container.auth_service.authenticate({"email": "rajesh@school.edu"}, "password123")


def test_register_rejects_non_string_optional_fields(container):
    with pytest.raises(ValidationError):
        container.teacher_service.register(
            full_name="Meera Iyer", email="meera@school.edu", password="secret1", department={"name": "CS"}
        )
