from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Callable

import jwt

from ..core.constants import DEFAULT_TOKEN_TTL_HOURS
from ..core.exceptions import AuthenticationError

JWT_ALGORITHM = "HS256"


class TokenService:
    """Issue and verify HS256 bearer tokens carrying the teacher id as ``sub``."""

    def __init__(
        self,
        secret: str,
        *,
        ttl_hours: int = DEFAULT_TOKEN_TTL_HOURS,
        clock: Callable[[], datetime] | None = None,
    ):
        if not secret:
            raise ValueError("JWT secret must not be empty")
        self._secret = secret
        self._ttl = timedelta(hours=int(ttl_hours))
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    def issue(self, *, teacher_id: str, email: str) -> str:
        now = self._clock()
        payload = {
            "sub": teacher_id,
            "email": email,
            "iat": now,
            "exp": now + self._ttl,
        }
        return jwt.encode(payload, self._secret, algorithm=JWT_ALGORITHM)

    def verify(self, token: str) -> str:
        """Return the teacher id carried by ``token``."""
        if not token:
            raise AuthenticationError("No authentication token provided")
        try:
            data = jwt.decode(token, self._secret, algorithms=[JWT_ALGORITHM])
        except jwt.ExpiredSignatureError:
            raise AuthenticationError("Token has expired")
        except jwt.InvalidTokenError:
            raise AuthenticationError("Invalid token")

        teacher_id = data.get("sub")
        if not teacher_id:
            raise AuthenticationError("Invalid token")
        return str(teacher_id)
