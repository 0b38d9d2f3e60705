class DomainError(Exception):
    """Base exception for business rule violations.

    Every subclass carries a stable ``kind`` and the HTTP status the API layer
    answers with, so no raw exception crosses the controller boundary.
    """

    kind = "DomainError"
    http_status = 500

    def __init__(self, message: str = ""):
        super().__init__(message)
        self.message = message or self.__class__.__doc__ or self.kind

    def to_dict(self) -> dict:
        return {"kind": self.kind, "message": self.message}


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""

    kind = "InvalidInput"
    http_status = 400


class AuthenticationError(DomainError):
    """Raised when credentials or bearer tokens are invalid."""

    kind = "Unauthenticated"
    http_status = 401


class AuthorizationError(DomainError):
    """Raised when a teacher lacks permission for a class."""

    kind = "Denied"
    http_status = 403


class NotFoundError(DomainError):
    """Raised when a referenced entity does not exist."""

    kind = "NotFound"
    http_status = 404


class ConflictError(DomainError):
    """Raised when a uniqueness race is lost; callers may retry as an update."""

    kind = "Conflict"
    http_status = 409


class StoreUnavailableError(DomainError):
    """Raised when the backing store times out or cannot be reached."""

    kind = "StoreUnavailable"
    http_status = 503
