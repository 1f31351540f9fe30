"""
Project Intake - Error taxonomy.

- Local validation failures never raise; callers get a bool / outcome value.
- Transient network failures raise TransportError.
- Remote business failures raise ApiError (or a subclass).
- A missing questionnaire session is NotFoundError, which callers treat as
  a normal first visit.
- AuthExpiredError is never handled here; it is escalated to whoever owns
  the session-invalidation path.
"""


class IntakeError(Exception):
    """Base class for all errors raised by project_intake."""

    def __init__(self, message: str = ""):
        super().__init__(message)
        self.message = message


class ApiError(IntakeError):
    """The API answered with a non-success status."""

    def __init__(self, status_code: int, message: str = ""):
        super().__init__(message or f"HTTP {status_code}")
        self.status_code = status_code

    def __str__(self) -> str:
        return f"{self.message} (HTTP {self.status_code})"


class NotFoundError(ApiError):
    """404 from the API."""

    def __init__(self, message: str = "Not found"):
        super().__init__(404, message)


class AuthExpiredError(ApiError):
    """401 from the API. Escalated, never retried."""

    def __init__(self, message: str = "Authentication expired"):
        super().__init__(401, message)


class TransportError(IntakeError):
    """Connection failure or timeout before any response arrived."""


class UploadError(IntakeError):
    """The direct binary transfer to a pre-signed URL failed."""


class DraftStoreError(IntakeError):
    """The persisted draft could not be written."""


def describe_error(error: Exception, fallback: str) -> str:
    """Pick a user-facing message for an error, falling back when it has none."""
    if isinstance(error, IntakeError) and error.message:
        return error.message
    return fallback
