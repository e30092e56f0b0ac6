"""Error taxonomy shared by the job runner, the collaborators and the HTTP layer.

Every error carries a short machine-readable ``code`` (returned to callers in
the ``{"ok": false, "error": ...}`` envelope) and the HTTP status it maps to.
"""

from __future__ import annotations


class ActDiaryError(Exception):
    """Base class for all errors raised by actdiary."""

    status_code: int = 500
    default_code: str = "server_error"

    def __init__(self, message: str | None = None, *, code: str | None = None):
        self.code = code or message or self.default_code
        super().__init__(message or self.code)


class ConfigurationError(ActDiaryError):
    """A required credential or endpoint is missing."""

    status_code = 500
    default_code = "configuration_error"


class CollaboratorTransportError(ActDiaryError):
    """Network failure, timeout or non-2xx response from an external service."""

    status_code = 502
    default_code = "collaborator_unavailable"

    def __init__(
        self,
        message: str | None = None,
        *,
        code: str | None = None,
        status: int | None = None,
    ):
        super().__init__(message, code=code)
        self.status = status


class CollaboratorFormatError(ActDiaryError):
    """Response body did not parse, or lacked the expected fields."""

    status_code = 502
    default_code = "invalid_reply"


class NotFoundError(ActDiaryError):
    """Unknown (or evicted) job identifier."""

    status_code = 404
    default_code = "job_not_found"

    def __init__(self, job_id: str = ""):
        super().__init__(f"Job not found: {job_id}" if job_id else None, code=self.default_code)
        self.job_id = job_id


class ValidationError(ActDiaryError):
    """Caller input rejected before any collaborator call."""

    status_code = 400
    default_code = "invalid_request"
