"""
Error types for the Appeal AI API.

Each error carries the HTTP status and the client-facing message it maps to;
the handlers registered in main.py do the translation.
"""


class AppealServiceError(Exception):
    """Base error translated into an {error, details} response."""

    status_code: int = 500

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        details: str | None = None,
    ):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        self.details = details


class RequestValidationFailed(AppealServiceError):
    """A required request field is missing or unusable."""

    status_code = 400


class UpstreamCallError(AppealServiceError):
    """The completion provider call itself failed."""

    status_code = 500


class RecoveryError(Exception):
    """Upstream text could not be coerced into a JSON object."""

    def __init__(self, message: str, raw_text: str = ""):
        super().__init__(message)
        self.raw_text = raw_text
