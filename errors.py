"""
Errors raised by the summarizer pipeline.

Every error carries a message that is safe to show to the user as-is.
"""

GENERIC_ERROR_MESSAGE = "Something went wrong. Please try again."


class SummarizerError(Exception):
    def __init__(self, message: str = ""):
        super().__init__(message)
        self.message = message

    def __str__(self):
        return self.message or GENERIC_ERROR_MESSAGE


class ValidationError(SummarizerError):
    """Bad input (URL or API key). Raised before any network call."""


class RetrievalError(SummarizerError):
    """Reader proxy answered with a non-2xx status, or could not be reached."""

    def __init__(self, message: str = "", status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class SummaryError(SummarizerError):
    """LLM provider failed. `detail` keeps the raw provider response body."""

    def __init__(self, message: str = "", detail: str = ""):
        super().__init__(message)
        self.detail = detail
