class InterviewCoachError(Exception):
    """Base exception for the Interview Coach service."""

    status_code = 500


class ClientInputError(InterviewCoachError):
    """Raised when a request is missing required fields."""

    status_code = 400


class AuthError(InterviewCoachError):
    """Raised when credentials or bearer tokens are missing or invalid."""

    status_code = 401


class ConflictError(InterviewCoachError):
    """Raised when a resource already exists (e.g. duplicate email)."""

    status_code = 409


class UpstreamError(InterviewCoachError):
    """Failure talking to the model provider.

    ``status`` holds whatever the provider reported (HTTP status code or a
    reason string such as ``"RESOURCE_EXHAUSTED"``), or None.
    """

    status_code = 502

    def __init__(self, message: str, *, status: int | str | None = None) -> None:
        super().__init__(message)
        self.status = status


class RetryableError(UpstreamError):
    """A single rate-limited / overloaded attempt. Absorbed by the retry loop."""

    status_code = 503


class UpstreamFatalError(UpstreamError):
    """Any other provider failure (network, auth, malformed request). Never retried."""


class UpstreamOverloadError(UpstreamError):
    """Rate limiting persisted through the whole retry budget."""

    status_code = 503


class UpstreamShapeError(UpstreamError):
    """Provider answered, but no generated text could be located in the response."""

    def __init__(self, message: str, *, top_keys: list[str] | None = None) -> None:
        super().__init__(message)
        self.top_keys = top_keys or []


class UpstreamParseError(UpstreamError):
    """Generated text is not a JSON evaluation. Carries the raw text for display."""

    status_code = 200

    def __init__(self, reason: str, raw: str) -> None:
        super().__init__(reason)
        self.reason = reason
        self.raw = raw
