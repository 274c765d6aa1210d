"""Typed errors for the booking pipeline.

Every error carries a human-readable message and, optionally, the underlying
exception (``cause``) so a caller can tell which stage failed and why.

    TravelAgentError
    ├── ValidationError         caller input or model output rejected (4xx)
    │   ├── EmptyQueryError
    │   └── DecodeError
    │       ├── MalformedOutputError
    │       └── InvalidDomainOutputError
    ├── TransportError          network failure (retryable by the caller)
    │   └── DeadlineExceededError
    ├── ProviderError           the LLM backend reported an error
    │   └── EmptyResponseError
    ├── ToolError               tool-call round failed
    │   ├── UnknownToolError
    │   ├── InvalidToolArgumentsError
    │   └── ToolExecutionError
    ├── ToolRegistrationError
    │   ├── DuplicateToolError
    │   └── InvalidSchemaError
    ├── ConfigurationError
    └── BookingError            stage wrappers raised by the booking service
        ├── ExtractionFailedError
        ├── RecommendationFailedError
        └── NoRecommendationsError
"""

from __future__ import annotations


class TravelAgentError(Exception):
    """Base error. ``cause`` is the wrapped exception, if any."""

    def __init__(self, message: str, cause: BaseException | None = None):
        super().__init__(message)
        self.message = message
        self.cause = cause

    def __str__(self) -> str:
        if self.cause is not None:
            return f"{self.message}: {self.cause}"
        return self.message


# ---------- Validation ----------


class ValidationError(TravelAgentError):
    pass


class EmptyQueryError(ValidationError):
    def __init__(self, message: str = "query cannot be empty"):
        super().__init__(message)


class DecodeError(ValidationError):
    pass


class MalformedOutputError(DecodeError):
    """Model output is not the JSON document the task expects."""


class InvalidDomainOutputError(DecodeError):
    """Model output parsed but broke a domain rule."""


# ---------- Transport / provider ----------


class TransportError(TravelAgentError):
    pass


class DeadlineExceededError(TransportError):
    pass


class ProviderError(TravelAgentError):
    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class EmptyResponseError(ProviderError):
    def __init__(self, message: str = "no response from AI provider", status_code: int | None = None):
        super().__init__(message, status_code)


# ---------- Tools ----------


class ToolError(TravelAgentError):
    def __init__(self, message: str, tool_name: str = "", cause: BaseException | None = None):
        super().__init__(message, cause)
        self.tool_name = tool_name


class UnknownToolError(ToolError):
    pass


class InvalidToolArgumentsError(ToolError):
    pass


class ToolExecutionError(ToolError):
    pass


class ToolRegistrationError(TravelAgentError):
    pass


class DuplicateToolError(ToolRegistrationError):
    pass


class InvalidSchemaError(ToolRegistrationError):
    pass


class ConfigurationError(TravelAgentError):
    pass


# ---------- Booking stages ----------


class BookingError(TravelAgentError):
    pass


class ExtractionFailedError(BookingError):
    def __init__(self, cause: BaseException):
        super().__init__("parameter extraction failed", cause)


class RecommendationFailedError(BookingError):
    def __init__(self, cause: BaseException):
        super().__init__("flight recommendation failed", cause)


class NoRecommendationsError(BookingError):
    def __init__(self, message: str = "no flight recommendations available"):
        super().__init__(message)


def root_cause(exc: BaseException) -> BaseException:
    """Follow the ``cause`` chain down to the innermost pipeline error.

    Stops at tool errors: whatever a tool raised belongs to the tool.
    """
    while (
        isinstance(exc, TravelAgentError)
        and not isinstance(exc, ToolError)
        and isinstance(exc.cause, TravelAgentError)
    ):
        exc = exc.cause
    return exc


def is_client_error(exc: BaseException) -> bool:
    """True when the failure is the caller's input or a rejected model answer."""
    return isinstance(root_cause(exc), ValidationError)
