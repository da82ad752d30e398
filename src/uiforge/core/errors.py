"""
Error taxonomy for the generation pipeline.

Every failed generation is reduced to an ErrorType so the feed can show a
title, a remediation hint and the raw diagnostic text side by side.
"""

import asyncio
from dataclasses import dataclass
from enum import Enum

import httpx


class ErrorType(str, Enum):
    """Classification of a failed generation or source acquisition."""

    TIMEOUT = "TIMEOUT"
    SAFETY = "SAFETY"
    AUTH = "AUTH"
    NETWORK = "NETWORK"
    MALFORMED_RESPONSE = "MALFORMED_RESPONSE"
    UNKNOWN = "UNKNOWN"
    FIGMA_EXPORT_FAILED = "FIGMA_EXPORT_FAILED"
    PAGE_FETCH_FAILED = "PAGE_FETCH_FAILED"


@dataclass(frozen=True)
class ErrorDetails:
    """User-facing description of a failure."""

    type: ErrorType
    title: str
    suggestion: str


_CATALOG: dict[ErrorType, tuple[str, str]] = {
    ErrorType.TIMEOUT: (
        "Request timed out",
        "The model took too long to respond. Try a simpler prompt or a smaller batch.",
    ),
    ErrorType.SAFETY: (
        "Blocked by safety filters",
        "The request or response was blocked by content policy. Rephrase the prompt.",
    ),
    ErrorType.AUTH: (
        "Authentication failed",
        "Check that a valid Gemini API key is configured.",
    ),
    ErrorType.NETWORK: (
        "Network error",
        "The model service could not be reached. Check your connection and retry.",
    ),
    ErrorType.MALFORMED_RESPONSE: (
        "Invalid response",
        "The model replied without any content. Retrying usually helps.",
    ),
    ErrorType.UNKNOWN: (
        "Response error",
        "Something unexpected went wrong. Try again.",
    ),
    ErrorType.FIGMA_EXPORT_FAILED: (
        "Figma export failed",
        "Make sure the link points to a frame and that a Figma token is configured.",
    ),
    ErrorType.PAGE_FETCH_FAILED: (
        "Could not fetch page",
        "Check that the URL is reachable and publicly accessible.",
    ),
}


def describe_error(error_type: ErrorType) -> ErrorDetails:
    """Build user-facing details for an error type."""
    title, suggestion = _CATALOG[error_type]
    return ErrorDetails(type=error_type, title=title, suggestion=suggestion)


# ============================================================================
# Exceptions
# ============================================================================


class UIForgeError(Exception):
    """Base error for the playground."""

    pass


class GenerationError(UIForgeError):
    """A single generation attempt failed."""

    pass


class GenerationTimeoutError(GenerationError):
    """Attempt exceeded the per-attempt deadline."""

    pass


class MalformedResponseError(GenerationError):
    """Backend replied without a textual payload."""

    pass


class SafetyBlockError(GenerationError):
    """Backend refused due to content policy."""

    pass


class ClassifiedError(UIForgeError):
    """Terminal generation failure after retries, with its classification."""

    def __init__(self, details: ErrorDetails, message: str, attempts: int = 1) -> None:
        super().__init__(message)
        self.details = details
        self.message = message
        self.attempts = attempts

    @property
    def type(self) -> ErrorType:
        return self.details.type


class SourceAcquisitionError(UIForgeError):
    """Resolving the shared round source failed."""

    error_type = ErrorType.UNKNOWN


class PageFetchError(SourceAcquisitionError):
    """Fetching page markup through the proxy failed."""

    error_type = ErrorType.PAGE_FETCH_FAILED


class FigmaExportError(SourceAcquisitionError):
    """Exporting a Figma frame failed."""

    error_type = ErrorType.FIGMA_EXPORT_FAILED


class FigmaNotConfiguredError(FigmaExportError):
    """No Figma credential is configured."""

    pass


class FigmaFrameNotFoundError(FigmaExportError):
    """The linked node has no rendered image."""

    pass


class OutputStateError(UIForgeError):
    """An output was settled twice."""

    pass


# ============================================================================
# Classification
# ============================================================================

_KEYWORDS: list[tuple[ErrorType, tuple[str, ...]]] = [
    (ErrorType.AUTH, ("api key", "api_key", "unauthenticated", "permission denied", "unauthorized")),
    (ErrorType.SAFETY, ("safety", "blocked", "prohibited content")),
    (ErrorType.TIMEOUT, ("timed out", "timeout", "deadline exceeded")),
    (ErrorType.NETWORK, ("network", "connection", "failed to fetch", "unreachable")),
    (ErrorType.MALFORMED_RESPONSE, ("invalid response", "did not contain")),
]


def classify_error(exc: BaseException) -> ErrorType:
    """
    Map an exception to an ErrorType.

    Checks the exception type first, then an HTTP-like status code, then
    keywords in the message.
    """
    if isinstance(exc, ClassifiedError):
        return exc.type
    if isinstance(exc, SourceAcquisitionError):
        return exc.error_type
    if isinstance(exc, (GenerationTimeoutError, asyncio.TimeoutError, httpx.TimeoutException)):
        return ErrorType.TIMEOUT
    if isinstance(exc, SafetyBlockError):
        return ErrorType.SAFETY
    if isinstance(exc, MalformedResponseError):
        return ErrorType.MALFORMED_RESPONSE

    code = getattr(exc, "code", None)
    if isinstance(code, int):
        if code in (401, 403):
            return ErrorType.AUTH
        if code in (408, 504):
            return ErrorType.TIMEOUT

    if isinstance(exc, (ConnectionError, httpx.TransportError)):
        return ErrorType.NETWORK

    message = str(exc).lower()
    for error_type, keywords in _KEYWORDS:
        if any(keyword in message for keyword in keywords):
            return error_type

    if isinstance(exc, OSError):
        return ErrorType.NETWORK

    return ErrorType.UNKNOWN
