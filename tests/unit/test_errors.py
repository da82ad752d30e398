"""Tests for error classification."""

import asyncio

import httpx
import pytest

from uiforge.core import (
    ClassifiedError,
    ErrorType,
    FigmaNotConfiguredError,
    GenerationTimeoutError,
    MalformedResponseError,
    PageFetchError,
    SafetyBlockError,
    classify_error,
    describe_error,
)


class FakeAPIError(Exception):
    """Mimics an SDK error carrying an HTTP status code."""

    def __init__(self, code: int, message: str = "") -> None:
        super().__init__(message)
        self.code = code


@pytest.mark.unit
@pytest.mark.parametrize(
    "exc, expected",
    [
        (GenerationTimeoutError("Request timed out"), ErrorType.TIMEOUT),
        (asyncio.TimeoutError(), ErrorType.TIMEOUT),
        (httpx.ReadTimeout("read timed out"), ErrorType.TIMEOUT),
        (SafetyBlockError("blocked"), ErrorType.SAFETY),
        (MalformedResponseError("no text"), ErrorType.MALFORMED_RESPONSE),
        (FakeAPIError(401, "unauthenticated"), ErrorType.AUTH),
        (FakeAPIError(403), ErrorType.AUTH),
        (FakeAPIError(504), ErrorType.TIMEOUT),
        (httpx.ConnectError("connection refused"), ErrorType.NETWORK),
        (ConnectionResetError(), ErrorType.NETWORK),
        (RuntimeError("API key not valid. Please pass a valid API key."), ErrorType.AUTH),
        (RuntimeError("Candidate was blocked due to SAFETY"), ErrorType.SAFETY),
        (RuntimeError("something odd"), ErrorType.UNKNOWN),
        (PageFetchError("404"), ErrorType.PAGE_FETCH_FAILED),
        (FigmaNotConfiguredError("missing key"), ErrorType.FIGMA_EXPORT_FAILED),
    ],
)
def test_classify_error(exc, expected):
    assert classify_error(exc) == expected


@pytest.mark.unit
def test_classified_error_keeps_type():
    err = ClassifiedError(describe_error(ErrorType.NETWORK), "offline", attempts=5)
    assert classify_error(err) == ErrorType.NETWORK
    assert err.type == ErrorType.NETWORK
    assert err.attempts == 5
    assert str(err) == "offline"


@pytest.mark.unit
@pytest.mark.parametrize("error_type", list(ErrorType))
def test_every_type_has_details(error_type):
    details = describe_error(error_type)
    assert details.type == error_type
    assert details.title
    assert details.suggestion
