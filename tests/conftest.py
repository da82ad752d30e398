"""Pytest configuration and fixtures."""

import os
import asyncio
from collections.abc import Awaitable, Callable

import pytest

from uiforge.clients import FigmaExporter, PageFetcher
from uiforge.core import Settings
from uiforge.models import GenerationRequest, GenerationResponse, PlaygroundOptions
from uiforge.pipeline import (
    EditSessionManager,
    FeedStore,
    RateLimitedInvoker,
    RetryingGenerationClient,
    RoundOrchestrator,
    SourceAcquisition,
)


PROXY_URL = "https://proxy.test/raw"
FIGMA_API_URL = "https://figma.test/v1"


# ============================================================================
# Pytest Hooks
# ============================================================================

def pytest_configure(config):
    """Configure pytest with environment variables."""
    os.environ["UIFORGE_LOG_LEVEL"] = "DEBUG"
    os.environ["UIFORGE_GEMINI_API_KEY"] = "test-api-key"


# ============================================================================
# Test Doubles
# ============================================================================

class FakeBackend:
    """
    Scripted generation backend.

    ``outcomes`` is consumed one item per call: a string becomes a successful
    response, a GenerationResponse is returned as-is, an exception is raised.
    When exhausted the last outcome repeats. ``handler`` overrides scripting.
    """

    def __init__(
        self,
        outcomes: list | None = None,
        handler: Callable[[GenerationRequest], Awaitable[GenerationResponse]] | None = None,
    ) -> None:
        self.outcomes = list(outcomes or ["<div>ok</div>"])
        self.handler = handler
        self.calls: list[GenerationRequest] = []

    async def generate(self, request: GenerationRequest) -> GenerationResponse:
        self.calls.append(request)
        if self.handler is not None:
            return await self.handler(request)

        outcome = self.outcomes.pop(0) if len(self.outcomes) > 1 else self.outcomes[0]
        await asyncio.sleep(0)
        if isinstance(outcome, BaseException):
            raise outcome
        if isinstance(outcome, GenerationResponse):
            return outcome
        return GenerationResponse(text=outcome)


class RecordingSleep:
    """Replacement for asyncio.sleep that records delays without waiting."""

    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)
        await asyncio.sleep(0)


# ============================================================================
# Core Fixtures
# ============================================================================

@pytest.fixture
def settings():
    """Test settings."""
    return Settings(
        gemini_api_key="test-api-key",
        figma_api_key="test-figma-token",
        page_proxy_url=PROXY_URL,
        figma_api_url=FIGMA_API_URL,
    )


@pytest.fixture
def fake_backend():
    return FakeBackend()


@pytest.fixture
def recording_sleep():
    return RecordingSleep()


@pytest.fixture
def client(fake_backend, recording_sleep):
    """Retrying client over the fake backend with instant backoff."""
    return RetryingGenerationClient(
        fake_backend,
        max_attempts=5,
        timeout=1.0,
        base_delay=1.233,
        max_jitter=1.0,
        sleep=recording_sleep,
        rng=lambda: 0.5,
    )


@pytest.fixture
def invoker():
    return RateLimitedInvoker(limit=9)


@pytest.fixture
def store():
    return FeedStore()


@pytest.fixture
def options():
    return PlaygroundOptions()


# ============================================================================
# Source Acquisition Fixtures
# ============================================================================

@pytest.fixture
def page_fetcher():
    return PageFetcher(proxy_url=PROXY_URL, timeout=5.0)


@pytest.fixture
def figma_exporter():
    return FigmaExporter(api_key="test-figma-token", api_url=FIGMA_API_URL)


@pytest.fixture
def unconfigured_figma_exporter():
    return FigmaExporter(api_key="", api_url=FIGMA_API_URL)


@pytest.fixture
def acquisition(page_fetcher, figma_exporter):
    return SourceAcquisition(page_fetcher, figma_exporter)


# ============================================================================
# Pipeline Fixtures
# ============================================================================

@pytest.fixture
def orchestrator(store, client, invoker, acquisition, options):
    return RoundOrchestrator(store, client, invoker, acquisition, options=options)


@pytest.fixture
def edit_sessions(store, client, invoker, options):
    return EditSessionManager(store, client, invoker, options=options)
