"""Dependency Injection Container."""

from injector import Injector, Module, provider, singleton

from uiforge.clients import FigmaExporter, GeminiBackend, PageFetcher
from uiforge.models import PlaygroundOptions
from uiforge.pipeline import (
    EditSessionManager,
    FeedStore,
    RateLimitedInvoker,
    RetryingGenerationClient,
    RoundOrchestrator,
    SourceAcquisition,
)
from .config import Settings, get_settings
from .logging_config import configure_logging


class CoreModule(Module):
    """Core dependencies."""

    def __init__(self, settings: Settings | None = None) -> None:
        self.settings = settings or get_settings()

    @singleton
    @provider
    def provide_settings(self) -> Settings:
        return self.settings

    @singleton
    @provider
    def provide_options(self) -> PlaygroundOptions:
        """Provide shared playground options seeded from settings."""
        return PlaygroundOptions(
            batch_size=self.settings.default_batch_size,
            temperature=self.settings.default_temperature,
        )

    @singleton
    @provider
    def provide_store(self) -> FeedStore:
        return FeedStore()

    @singleton
    @provider
    def provide_invoker(self) -> RateLimitedInvoker:
        """Provide the process-wide generation limiter."""
        return RateLimitedInvoker(limit=self.settings.max_concurrency)

    @singleton
    @provider
    def provide_backend(self) -> GeminiBackend:
        return GeminiBackend(api_key=self.settings.gemini_api_key)

    @singleton
    @provider
    def provide_client(self, backend: GeminiBackend) -> RetryingGenerationClient:
        return RetryingGenerationClient(
            backend,
            max_attempts=self.settings.max_attempts,
            timeout=self.settings.request_timeout,
            base_delay=self.settings.base_delay,
            max_jitter=self.settings.max_jitter,
        )

    @singleton
    @provider
    def provide_page_fetcher(self) -> PageFetcher:
        return PageFetcher(
            proxy_url=self.settings.page_proxy_url, timeout=self.settings.page_fetch_timeout
        )

    @singleton
    @provider
    def provide_figma_exporter(self) -> FigmaExporter:
        return FigmaExporter(
            api_key=self.settings.figma_api_key,
            api_url=self.settings.figma_api_url,
            scale=self.settings.figma_scale,
            timeout=self.settings.page_fetch_timeout,
        )

    @singleton
    @provider
    def provide_acquisition(
        self, page_fetcher: PageFetcher, figma_exporter: FigmaExporter
    ) -> SourceAcquisition:
        return SourceAcquisition(page_fetcher, figma_exporter)

    @singleton
    @provider
    def provide_orchestrator(
        self,
        store: FeedStore,
        client: RetryingGenerationClient,
        invoker: RateLimitedInvoker,
        acquisition: SourceAcquisition,
        options: PlaygroundOptions,
    ) -> RoundOrchestrator:
        """Provide the round orchestrator with all dependencies."""
        return RoundOrchestrator(store, client, invoker, acquisition, options=options)

    @singleton
    @provider
    def provide_edit_sessions(
        self,
        store: FeedStore,
        client: RetryingGenerationClient,
        invoker: RateLimitedInvoker,
        options: PlaygroundOptions,
    ) -> EditSessionManager:
        return EditSessionManager(
            store, client, invoker, options=options, edit_model=self.settings.edit_model
        )


def create_container(settings: Settings | None = None) -> Injector:
    """Configure logging and create the injector."""
    settings = settings or get_settings()
    configure_logging(settings.log_level, settings.json_logs)
    return Injector([CoreModule(settings)])
