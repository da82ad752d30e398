"""Generation client with per-attempt timeout and exponential backoff."""

import asyncio
import random
import time
from collections.abc import Awaitable, Callable

from uiforge.clients import GenerationBackend
from uiforge.core import (
    get_logger,
    ClassifiedError,
    ErrorType,
    GenerationTimeoutError,
    MalformedResponseError,
    classify_error,
    describe_error,
)
from uiforge.models import GenerationRequest, GenerationResult
from uiforge.monitoring import metrics_collector

logger = get_logger(__name__)

# A bad credential cannot heal between attempts
FATAL_ERROR_TYPES = frozenset({ErrorType.AUTH})


class RetryingGenerationClient:
    """
    Performs one generation with bounded latency and bounded retry.

    Each attempt races the backend call against ``timeout``. A timeout counts
    as a failed attempt. Failures sleep ``base_delay * 2**attempt`` plus up to
    ``max_jitter`` seconds of jitter before the next attempt. After the last
    attempt the failure is classified and raised as ClassifiedError.
    """

    def __init__(
        self,
        backend: GenerationBackend,
        max_attempts: int = 5,
        timeout: float = 193.333,
        base_delay: float = 1.233,
        max_jitter: float = 1.0,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        rng: Callable[[], float] = random.random,
    ) -> None:
        if max_attempts <= 0:
            raise ValueError("max_attempts must be positive")

        self.backend = backend
        self.max_attempts = max_attempts
        self.timeout = timeout
        self.base_delay = base_delay
        self.max_jitter = max_jitter
        self._sleep = sleep
        self._rng = rng

    def backoff_delay(self, attempt: int) -> float:
        """Delay before retrying after the given zero-based attempt."""
        return self.base_delay * (2**attempt) + self._rng() * self.max_jitter

    async def generate(self, request: GenerationRequest) -> GenerationResult:
        """
        Generate text, retrying failed attempts.

        Args:
            request: Backend request

        Returns:
            GenerationResult with the raw text

        Raises:
            ClassifiedError: After the final attempt fails, or on a fatal error
        """
        model = request.backend_model_id
        started = time.monotonic()

        for attempt in range(self.max_attempts):
            try:
                text, grounding = await self._attempt(request)
            except Exception as e:
                error_type = classify_error(e)
                metrics_collector.record_attempt(model, error_type.value)
                logger.warning(
                    "attempt_failed",
                    model=model,
                    attempt=attempt + 1,
                    max_attempts=self.max_attempts,
                    error_type=error_type.value,
                    error=str(e),
                )

                last_attempt = attempt == self.max_attempts - 1
                if last_attempt or error_type in FATAL_ERROR_TYPES:
                    raise ClassifiedError(
                        describe_error(error_type),
                        str(e) or type(e).__name__,
                        attempts=attempt + 1,
                    ) from e

                await self._sleep(self.backoff_delay(attempt))
                continue

            metrics_collector.record_attempt(model, "success")
            return GenerationResult(
                text=text,
                grounding_chunks=grounding,
                attempts=attempt + 1,
                duration=time.monotonic() - started,
            )

        # Unreachable: the loop either returns or raises
        raise ClassifiedError(describe_error(ErrorType.UNKNOWN), "Generation failed after all retries.")

    async def _attempt(self, request: GenerationRequest):
        try:
            response = await asyncio.wait_for(self.backend.generate(request), timeout=self.timeout)
        except asyncio.TimeoutError as e:
            raise GenerationTimeoutError("Request timed out") from e

        if response is None or not isinstance(response.text, str):
            raise MalformedResponseError(
                "Invalid response from API. Response did not contain a text property."
            )
        return response.text, response.grounding_chunks
