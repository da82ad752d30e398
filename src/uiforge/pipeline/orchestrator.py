"""
Round orchestration: from "user pressed generate" to "all outputs settled".

A submission becomes a Round with N pending Outputs that is published to the
feed before any network activity. The shared source is then resolved once and
every Output is generated independently through the rate-limited, retrying
client. Results are written back by (round id, output id).
"""

import asyncio
import time

from returns.result import Failure

from uiforge.core import (
    get_logger,
    ClassifiedError,
    ErrorDetails,
    LogContext,
    SourceAcquisitionError,
    classify_error,
    describe_error,
    strip_code_fences,
)
from uiforge.models import (
    MODELS,
    GenerationRequest,
    ModelDescriptor,
    Output,
    OutputMode,
    PlaygroundOptions,
    Prompt,
    Round,
    get_mode,
)
from uiforge.monitoring import metrics_collector
from .acquisition import SourceAcquisition, round_prompt
from .limiter import RateLimitedInvoker
from .retry import RetryingGenerationClient
from .store import FeedStore
from .validation import Submission, SubmissionError, validate_submission

logger = get_logger(__name__)


class RoundOrchestrator:
    """Builds rounds, publishes them and drives their outputs to settlement."""

    def __init__(
        self,
        store: FeedStore,
        client: RetryingGenerationClient,
        invoker: RateLimitedInvoker,
        acquisition: SourceAcquisition,
        options: PlaygroundOptions | None = None,
        models: dict[str, ModelDescriptor] | None = None,
    ) -> None:
        self.store = store
        self.client = client
        self.invoker = invoker
        self.acquisition = acquisition
        self.options = options or PlaygroundOptions()
        self.models = models or MODELS
        self._background: set[asyncio.Task] = set()

    # ========================================================================
    # Option setters
    # ========================================================================

    def set_output_mode(self, mode: OutputMode | str) -> None:
        self.options.output_mode = OutputMode(mode)

    def set_batch_mode(self, active: bool) -> None:
        self.options.batch_mode = active

    def set_batch_size(self, size: int) -> None:
        self.options.batch_size = size

    def set_batch_model(self, model: str) -> None:
        self.options.batch_model = model

    def set_versus_model(self, model: str, active: bool) -> None:
        self.options.versus_models = {**self.options.versus_models, model: active}

    def set_temperature(self, temperature: float) -> None:
        self.options.temperature = temperature

    # ========================================================================
    # Feed operations
    # ========================================================================

    def remove_round(self, round_id: str) -> bool:
        """Delete a round. Its in-flight generations keep running."""
        removed = self.store.remove(round_id)
        if removed:
            logger.info("round_removed", round_id=round_id)
        return removed

    def reset(self) -> None:
        self.store.reset()
        logger.info("feed_reset")

    # ========================================================================
    # Submission
    # ========================================================================

    def build_round(
        self, prompt: str, clone_url: str | None = None
    ) -> tuple[Round, Submission] | None:
        """
        Validate a submission and build its pending Round.

        Returns:
            (round, submission), or None when versus mode has no enabled models

        Raises:
            SubmissionError: Validation failed; no round is created
        """
        options = self.options
        result = validate_submission(prompt, options.output_mode, clone_url)
        if isinstance(result, Failure):
            failure = result.failure()
            logger.info("submission_rejected", field=failure.field, reason=failure.message)
            raise SubmissionError(failure.message, field=failure.field)
        submission = result.unwrap()

        if options.batch_mode:
            outputs = tuple(
                Output(model=options.batch_model, output_mode=options.output_mode, is_batch=True)
                for _ in range(options.batch_size)
            )
        else:
            enabled = options.enabled_models
            if not enabled:
                logger.info("submission_skipped", reason="no_models_selected")
                return None
            outputs = tuple(Output(model=key, output_mode=options.output_mode) for key in enabled)

        round_ = Round(
            prompt=round_prompt(submission.prompt, submission.output_mode, submission.clone_url),
            system_instruction=get_mode(submission.output_mode).system_instruction,
            output_mode=submission.output_mode,
            outputs=outputs,
        )
        return round_, submission

    async def submit(self, prompt: str, clone_url: str | None = None) -> Round | None:
        """
        Submit a prompt and wait until every output has settled.

        Returns:
            The published Round, or None when nothing was run
        """
        built = self._publish(prompt, clone_url)
        if built is None:
            return None
        round_, submission = built
        await self._run_round(round_, submission, self.options.temperature, self.options.use_grounding)
        return round_

    def submit_nowait(self, prompt: str, clone_url: str | None = None) -> Round | None:
        """
        Publish a round and run it in the background.

        Must be called from a running event loop. The round is already in the
        feed, with every output pending, when this returns.
        """
        built = self._publish(prompt, clone_url)
        if built is None:
            return None
        round_, submission = built
        task = asyncio.ensure_future(
            self._run_round(round_, submission, self.options.temperature, self.options.use_grounding)
        )
        self._background.add(task)
        task.add_done_callback(self._background.discard)
        return round_

    async def drain(self) -> None:
        """Wait for every background round to finish."""
        while self._background:
            await asyncio.gather(*list(self._background))

    def _publish(self, prompt: str, clone_url: str | None) -> tuple[Round, Submission] | None:
        built = self.build_round(prompt, clone_url)
        if built is None:
            return None
        round_, _ = built
        self.store.prepend(round_)
        metrics_collector.record_round(round_.output_mode.value)
        logger.info(
            "round_published",
            round_id=round_.id,
            mode=round_.output_mode.value,
            outputs=len(round_.outputs),
            batch=round_.outputs[0].is_batch,
        )
        return built

    # ========================================================================
    # Execution
    # ========================================================================

    async def _run_round(
        self, round_: Round, submission: Submission, temperature: float, use_grounding: bool
    ) -> None:
        with LogContext(round_id=round_.id):
            try:
                payload = await self.acquisition.resolve(
                    submission.prompt, submission.output_mode, submission.clone_url
                )
            except SourceAcquisitionError as e:
                self._fail_round(round_, submission, e, describe_error(e.error_type))
                return
            except Exception as e:
                logger.error("source_acquisition_crashed", error=str(e), exc_info=True)
                self._fail_round(round_, submission, e, describe_error(classify_error(e)))
                return

            await asyncio.gather(
                *(
                    self._generate_output(round_, output, payload, temperature, use_grounding)
                    for output in round_.outputs
                )
            )
            logger.info("round_settled", outputs=len(round_.outputs))

    def _fail_round(
        self, round_: Round, submission: Submission, error: Exception, details: ErrorDetails
    ) -> None:
        message = self.acquisition.failure_message(submission.clone_url, error)
        metrics_collector.record_source_failure(details.type.value)
        logger.error("source_acquisition_failed", error_type=details.type.value, error=str(error))

        now = time.time()

        def fail_all(target: Round) -> None:
            for output in target.outputs:
                if output.is_busy:
                    output.fail(message, details, now=now)

        self.store.update_round(round_.id, fail_all)

    async def _generate_output(
        self,
        round_: Round,
        output: Output,
        payload: Prompt,
        temperature: float,
        use_grounding: bool,
    ) -> None:
        try:
            model = self.models[output.model]
            request = GenerationRequest(
                backend_model_id=model.model_string,
                prompt=payload,
                system_instruction=round_.system_instruction,
                temperature=temperature,
                thinking_enabled=model.thinking,
                thinking_capable=model.thinking_capable,
                use_retrieval=use_grounding,
            )
            result = await self.invoker.schedule(lambda: self.client.generate(request))
        except ClassifiedError as e:
            self._settle_failure(round_.id, output, e.details, e.message)
            return
        except Exception as e:
            logger.error("generation_crashed", output_id=output.id, error=str(e), exc_info=True)
            self._settle_failure(round_.id, output, describe_error(classify_error(e)), str(e))
            return

        text = strip_code_fences(result.text)

        def succeed(target: Output) -> None:
            target.succeed(text, result.grounding_chunks)

        written = self.store.update_output(round_.id, output.id, succeed)
        metrics_collector.record_output(output.model, "success", result.duration)
        logger.info(
            "output_settled",
            output_id=output.id,
            model=output.model,
            status="success",
            attempts=result.attempts,
            written=written,
        )

    def _settle_failure(
        self, round_id: str, output: Output, details: ErrorDetails, message: str
    ) -> None:
        def fail(target: Output) -> None:
            target.fail(message, details)

        written = self.store.update_output(round_id, output.id, fail)
        metrics_collector.record_output(output.model, "error", time.time() - output.start_time)
        logger.warning(
            "output_settled",
            output_id=output.id,
            model=output.model,
            status="error",
            error_type=details.type.value,
            written=written,
        )
