"""
Live editing of one Output's content, with AI chat-instructed rewrites.

At most one session exists at a time. Starting a new one replaces the old
(last write wins). Saving writes the working copy back by id and tolerates
the target having been deleted in the meantime.
"""

from dataclasses import dataclass

from uiforge.core import (
    get_logger,
    ClassifiedError,
    ErrorDetails,
    describe_error,
    classify_error,
    strip_code_fences,
)
from uiforge.models import MODELS, GenerationRequest, ModelDescriptor, Output, PlaygroundOptions
from uiforge.monitoring import metrics_collector
from .limiter import RateLimitedInvoker
from .retry import RetryingGenerationClient
from .store import FeedStore

logger = get_logger(__name__)

EDIT_SYSTEM_INSTRUCTION = (
    "You are an elite frontend developer AI assistant. Your task is to modify a "
    "self-contained HTML file based on user instructions. The user will provide the current "
    "code and a command. You must apply the change and return only the complete, updated, raw "
    "HTML code. Do not add any explanations or markdown formatting around the code."
)


def edit_prompt(code: str, instruction: str) -> str:
    return (
        f"I need to modify the following HTML code.\n\nCURRENT CODE:\n```html\n{code}\n```\n\n"
        f"MODIFICATION INSTRUCTION:\n{instruction}\n\n"
        "Return the full HTML file with the modification."
    )


@dataclass
class EditSession:
    """Working copy of one Output's content."""

    round_id: str
    output_id: str
    code: str
    is_editing_busy: bool = False
    last_error: ErrorDetails | None = None


class EditSessionManager:
    """Owns the single optional edit session."""

    def __init__(
        self,
        store: FeedStore,
        client: RetryingGenerationClient,
        invoker: RateLimitedInvoker,
        options: PlaygroundOptions | None = None,
        edit_model: str = "flash",
        models: dict[str, ModelDescriptor] | None = None,
    ) -> None:
        self.store = store
        self.client = client
        self.invoker = invoker
        self.options = options or PlaygroundOptions()
        self.models = models or MODELS
        self.edit_model = self.models[edit_model]
        self._session: EditSession | None = None

    @property
    def session(self) -> EditSession | None:
        return self._session

    @property
    def is_active(self) -> bool:
        return self._session is not None

    def start_editing(self, round_id: str, output_id: str) -> EditSession | None:
        """
        Open a session on an Output, replacing any open session.

        Returns None (and leaves the current session untouched) when the
        Output no longer exists or has no content yet.
        """
        output = self.store.get_output(round_id, output_id)
        if output is None:
            logger.info("edit_target_missing", round_id=round_id, output_id=output_id)
            return None
        if output.is_busy or output.output_data is None:
            logger.info("edit_target_pending", round_id=round_id, output_id=output_id)
            return None

        if self._session is not None:
            logger.info("edit_session_replaced", output_id=self._session.output_id)
        self._session = EditSession(round_id=round_id, output_id=output_id, code=output.output_data)
        logger.info("edit_session_started", round_id=round_id, output_id=output_id)
        return self._session

    def update_code(self, code: str) -> None:
        if self._session is not None:
            self._session.code = code

    async def apply_instruction(self, instruction: str) -> bool:
        """
        Ask the edit model to rewrite the working copy.

        On failure the working copy stays unchanged and the classification is
        kept on ``session.last_error``.

        Returns:
            True if the working copy was replaced
        """
        session = self._session
        if session is None or not session.code or not instruction:
            return False

        session.is_editing_busy = True
        session.last_error = None
        request = GenerationRequest(
            backend_model_id=self.edit_model.model_string,
            prompt=edit_prompt(session.code, instruction),
            system_instruction=EDIT_SYSTEM_INSTRUCTION,
            temperature=self.options.temperature,
            thinking_enabled=self.edit_model.thinking,
            thinking_capable=self.edit_model.thinking_capable,
        )

        try:
            result = await self.invoker.schedule(lambda: self.client.generate(request))
        except ClassifiedError as e:
            logger.error("edit_failed", output_id=session.output_id, error=e.message)
            metrics_collector.record_edit("error")
            session.last_error = e.details
            return False
        except Exception as e:
            logger.error("edit_failed", output_id=session.output_id, error=str(e), exc_info=True)
            metrics_collector.record_edit("error")
            session.last_error = describe_error(classify_error(e))
            return False
        finally:
            session.is_editing_busy = False

        metrics_collector.record_edit("success")
        if self._session is not session:
            logger.info("edit_result_dropped", output_id=session.output_id)
            return False

        session.code = strip_code_fences(result.text)
        return True

    def save_and_close(self) -> bool:
        """
        Write the working copy back and close the session.

        Returns:
            True if the target Output still existed and was updated
        """
        session = self._session
        if session is None:
            return False

        code = session.code

        def write(target: Output) -> None:
            target.output_data = code

        written = self.store.update_output(session.round_id, session.output_id, write)
        self._session = None
        logger.info("edit_session_saved", output_id=session.output_id, written=written)
        return written

    def discard_and_close(self) -> None:
        if self._session is not None:
            logger.info("edit_session_discarded", output_id=self._session.output_id)
        self._session = None
