"""Gemini generation backend (google-genai async client)."""

import base64
from typing import Any, Protocol

from google import genai
from google.genai import types

from uiforge.core import get_logger, SafetyBlockError
from uiforge.models import (
    GenerationRequest,
    GenerationResponse,
    GroundingChunk,
    ImagePart,
    MultiPartPrompt,
    TextPart,
)


logger = get_logger(__name__)


class GenerationBackend(Protocol):
    """Anything that can turn a request into a raw response."""

    async def generate(self, request: GenerationRequest) -> GenerationResponse:
        ...


# Permissive filtering: never block on the default harm categories
SAFETY_SETTINGS = [
    types.SafetySetting(category=category, threshold=types.HarmBlockThreshold.BLOCK_NONE)
    for category in (
        types.HarmCategory.HARM_CATEGORY_HATE_SPEECH,
        types.HarmCategory.HARM_CATEGORY_SEXUALLY_EXPLICIT,
        types.HarmCategory.HARM_CATEGORY_DANGEROUS_CONTENT,
        types.HarmCategory.HARM_CATEGORY_HARASSMENT,
    )
]


def build_config(request: GenerationRequest) -> types.GenerateContentConfig:
    """
    Build the per-call generation config.

    Thinking-capable models running with thinking off get a zero thinking
    budget. Models without thinking support never receive a thinking config.
    """
    kwargs: dict[str, Any] = {
        "safety_settings": SAFETY_SETTINGS,
        "temperature": request.temperature,
    }
    if request.system_instruction:
        kwargs["system_instruction"] = request.system_instruction
    if request.use_retrieval:
        kwargs["tools"] = [types.Tool(google_search=types.GoogleSearch())]
    if request.thinking_capable and not request.thinking_enabled:
        kwargs["thinking_config"] = types.ThinkingConfig(thinking_budget=0)
    return types.GenerateContentConfig(**kwargs)


def build_contents(prompt: str | MultiPartPrompt) -> str | list[types.Part]:
    """Convert a prompt into google-genai contents."""
    if isinstance(prompt, str):
        return prompt

    parts: list[types.Part] = []
    for part in prompt.parts:
        if isinstance(part, ImagePart):
            parts.append(
                types.Part.from_bytes(data=base64.b64decode(part.data), mime_type=part.mime_type)
            )
        elif isinstance(part, TextPart):
            parts.append(types.Part.from_text(text=part.text))
    return parts


def extract_grounding(response: Any) -> list[GroundingChunk] | None:
    """Pull web citations from the first candidate, if any."""
    candidates = getattr(response, "candidates", None) or []
    if not candidates:
        return None
    metadata = getattr(candidates[0], "grounding_metadata", None)
    chunks = getattr(metadata, "grounding_chunks", None) if metadata else None
    if not chunks:
        return None

    result = []
    for chunk in chunks:
        web = getattr(chunk, "web", None)
        if web is not None and getattr(web, "uri", None):
            result.append(GroundingChunk(uri=web.uri, title=getattr(web, "title", None)))
    return result or None


def _check_blocked(response: Any) -> None:
    """Raise SafetyBlockError when the reply was withheld by content policy."""
    feedback = getattr(response, "prompt_feedback", None)
    block_reason = getattr(feedback, "block_reason", None) if feedback else None
    if block_reason:
        raise SafetyBlockError(f"Prompt blocked by safety filters: {block_reason}")

    candidates = getattr(response, "candidates", None) or []
    if candidates and getattr(candidates[0], "finish_reason", None) == types.FinishReason.SAFETY:
        raise SafetyBlockError("Response blocked by safety filters")


class GeminiBackend:
    """Gemini API wrapper for one-shot generation."""

    def __init__(self, api_key: str | None = None, client: genai.Client | None = None) -> None:
        self.api_key = api_key
        self._client = client

    @property
    def client(self) -> genai.Client:
        # Created lazily so a missing key fails the output, not startup
        if self._client is None:
            self._client = genai.Client(api_key=self.api_key or None)
        return self._client

    async def generate(self, request: GenerationRequest) -> GenerationResponse:
        """Run a single generation call."""
        response = await self.client.aio.models.generate_content(
            model=request.backend_model_id,
            contents=build_contents(request.prompt),
            config=build_config(request),
        )

        text = getattr(response, "text", None)
        if not isinstance(text, str):
            _check_blocked(response)
            logger.warning("unexpected_response", model=request.backend_model_id)
            return GenerationResponse(text=None)

        return GenerationResponse(text=text, grounding_chunks=extract_grounding(response))
