"""Generation request and response types exchanged with the backend."""

from dataclasses import dataclass
from typing import Union

from .feed import GroundingChunk


@dataclass(frozen=True)
class TextPart:
    text: str


@dataclass(frozen=True)
class ImagePart:
    """Inline image, base64 encoded."""

    mime_type: str
    data: str


@dataclass(frozen=True)
class MultiPartPrompt:
    """Ordered prompt parts, e.g. a rendered design frame followed by instructions."""

    parts: tuple[Union[TextPart, ImagePart], ...]


Prompt = Union[str, MultiPartPrompt]


@dataclass(frozen=True)
class GenerationRequest:
    """One call to the generation backend."""

    backend_model_id: str
    prompt: Prompt
    system_instruction: str | None = None
    temperature: float = 0.9
    thinking_enabled: bool = False
    thinking_capable: bool = False
    use_retrieval: bool = False


@dataclass(frozen=True)
class GenerationResponse:
    """Raw backend reply. ``text`` is None when the backend produced no payload."""

    text: str | None
    grounding_chunks: list[GroundingChunk] | None = None


@dataclass(frozen=True)
class GenerationResult:
    """Validated successful generation."""

    text: str
    grounding_chunks: list[GroundingChunk] | None = None
    attempts: int = 1
    duration: float = 0.0
