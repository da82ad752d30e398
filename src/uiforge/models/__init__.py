"""
Models package - catalogs, options and feed records.
"""

from .config import ModelDescriptor, MODELS, get_model
from .modes import OutputMode, ModeDefinition, Preset, MODES, get_mode
from .options import PlaygroundOptions, MIN_BATCH_SIZE, MAX_BATCH_SIZE
from .feed import Round, Output, GroundingChunk
from .requests import (
    TextPart,
    ImagePart,
    MultiPartPrompt,
    Prompt,
    GenerationRequest,
    GenerationResponse,
    GenerationResult,
)

__all__ = [
    "ModelDescriptor",
    "MODELS",
    "get_model",
    "OutputMode",
    "ModeDefinition",
    "Preset",
    "MODES",
    "get_mode",
    "PlaygroundOptions",
    "MIN_BATCH_SIZE",
    "MAX_BATCH_SIZE",
    "Round",
    "Output",
    "GroundingChunk",
    "TextPart",
    "ImagePart",
    "MultiPartPrompt",
    "Prompt",
    "GenerationRequest",
    "GenerationResponse",
    "GenerationResult",
]
