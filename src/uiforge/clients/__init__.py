"""Adapters for the external capabilities the pipeline consumes."""

from .gemini import GeminiBackend, GenerationBackend, build_config, build_contents
from .page_fetch import PageFetcher, normalize_url
from .figma import FigmaExporter

__all__ = [
    "GeminiBackend",
    "GenerationBackend",
    "build_config",
    "build_contents",
    "PageFetcher",
    "normalize_url",
    "FigmaExporter",
]
