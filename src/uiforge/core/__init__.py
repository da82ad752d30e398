"""Core utilities and infrastructure."""

from .config import Settings, get_settings
from .logging_config import configure_logging, get_logger, LogContext
from .errors import (
    ErrorType,
    ErrorDetails,
    describe_error,
    classify_error,
    UIForgeError,
    GenerationError,
    GenerationTimeoutError,
    MalformedResponseError,
    SafetyBlockError,
    ClassifiedError,
    SourceAcquisitionError,
    PageFetchError,
    FigmaExportError,
    FigmaNotConfiguredError,
    FigmaFrameNotFoundError,
    OutputStateError,
)
from .id import RoundID, OutputID, new_round_id, new_output_id
from .text import strip_code_fences


def create_container(settings: Settings | None = None):
    """Create dependency injection container (lazy import to avoid circular deps)."""
    from .container import create_container as _create_container

    return _create_container(settings)


__all__ = [
    # Config
    "Settings",
    "get_settings",
    # Logging
    "configure_logging",
    "get_logger",
    "LogContext",
    # Errors
    "ErrorType",
    "ErrorDetails",
    "describe_error",
    "classify_error",
    "UIForgeError",
    "GenerationError",
    "GenerationTimeoutError",
    "MalformedResponseError",
    "SafetyBlockError",
    "ClassifiedError",
    "SourceAcquisitionError",
    "PageFetchError",
    "FigmaExportError",
    "FigmaNotConfiguredError",
    "FigmaFrameNotFoundError",
    "OutputStateError",
    # IDs
    "RoundID",
    "OutputID",
    "new_round_id",
    "new_output_id",
    # Text
    "strip_code_fences",
    # DI
    "create_container",
]
