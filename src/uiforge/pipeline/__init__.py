"""
Generation pipeline.

RateLimitedInvoker and RetryingGenerationClient are composed by the
RoundOrchestrator; FeedStore is the only shared mutable state.
"""

from .limiter import RateLimitedInvoker
from .retry import RetryingGenerationClient, FATAL_ERROR_TYPES
from .acquisition import SourceAcquisition, FigmaLink, parse_figma_link, round_prompt
from .validation import (
    Submission,
    SubmissionError,
    ValidationResult,
    validate_submission,
    is_valid_clone_url,
)
from .store import FeedStore, FeedEvent, FeedEventKind
from .orchestrator import RoundOrchestrator
from .editing import EditSession, EditSessionManager

__all__ = [
    "RateLimitedInvoker",
    "RetryingGenerationClient",
    "FATAL_ERROR_TYPES",
    "SourceAcquisition",
    "FigmaLink",
    "parse_figma_link",
    "round_prompt",
    "Submission",
    "SubmissionError",
    "ValidationResult",
    "validate_submission",
    "is_valid_clone_url",
    "FeedStore",
    "FeedEvent",
    "FeedEventKind",
    "RoundOrchestrator",
    "EditSession",
    "EditSessionManager",
]
