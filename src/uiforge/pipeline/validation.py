"""Submission validation (Result pattern)."""

import re
from dataclasses import dataclass

from returns.result import Failure, Result, Success

from uiforge.core import UIForgeError
from uiforge.models import OutputMode
from .acquisition import FIGMA_URL_PATTERN

URL_PATTERN = re.compile(r"^(https?://)?([\w.-]+)\.([a-z]{2,6}\.?)(/[\w.-]*)*/?$", re.IGNORECASE)

_EMPTY_PROMPT_MESSAGES = {
    OutputMode.CLONE: "Please describe your desired changes.",
    OutputMode.REFACTOR: "Please paste your code to refactor.",
}


@dataclass(frozen=True)
class ValidationResult:
    """Validation error with details (for Result pattern)."""

    message: str
    field: str | None = None


@dataclass(frozen=True)
class Submission:
    """A prompt that passed validation."""

    prompt: str
    output_mode: OutputMode
    clone_url: str | None = None


class SubmissionError(UIForgeError):
    """Submission rejected before any round was created."""

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.field = field


def is_valid_clone_url(url: str) -> bool:
    """Generic web URL or a Figma frame link."""
    return bool(URL_PATTERN.match(url) or FIGMA_URL_PATTERN.search(url))


def validate_submission(
    prompt: str, output_mode: OutputMode, clone_url: str | None = None
) -> Result[Submission, ValidationResult]:
    """
    Validate a submission.

    Args:
        prompt: Raw user prompt
        output_mode: Selected output mode
        clone_url: Page URL or Figma link (clone mode only)

    Returns:
        Success(Submission) or Failure(ValidationResult)
    """
    if not (prompt or "").strip():
        message = _EMPTY_PROMPT_MESSAGES.get(output_mode, "Please enter a prompt.")
        return Failure(ValidationResult(message, field="prompt"))

    if output_mode != OutputMode.CLONE:
        return Success(Submission(prompt=prompt, output_mode=output_mode))

    url = (clone_url or "").strip()
    if not url:
        return Failure(
            ValidationResult("Please enter a URL to clone or a Figma link.", field="clone_url")
        )
    if not is_valid_clone_url(url):
        return Failure(ValidationResult("Please enter a valid URL or Figma link.", field="clone_url"))

    return Success(Submission(prompt=prompt, output_mode=output_mode, clone_url=url))
