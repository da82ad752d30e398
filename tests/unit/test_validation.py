"""Tests for submission validation."""

import pytest
from returns.result import Failure, Success

from uiforge.models import OutputMode
from uiforge.pipeline import validate_submission

FIGMA_LINK = "https://www.figma.com/file/AbC123/Landing?node-id=1-2"


@pytest.mark.unit
@pytest.mark.parametrize(
    "mode, message",
    [
        (OutputMode.HTML, "Please enter a prompt."),
        (OutputMode.WIREFRAME, "Please enter a prompt."),
        (OutputMode.REFACTOR, "Please paste your code to refactor."),
        (OutputMode.CLONE, "Please describe your desired changes."),
    ],
)
def test_empty_prompt_rejected(mode, message):
    result = validate_submission("   ", mode, "example.com")

    assert isinstance(result, Failure)
    assert result.failure().message == message
    assert result.failure().field == "prompt"


@pytest.mark.unit
def test_plain_prompt_accepted():
    result = validate_submission("a login form", OutputMode.HTML, "ignored")

    assert isinstance(result, Success)
    submission = result.unwrap()
    assert submission.prompt == "a login form"
    assert submission.clone_url is None


@pytest.mark.unit
def test_clone_requires_url():
    result = validate_submission("make it dark", OutputMode.CLONE, "  ")

    assert result.failure().message == "Please enter a URL to clone or a Figma link."
    assert result.failure().field == "clone_url"


@pytest.mark.unit
@pytest.mark.parametrize("url", ["not a url", "http://", "example", "ftp//example.com"])
def test_clone_rejects_invalid_url(url):
    result = validate_submission("make it dark", OutputMode.CLONE, url)

    assert isinstance(result, Failure)
    assert result.failure().message == "Please enter a valid URL or Figma link."


@pytest.mark.unit
@pytest.mark.parametrize(
    "url",
    ["example.com", "https://example.com/pricing", "http://sub.example.co.uk/a/b/", FIGMA_LINK],
)
def test_clone_accepts_url(url):
    result = validate_submission("make it dark", OutputMode.CLONE, f" {url} ")

    assert isinstance(result, Success)
    assert result.unwrap().clone_url == url
