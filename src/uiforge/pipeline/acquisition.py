"""
Source acquisition: resolve the payload a round sends to every output.

Runs once per round. Plain modes only wrap the user text. Clone mode first
fetches the target page or renders the linked Figma frame; any failure there
is raised as SourceAcquisitionError and no generation is attempted.
"""

import re
from dataclasses import dataclass
from urllib.parse import unquote

from uiforge.clients import FigmaExporter, PageFetcher
from uiforge.core import get_logger
from uiforge.models import ImagePart, MultiPartPrompt, OutputMode, Prompt, TextPart

logger = get_logger(__name__)

FIGMA_URL_PATTERN = re.compile(r"figma\.com/(?:file|design)/([^/]+)/.*?[?&]node-id=([^&]+)")


@dataclass(frozen=True)
class FigmaLink:
    file_key: str
    node_id: str


def parse_figma_link(url: str | None) -> FigmaLink | None:
    """Extract file key and node id from a Figma frame link."""
    if not url:
        return None
    match = FIGMA_URL_PATTERN.search(url)
    if not match:
        return None
    return FigmaLink(file_key=match.group(1), node_id=unquote(match.group(2)))


# ============================================================================
# Prompt templates
# ============================================================================


def refactor_prompt(code: str) -> str:
    return (
        "Please redesign and refactor the following frontend code to be more modern, "
        f"responsive, and aesthetically pleasing. Here is the code:\n\n```html\n{code}\n```"
    )


def clone_page_prompt(instruction: str, html: str) -> str:
    return (
        "Based on the following user instruction, refactor the provided HTML code. \n\n"
        f"USER INSTRUCTION:\n{instruction}\n\nORIGINAL HTML CODE:\n```html\n{html}\n```"
    )


def clone_figma_prompt(instruction: str) -> str:
    return (
        "Based on the user instruction, create a single, self-contained, responsive HTML file "
        f"from the provided Figma design image.\n\nUSER INSTRUCTION:\n{instruction}"
    )


def round_prompt(prompt: str, output_mode: OutputMode, clone_url: str | None = None) -> str:
    """Text recorded on the Round, describing what was asked."""
    if output_mode != OutputMode.CLONE:
        return prompt
    if parse_figma_link(clone_url):
        return f"Clone from Figma: {clone_url}\nChange: {prompt}"
    return f"Clone: {clone_url}\nChange: {prompt}"


class SourceAcquisition:
    """Resolves a round's effective generation payload."""

    def __init__(self, page_fetcher: PageFetcher, figma_exporter: FigmaExporter) -> None:
        self.page_fetcher = page_fetcher
        self.figma_exporter = figma_exporter

    async def resolve(
        self, prompt: str, output_mode: OutputMode, clone_url: str | None = None
    ) -> Prompt:
        """
        Build the payload for a round.

        Raises:
            SourceAcquisitionError: Page fetch or Figma export failed
        """
        if output_mode != OutputMode.CLONE:
            if output_mode == OutputMode.REFACTOR:
                return refactor_prompt(prompt)
            return prompt

        figma = parse_figma_link(clone_url)
        if figma:
            logger.info("figma_export_start", file_key=figma.file_key, node_id=figma.node_id)
            image = await self.figma_exporter.export_frame(figma.file_key, figma.node_id)
            return MultiPartPrompt(
                parts=(
                    ImagePart(mime_type="image/png", data=image),
                    TextPart(text=clone_figma_prompt(prompt)),
                )
            )

        html = await self.page_fetcher.fetch_page(clone_url or "")
        return clone_page_prompt(prompt, html)

    def failure_message(self, clone_url: str | None, error: Exception) -> str:
        """Diagnostic written into every output when acquisition fails."""
        if parse_figma_link(clone_url):
            return f"Failed to process Figma link.\n\nError: {error}"
        return f"Failed to fetch URL: {clone_url}\n\nError: {error}"
