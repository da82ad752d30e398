"""Figma frame exporter."""

import base64

import httpx
import pybreaker

from uiforge.core import (
    get_logger,
    FigmaExportError,
    FigmaFrameNotFoundError,
    FigmaNotConfiguredError,
)
from .breaker import create_breaker

logger = get_logger(__name__)


class FigmaExporter:
    """
    Renders a Figma frame to a PNG through the Figma images API.
    """

    def __init__(
        self,
        api_key: str = "",
        api_url: str = "https://api.figma.com/v1",
        scale: int = 2,
        timeout: float = 30.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.api_key = api_key
        self.api_url = api_url.rstrip("/")
        self.scale = scale
        self._client = client or httpx.AsyncClient(timeout=timeout, follow_redirects=True)
        self._breaker = create_breaker("figma-api")

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    async def export_frame(self, file_key: str, node_id: str) -> str:
        """
        Export a frame as a base64 encoded PNG.

        Args:
            file_key: Figma file key
            node_id: Frame node id (already percent-decoded)

        Returns:
            Base64 PNG data

        Raises:
            FigmaNotConfiguredError: No access token configured
            FigmaFrameNotFoundError: The node has no rendered image
            FigmaExportError: API or image download failure
        """
        if not self.is_configured:
            raise FigmaNotConfiguredError(
                "This app is not configured to use the Figma API. A FIGMA_API_KEY is missing."
            )

        try:
            with self._breaker.calling():
                image_url = await self._resolve_image_url(file_key, node_id)
                image_response = await self._client.get(image_url)
        except pybreaker.CircuitBreakerError as e:
            logger.error("figma_export_failed", error="Circuit breaker open")
            raise FigmaExportError("Figma API is temporarily unavailable.") from e
        except httpx.HTTPError as e:
            logger.warning("figma_http_error", error=str(e))
            raise FigmaExportError(f"Failed to reach the Figma API: {e}") from e

        if not image_response.is_success:
            raise FigmaExportError(
                f"Failed to fetch the Figma image from its URL ({image_response.status_code})."
            )

        logger.info("figma_frame_exported", file_key=file_key, node_id=node_id)
        return base64.b64encode(image_response.content).decode("ascii")

    async def _resolve_image_url(self, file_key: str, node_id: str) -> str:
        response = await self._client.get(
            f"{self.api_url}/images/{file_key}",
            params={"ids": node_id, "format": "png", "scale": self.scale},
            headers={"X-Figma-Token": self.api_key},
        )
        body = _json_object(response)

        if not response.is_success:
            detail = body.get("err") if body else None
            raise FigmaExportError(
                f"Figma API error ({response.status_code}): {detail or 'Failed to get image URL'}"
            )

        if body is None:
            logger.warning("figma_unexpected_body", status=response.status_code)
            raise FigmaExportError("Figma API returned an unreadable response.")

        images = body.get("images")
        image_url = images.get(node_id) if isinstance(images, dict) else None
        if not image_url:
            raise FigmaFrameNotFoundError(
                "Could not find the specified frame (node-id) in the Figma file. "
                "Please make sure the link points to a specific frame."
            )
        return image_url

    async def aclose(self) -> None:
        """Close HTTP client"""
        await self._client.aclose()


def _json_object(response: httpx.Response) -> dict | None:
    """Decode a JSON object body, or None for anything else."""
    try:
        body = response.json()
    except ValueError:
        return None
    return body if isinstance(body, dict) else None
