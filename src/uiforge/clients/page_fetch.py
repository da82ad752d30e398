"""Page markup fetcher (through a CORS-bypassing proxy)."""

import httpx
import pybreaker

from uiforge.core import get_logger, PageFetchError
from .breaker import create_breaker

logger = get_logger(__name__)


class PageFetcher:
    """
    Fetches raw page HTML through a fetch proxy with circuit breaker protection.
    """

    def __init__(
        self,
        proxy_url: str = "https://api.allorigins.win/raw",
        timeout: float = 30.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """
        Initialize page fetcher.

        Args:
            proxy_url: Proxy endpoint taking the target as a ``url`` query parameter
            timeout: Request timeout in seconds
            client: Optional preconfigured HTTP client
        """
        self.proxy_url = proxy_url
        self.timeout = timeout
        self._client = client or httpx.AsyncClient(timeout=timeout, follow_redirects=True)
        self._breaker = create_breaker("page-proxy")

    async def fetch_page(self, url: str) -> str:
        """
        Fetch a page's raw markup.

        Args:
            url: Target page URL

        Returns:
            Raw HTML text

        Raises:
            PageFetchError: On transport failure, non-2xx status, or open breaker
        """
        target = normalize_url(url)
        try:
            with self._breaker.calling():
                response = await self._client.get(self.proxy_url, params={"url": target})
                response.raise_for_status()
        except pybreaker.CircuitBreakerError as e:
            logger.error("page_fetch_failed", url=target, error="Circuit breaker open")
            raise PageFetchError("Page proxy is temporarily unavailable.") from e
        except httpx.HTTPStatusError as e:
            logger.warning("page_fetch_http_error", url=target, status=e.response.status_code)
            raise PageFetchError(
                f"Network response was not ok: {e.response.status_code} {e.response.reason_phrase}"
            ) from e
        except httpx.HTTPError as e:
            logger.warning("page_fetch_failed", url=target, error=str(e))
            raise PageFetchError(str(e) or type(e).__name__) from e

        logger.info("page_fetched", url=target, length=len(response.text))
        return response.text

    async def aclose(self) -> None:
        """Close HTTP client"""
        await self._client.aclose()


def normalize_url(url: str) -> str:
    """Add an https scheme to bare host URLs."""
    url = url.strip()
    if not url.lower().startswith(("http://", "https://")):
        return f"https://{url}"
    return url
