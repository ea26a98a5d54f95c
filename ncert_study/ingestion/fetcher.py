"""
Fetcher - Downloads documents from the textbook publisher.

Every request carries an explicit timeout. Failures are converted to the
library's error types so callers can tell "upstream said no" (FetchError
with a status code) from "upstream was too slow" (UpstreamTimeoutError).
No retries happen here; retry policy belongs to the caller.
"""

import httpx

from ncert_study.config import PDF_FETCH_TIMEOUT, TEXT_FETCH_TIMEOUT, USER_AGENT
from ncert_study.errors import FetchError, UpstreamTimeoutError
from ncert_study.logger import get_logger

logger = get_logger(__name__)


class Fetcher:
    """
    Thin wrapper around an httpx client for upstream downloads.

    A Fetcher is callable, so it can be passed straight to
    PdfCache.get_or_fetch() as the fetch function.

    Example:
        fetcher = Fetcher()
        data = fetcher.fetch_bytes("https://ncert.nic.in/textbook/pdf/jemh101.pdf")
    """

    def __init__(
        self,
        client: httpx.Client | None = None,
        timeout: float | None = None,
    ):
        """
        Initialize the fetcher.

        Args:
            client: Preconfigured httpx client (tests pass one with a
                MockTransport). A new client is created if not provided.
            timeout: Default timeout in seconds for fetch_bytes()
        """
        self.timeout = timeout or PDF_FETCH_TIMEOUT
        self._client = client or httpx.Client(
            headers={"User-Agent": USER_AGENT},
            follow_redirects=True,
        )

    def _get(self, url: str, timeout: float) -> httpx.Response:
        try:
            response = self._client.get(url, timeout=timeout)
        except httpx.TimeoutException as e:
            logger.warning("Timed out after %ss fetching %s", timeout, url)
            raise UpstreamTimeoutError(url, timeout) from e
        except httpx.HTTPError as e:
            logger.warning("Network error fetching %s: %s", url, e)
            raise FetchError(url, None, f"Network error fetching {url}: {e}") from e
        except httpx.InvalidURL as e:
            logger.warning("Invalid upstream URL %s: %s", url, e)
            raise FetchError(url, None, f"Invalid URL {url}: {e}") from e

        if not response.is_success:
            logger.warning("Upstream returned %s for %s", response.status_code, url)
            raise FetchError(url, response.status_code)

        return response

    def fetch_bytes(self, url: str, timeout: float | None = None) -> bytes:
        """
        Download a binary document.

        Raises:
            FetchError: On a non-2xx response, a transport failure or an
                unusable URL
            UpstreamTimeoutError: When the timeout elapses
        """
        return self._get(url, timeout or self.timeout).content

    def fetch_text(self, url: str, timeout: float | None = None) -> str:
        """Download a text document (pre-extracted chapter text, index pages)."""
        return self._get(url, timeout or TEXT_FETCH_TIMEOUT).text

    def __call__(self, url: str) -> bytes:
        return self.fetch_bytes(url)

    def close(self) -> None:
        self._client.close()
