import re
import time
from abc import ABC, abstractmethod
from typing import Any, Dict, Generic, List, Optional, TypeVar

import httpx
from loguru import logger
from tenacity import (
    retry,
    stop_after_attempt,
    wait_exponential,
    retry_if_exception_type,
)

from standings_kiosk.config.settings import settings
from standings_kiosk.errors import ParseWarning, UpstreamUnavailable
from standings_kiosk.models.enums import DataSource, SourceRole

# Define common HTTP status codes that warrant a retry
RETRYABLE_STATUS_CODES = {408, 429, 500, 502, 503, 504}

RANK_PREFIX_RE = re.compile(r"^\d+\.?\s+")
MIN_TEAM_NAME_LENGTH = 2

T = TypeVar("T")


def strip_rank_prefix(name: str) -> str:
    """'3 Purdue' / '3. Purdue' -> 'Purdue'."""
    return RANK_PREFIX_RE.sub("", (name or "").strip()).strip()


def is_valid_team_name(name: Optional[str]) -> bool:
    return bool(name) and len(name) >= MIN_TEAM_NAME_LENGTH


def build_client(timeout: Optional[float] = None) -> httpx.AsyncClient:
    return httpx.AsyncClient(
        timeout=httpx.Timeout(timeout or settings.request_timeout_seconds),
        follow_redirects=True,
        headers={"User-Agent": settings.user_agent},
    )


class BaseSource(ABC, Generic[T]):
    """Abstract base class for upstream standings sources.

    A source fetches one raw payload and parses it into its canonical shape.
    Parsing never touches the network so it can be exercised on its own.
    """

    data_source: DataSource
    role: SourceRole = SourceRole.PRIMARY
    accept: str = "text/html"

    def __init__(
        self,
        url: str,
        client: Optional[httpx.AsyncClient] = None,
        cache_bust: Optional[bool] = None,
    ):
        self.url = url
        self.client = client or build_client()
        self._owns_client = client is None
        self.cache_bust = settings.cache_bust if cache_bust is None else cache_bust
        self.parse_warnings: List[ParseWarning] = []

    @property
    def name(self) -> str:
        return self.data_source.value

    @abstractmethod
    def parse(self, payload: Any) -> T:
        """Parse a raw payload into this source's output shape."""
        pass

    def decode(self, response: httpx.Response) -> Any:
        """Turns the HTTP response into the payload `parse` expects."""
        return response.text

    async def load(self) -> T:
        """Fetch the payload and parse it."""
        payload = await self.fetch()
        return self.parse(payload)

    async def fetch(self) -> Any:
        params: Dict[str, Any] = {}
        if self.cache_bust:
            params["t"] = int(time.time() * 1000)
        try:
            response = await self._make_request(
                "GET", self.url, headers={"Accept": self.accept}, params=params
            )
        except httpx.HTTPStatusError as e:
            raise UpstreamUnavailable(self.name, e.response.status_code) from e
        except httpx.RequestError as e:
            raise UpstreamUnavailable(self.name, reason=str(e) or type(e).__name__) from e
        try:
            return self.decode(response)
        except ValueError as e:
            raise UpstreamUnavailable(self.name, response.status_code, "malformed payload") from e

    def warn(self, row_index: int, reason: str) -> None:
        """Record a skipped row without aborting the parse."""
        warning = ParseWarning(self.name, row_index, reason)
        self.parse_warnings.append(warning)
        logger.debug(f"Skipping {self.name} row {row_index}: {reason}")

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=1, max=10),
        retry=retry_if_exception_type((httpx.RequestError, httpx.HTTPStatusError)),
        reraise=True,
    )
    async def _make_request(
        self,
        method: str,
        url: str,
        headers: Optional[Dict[str, str]] = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> httpx.Response:
        """Makes an asynchronous HTTP request, retrying transient failures."""
        logger.debug(f"Requesting {method} {url} for {self.name}")
        try:
            response = await self.client.request(
                method, url, headers=headers, params=params
            )
        except httpx.RequestError as e:
            # Network errors, timeouts etc. - these are retryable
            logger.warning(f"Request error for {self.name}, retrying: {e!r}")
            raise

        if response.status_code in RETRYABLE_STATUS_CODES:
            logger.warning(
                f"Retrying request for {self.name} due to status {response.status_code}"
            )
            response.raise_for_status()

        if not response.is_success:
            # Not worth retrying: fail straight to the caller
            logger.error(f"HTTP error for {self.name}: {response.status_code} at {url}")
            raise UpstreamUnavailable(self.name, response.status_code)

        logger.debug(f"Request successful: {response.status_code} for {url}")
        return response

    async def close(self):
        """Closes the underlying HTTP client if this source created it."""
        if self._owns_client:
            await self.client.aclose()
            logger.debug(f"Closed HTTP client for {self.name}")
