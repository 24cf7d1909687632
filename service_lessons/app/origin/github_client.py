"""
GitHub contents client for the Lessons Service.
"""

import json
import time
from typing import Any, Optional, TYPE_CHECKING
from urllib.parse import quote

import httpx

from shared.logging import get_logger
from shared.errors import TransportError, UpstreamError

if TYPE_CHECKING:  # pragma: no cover - imported for typing only
    from shared.metrics import MetricsCollector


GITHUB_ACCEPT = "application/vnd.github.v3+json"


class GitHubContentsClient:
    """Client for the repository contents endpoint of the GitHub API."""

    def __init__(
        self,
        base_url: str,
        token: str,
        *,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        metrics: Optional["MetricsCollector"] = None,
    ):
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.transport = transport
        self.metrics = metrics
        self.logger = get_logger("lessons.github_client")
        self._headers = {
            "Authorization": f"Bearer {token}",
            "Accept": GITHUB_ACCEPT,
        }

    def url_for(self, canonical_path: str) -> str:
        """Origin URL for a canonical path, each segment percent-encoded."""
        segments = [quote(segment, safe="") for segment in canonical_path.strip("/").split("/")]
        return f"{self.base_url}/{'/'.join(segments)}"

    async def fetch(self, canonical_path: str) -> Any:
        """GET the contents listing for ``canonical_path`` and return decoded JSON.

        Raises UpstreamError on a non-success status and TransportError when
        the origin cannot be reached or its body is not JSON.
        """
        url = self.url_for(canonical_path)
        start_time = time.time()

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.get(url, headers=self._headers)
        except httpx.HTTPError as exc:
            self._record("transport_error", start_time)
            self.logger.error("Origin unreachable", url=url, error=str(exc))
            raise TransportError(
                f"GitHub request failed: {exc}",
                details={"url": url}
            )

        if not response.is_success:
            self._record("upstream_error", start_time)
            self.logger.error(
                "Origin request failed",
                url=url,
                status_code=response.status_code,
                response=response.text
            )
            raise UpstreamError(response.status_code, response.reason_phrase, response.text)

        try:
            data = response.json()
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            self._record("parse_error", start_time)
            self.logger.error("Origin returned invalid JSON", url=url, error=str(exc))
            raise TransportError(
                f"Invalid JSON from GitHub: {exc}",
                details={"url": url}
            )

        self._record("ok", start_time)
        self.logger.debug("Origin content retrieved", url=url)
        return data

    def _record(self, outcome: str, start_time: float):
        if self.metrics is None:
            return
        self.metrics.increment_counter("origin_requests_total", outcome=outcome)
        self.metrics.observe_histogram("origin_request_duration_seconds", time.time() - start_time)
