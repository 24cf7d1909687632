"""
Unit tests for the GitHub contents client.
"""

import pytest
import httpx
from unittest.mock import AsyncMock, patch

import sys
import os
sys.path.append(os.path.join(os.path.dirname(__file__), '..', '..'))

from service_lessons.app.origin.github_client import GitHubContentsClient
from shared.errors import TransportError, UpstreamError
from shared.metrics import MetricsCollector

from doubles import GITHUB_BASE


class TestGitHubContentsClient:
    """Test cases for GitHubContentsClient."""

    @pytest.fixture
    def requests(self):
        return []

    def _client(self, requests, response, metrics=None):
        def handler(request):
            requests.append(request)
            return response

        return GitHubContentsClient(
            GITHUB_BASE + "/",
            "secret-token",
            transport=httpx.MockTransport(handler),
            metrics=metrics,
        )

    @pytest.mark.asyncio
    async def test_fetch_success(self, requests, quarter_listing):
        client = self._client(requests, httpx.Response(200, json=quarter_listing))

        data = await client.fetch("/en/2024-q1")

        assert data == quarter_listing
        assert len(requests) == 1
        request = requests[0]
        assert request.method == "GET"
        assert str(request.url) == f"{GITHUB_BASE}/en/2024-q1"
        assert request.headers["Authorization"] == "Bearer secret-token"
        assert request.headers["Accept"] == "application/vnd.github.v3+json"

    @pytest.mark.asyncio
    async def test_fetch_null_body(self, requests):
        client = self._client(requests, httpx.Response(200, content=b"null"))

        assert await client.fetch("/en") is None

    @pytest.mark.asyncio
    async def test_non_success_status(self, requests):
        client = self._client(requests, httpx.Response(403, text="API rate limit exceeded"))

        with pytest.raises(UpstreamError) as exc_info:
            await client.fetch("/en")

        error = exc_info.value
        assert error.upstream_status == 403
        assert error.status_text == "Forbidden"
        assert error.body == "API rate limit exceeded"
        assert error.message == "GitHub API error: 403 Forbidden - API rate limit exceeded"

    @pytest.mark.asyncio
    async def test_invalid_json(self, requests):
        client = self._client(requests, httpx.Response(200, content=b"<html>oops</html>"))

        with pytest.raises(TransportError) as exc_info:
            await client.fetch("/en")

        assert "Invalid JSON" in exc_info.value.message

    @pytest.mark.asyncio
    async def test_connection_error(self):
        def handler(request):
            raise httpx.ConnectError("Connection refused", request=request)

        client = GitHubContentsClient(GITHUB_BASE, "secret-token", transport=httpx.MockTransport(handler))

        with pytest.raises(TransportError) as exc_info:
            await client.fetch("/en")

        assert "Connection refused" in exc_info.value.message
        assert exc_info.value.details["url"] == f"{GITHUB_BASE}/en"

    @pytest.mark.asyncio
    async def test_timeout_is_transport_error(self):
        with patch('httpx.AsyncClient') as mock_client:
            mock_client.return_value.__aenter__.return_value.get = AsyncMock(
                side_effect=httpx.ReadTimeout("timed out")
            )
            client = GitHubContentsClient(GITHUB_BASE, "secret-token", timeout=2.5)

            with pytest.raises(TransportError):
                await client.fetch("/en")

            assert mock_client.call_args.kwargs["timeout"] == 2.5

    @pytest.mark.asyncio
    async def test_outcomes_are_counted(self, requests, quarter_listing):
        metrics = MetricsCollector("lessons")
        ok_client = self._client(requests, httpx.Response(200, json=quarter_listing), metrics=metrics)
        failing_client = self._client(requests, httpx.Response(500, text="boom"), metrics=metrics)

        await ok_client.fetch("/en/2024-q1")
        with pytest.raises(UpstreamError):
            await failing_client.fetch("/en/2024-q1")

        assert metrics.sample("origin_requests_total", outcome="ok") == 1.0
        assert metrics.sample("origin_requests_total", outcome="upstream_error") == 1.0
        assert metrics.sample("origin_request_duration_seconds_count") == 2.0

    @pytest.mark.asyncio
    async def test_segments_are_percent_encoded(self, requests):
        client = self._client(requests, httpx.Response(404, text="Not Found"))

        with pytest.raises(UpstreamError):
            await client.fetch("/en?ref=other/2024 q1#top")

        request = requests[0]
        assert str(request.url) == f"{GITHUB_BASE}/en%3Fref%3Dother/2024%20q1%23top"
        assert not request.url.params
        assert request.url.fragment == ""
