"""
Unit tests for the request timing middleware.
"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from fastapi import Request
from starlette.responses import Response

from housing_dashboard.server.middleware import RequestTimingMiddleware
from housing_dashboard.server.middleware import request_timing

MODULE = "housing_dashboard.server.middleware.request_timing"


def mock_request(method: str = "GET", path: str = "/api/v1/hcv-utilization"):
    request = AsyncMock(spec=Request)
    request.method = method
    request.url.path = path
    request.state = MagicMock()
    return request


class TestRequestTimingMiddleware:
    @pytest.mark.asyncio
    async def test_sets_process_time_header_and_reports(self):
        async def call_next(request):
            return Response(content="ok", status_code=200)

        middleware = RequestTimingMiddleware(app=AsyncMock())

        with patch(f"{MODULE}.log_api_request") as mock_log:
            response = await middleware.dispatch(mock_request(), call_next)

        assert response.status_code == 200
        assert float(response.headers["X-Process-Time"]) >= 0
        kwargs = mock_log.call_args[1]
        assert kwargs["method"] == "GET"
        assert kwargs["path"] == "/api/v1/hcv-utilization"
        assert kwargs["status_code"] == 200

    @pytest.mark.asyncio
    async def test_slow_request_warning(self, monkeypatch):
        monkeypatch.setattr(request_timing, "SLOW_REQUEST_MS", -1)

        async def call_next(request):
            return Response(status_code=204)

        middleware = RequestTimingMiddleware(app=AsyncMock())

        with patch(f"{MODULE}.log_api_request"), patch(f"{MODULE}.logger") as mock_logger:
            await middleware.dispatch(mock_request("POST", "/api/v1/import/upload"), call_next)

        mock_logger.warning.assert_called_once()
        assert "Slow API request: POST /api/v1/import/upload" in mock_logger.warning.call_args[0][0]

    @pytest.mark.asyncio
    async def test_failures_are_reported_as_500_and_reraised(self):
        async def call_next(request):
            raise RuntimeError("handler crashed")

        middleware = RequestTimingMiddleware(app=AsyncMock())

        with patch(f"{MODULE}.log_api_request") as mock_log, patch(f"{MODULE}.logger"):
            with pytest.raises(RuntimeError, match="handler crashed"):
                await middleware.dispatch(mock_request(), call_next)

        assert mock_log.call_args[1]["status_code"] == 500
