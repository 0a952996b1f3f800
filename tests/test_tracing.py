"""
リクエストトレーシングミドルウェアのテスト
"""
import logging

import pytest
from httpx import AsyncClient

from greeter.middleware.tracing import TracingMiddleware


class TestTracingMiddleware:
    @pytest.mark.asyncio
    async def test_request_id_is_propagated(self, client: AsyncClient):
        """受信したX-Request-IDをそのまま返す"""
        response = await client.get("/", headers={"X-Request-ID": "trace-abc"})
        assert response.headers["x-request-id"] == "trace-abc"

    @pytest.mark.asyncio
    async def test_request_id_is_generated(self, client: AsyncClient):
        """X-Request-IDが無ければ生成する"""
        first = await client.get("/")
        second = await client.get("/")

        assert first.headers["x-request-id"]
        assert first.headers["x-request-id"] != second.headers["x-request-id"]

    @pytest.mark.asyncio
    async def test_process_time_header(self, client: AsyncClient):
        response = await client.get("/")
        assert float(response.headers["x-process-time"]) >= 0

    def test_health_paths_are_not_logged(self):
        """ヘルスチェックはアクセスログ対象外"""
        middleware = TracingMiddleware(app=None)
        assert not middleware._should_log("/health/live")
        assert not middleware._should_log("/health/ready")
        assert middleware._should_log("/")

    def test_logging_can_be_disabled(self):
        middleware = TracingMiddleware(app=None, log_requests=False)
        assert not middleware._should_log("/")


class TestAccessLog:
    """アクセスログのテスト"""

    @pytest.mark.asyncio
    async def test_one_line_per_request_with_status(
        self, client: AsyncClient, caplog: pytest.LogCaptureFixture
    ):
        caplog.set_level(logging.INFO)
        await client.get("/", headers={"X-Request-ID": "log-me"})

        lines = [r.getMessage() for r in caplog.records if "log-me" in r.getMessage()]
        assert len(lines) == 1
        assert '"status_code": 200' in lines[0]

    @pytest.mark.asyncio
    async def test_health_probe_not_logged(
        self, client: AsyncClient, caplog: pytest.LogCaptureFixture
    ):
        caplog.set_level(logging.INFO)
        await client.get("/health/live", headers={"X-Request-ID": "skip-me"})

        assert "skip-me" not in caplog.text
