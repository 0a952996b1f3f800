"""
ヘルスチェックエンドポイントのテスト
"""
import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from greeter import __version__
from greeter.config import Settings
from greeter.core.app_factory import create_app
from greeter.core.lifespan import lifespan


class TestLiveness:
    @pytest.mark.asyncio
    async def test_liveness_always_alive(self, client: AsyncClient):
        """liveness probeは常に200"""
        response = await client.get("/health/live")
        assert response.status_code == 200
        assert response.json() == {"status": "alive"}


class TestReadiness:
    """readiness probeのテスト"""

    @pytest.mark.asyncio
    async def test_not_ready_before_lifespan(self, client: AsyncClient):
        """lifespan未実行なら503"""
        response = await client.get("/health/ready")
        assert response.status_code == 503

        data = response.json()
        assert data["error"]["code"] == "SERVICE_UNAVAILABLE"

    @pytest.mark.asyncio
    async def test_ready_during_lifespan(self, app: FastAPI, client: AsyncClient):
        """lifespan起動後は200"""
        async with lifespan(app):
            response = await client.get("/health/ready")
            assert response.status_code == 200
            assert response.json() == {"status": "ready"}

        assert app.state.ready is False


class TestHealth:
    @pytest.mark.asyncio
    async def test_health_summary(self, app: FastAPI, client: AsyncClient):
        """バージョンと稼働時間を返す"""
        async with lifespan(app):
            response = await client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["version"] == __version__
        assert data["environment"] == "development"
        assert data["uptime_seconds"] >= 0

    @pytest.mark.asyncio
    async def test_health_before_startup(self, client: AsyncClient):
        response = await client.get("/health")

        data = response.json()
        assert data["status"] == "starting"
        assert data["uptime_seconds"] is None


class TestInjectedSettings:
    """create_appに渡した設定がエンドポイントに反映されるテスト"""

    @pytest.mark.asyncio
    async def test_health_reports_injected_environment(self, monkeypatch: pytest.MonkeyPatch):
        """環境変数ではなく注入した設定の環境名を返す"""
        monkeypatch.setenv("APP_ENV", "development")
        app = create_app(Settings(_env_file=None, app_env="production"))

        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as ac:
            async with lifespan(app):
                response = await ac.get("/health")

        assert response.json()["environment"] == "production"
        assert app.state.settings.app_env == "production"
