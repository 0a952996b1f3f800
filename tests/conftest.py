"""
テスト用共通設定
pytest fixtures
"""
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from greeter.config import Settings, clear_settings_cache
from greeter.core.app_factory import create_app


@pytest.fixture(autouse=True)
def _reset_settings_cache():
    """テスト間で設定キャッシュを共有しない"""
    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest.fixture
def settings() -> Settings:
    """.envを読まないテスト用設定"""
    return Settings(_env_file=None)


@pytest.fixture
def app(settings: Settings) -> FastAPI:
    """テスト用アプリケーション"""
    return create_app(settings)


@pytest_asyncio.fixture(scope="function")
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """テスト用HTTPクライアント"""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
