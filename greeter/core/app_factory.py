"""
アプリケーションファクトリ
FastAPIアプリケーションの作成と設定
"""
import logging
import sys

import structlog
from fastapi import FastAPI

from greeter import __version__
from greeter.api import api_router
from greeter.config import Settings, get_settings
from greeter.core.exception_handlers import register_exception_handlers
from greeter.core.lifespan import lifespan
from greeter.middleware.tracing import TracingMiddleware


def _configure_logging(settings: Settings) -> None:
    """ログ設定の初期化"""
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=settings.log_level_int,
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def _register_middleware(app: FastAPI) -> None:
    """ミドルウェアを登録"""
    app.add_middleware(
        TracingMiddleware,
        log_requests=True,
    )


def create_app(settings: Settings | None = None) -> FastAPI:
    """
    FastAPIアプリケーションを作成・設定

    Args:
        settings: 設定（省略時は環境変数から読み込み）

    Returns:
        設定済みのFastAPIアプリケーション
    """
    settings = settings or get_settings()

    # ログ設定
    _configure_logging(settings)

    app = FastAPI(
        title="Greeter",
        description="GET / に挨拶メッセージを返すウェブアプリケーション",
        version=__version__,
        lifespan=lifespan,
        docs_url="/docs" if settings.docs_visible else None,
        redoc_url="/redoc" if settings.docs_visible else None,
        openapi_url="/openapi.json" if settings.docs_visible else None,
    )

    # lifespan・エンドポイントから参照する設定
    app.state.settings = settings

    # ミドルウェア登録
    _register_middleware(app)

    # 例外ハンドラー登録
    register_exception_handlers(app)

    # ルーター登録
    app.include_router(api_router)

    return app
