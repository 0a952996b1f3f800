"""
アプリケーションライフサイクル管理
起動時・終了時の処理を定義
"""
import time
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    アプリケーションのライフサイクル管理

    起動完了後に app.state.ready を立て、readiness probe に反映する。
    終了時は ready を落とすだけで、保持するリソースは無い。
    """
    from greeter import __version__

    settings = app.state.settings

    logger.info(
        "アプリケーション起動中...",
        version=__version__,
        environment=settings.app_env,
    )

    app.state.started_at = time.monotonic()
    app.state.ready = True

    logger.info("アプリケーション起動完了", environment=settings.app_env)

    yield

    # ---- 終了時 ----
    logger.info("アプリケーション終了中...")
    app.state.ready = False
    logger.info("アプリケーション終了完了")
