"""
ヘルスチェックエンドポイント

Kubernetes/ECS対応のヘルスチェック実装
"""
import time
from datetime import datetime, timezone
from enum import Enum
from typing import Optional

import structlog
from fastapi import APIRouter, HTTPException, Request
from pydantic import BaseModel

from greeter import __version__

logger = structlog.get_logger(__name__)


class HealthStatus(str, Enum):
    """ヘルスステータス"""
    HEALTHY = "healthy"
    STARTING = "starting"


class HealthResponse(BaseModel):
    """ヘルスチェックレスポンス"""
    status: HealthStatus
    version: str
    environment: str
    timestamp: str
    uptime_seconds: Optional[float] = None


router = APIRouter(tags=["ヘルスチェック"])


def _is_ready(request: Request) -> bool:
    """lifespanの起動処理が完了しているか"""
    return getattr(request.app.state, "ready", False)


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="ヘルスチェック",
    description="アプリケーションの状態とバージョンを返す",
)
async def health_check(request: Request) -> HealthResponse:
    """
    ヘルスチェック

    外部依存が無いため、起動済みかどうかと稼働時間のみを返します。
    """
    settings = request.app.state.settings
    started_at = getattr(request.app.state, "started_at", None)
    uptime = None
    if started_at is not None:
        uptime = round(time.monotonic() - started_at, 3)

    return HealthResponse(
        status=HealthStatus.HEALTHY if _is_ready(request) else HealthStatus.STARTING,
        version=__version__,
        environment=settings.app_env,
        timestamp=datetime.now(timezone.utc).isoformat(),
        uptime_seconds=uptime,
    )


@router.get(
    "/health/live",
    summary="Liveness Probe",
    description="Kubernetesのliveness probe用エンドポイント",
)
async def liveness_probe():
    """
    Liveness Probe

    常に200を返します（プロセスが動作していれば成功）。
    """
    return {"status": "alive"}


@router.get(
    "/health/ready",
    summary="Readiness Probe",
    description="Kubernetesのreadiness probe用エンドポイント",
)
async def readiness_probe(request: Request):
    """
    Readiness Probe

    lifespanの起動処理が完了している場合に200を返します。
    """
    if not _is_ready(request):
        logger.warning("Readiness check failed", reason="lifespan未完了")
        raise HTTPException(status_code=503, detail="Service not ready")
    return {"status": "ready"}
