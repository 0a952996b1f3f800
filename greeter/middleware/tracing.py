"""
リクエストトレーシングミドルウェア

リクエストIDをログコンテキストとレスポンスヘッダーに載せ、
1リクエストにつき1行のアクセスログを出力する
"""
import time
import uuid

import structlog
from starlette.datastructures import Headers
from starlette.types import ASGIApp, Message, Receive, Scope, Send
from structlog.contextvars import bind_contextvars, clear_contextvars

logger = structlog.get_logger(__name__)


class TracingMiddleware:
    """
    リクエストトレーシングミドルウェア（純粋なASGI実装）

    - X-Request-ID: 受信値をそのまま使い、無ければUUIDを採番
    - X-Process-Time: レスポンス開始までの秒数
    - ヘルスチェックパスはアクセスログ対象外
    """

    REQUEST_ID_HEADER = b"x-request-id"
    PROCESS_TIME_HEADER = b"x-process-time"

    SKIP_LOG_PATHS = frozenset({"/health", "/health/live", "/health/ready"})

    def __init__(self, app: ASGIApp, log_requests: bool = True):
        self.app = app
        self.log_requests = log_requests

    def _should_log(self, path: str) -> bool:
        """アクセスログを出力するパスか"""
        return self.log_requests and path not in self.SKIP_LOG_PATHS

    @staticmethod
    def _client_ip(scope: Scope) -> str:
        client = scope.get("client")
        return client[0] if client else "unknown"

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        headers = Headers(scope=scope)
        path = scope.get("path", "")
        request_id = headers.get("x-request-id") or str(uuid.uuid4())

        # 例外ハンドラーから request.state.request_id で参照される
        scope.setdefault("state", {})["request_id"] = request_id

        clear_contextvars()
        bind_contextvars(request_id=request_id, method=scope.get("method", ""), path=path)

        started = time.perf_counter()
        status_code: int | None = None
        extra_headers = [(self.REQUEST_ID_HEADER, request_id.encode("latin-1"))]

        async def send_wrapper(message: Message) -> None:
            nonlocal status_code
            if message["type"] == "http.response.start":
                status_code = message["status"]
                elapsed = f"{time.perf_counter() - started:.4f}".encode("latin-1")
                message = {
                    **message,
                    "headers": [
                        *message.get("headers", []),
                        *extra_headers,
                        (self.PROCESS_TIME_HEADER, elapsed),
                    ],
                }
            await send(message)

        try:
            await self.app(scope, receive, send_wrapper)
        except Exception as e:
            logger.error(
                "リクエスト処理エラー",
                error=str(e),
                error_type=type(e).__name__,
                process_time_ms=round((time.perf_counter() - started) * 1000, 2),
                exc_info=True,
            )
            raise
        else:
            if self._should_log(path):
                logger.info(
                    "リクエスト完了",
                    status_code=status_code,
                    client_ip=self._client_ip(scope),
                    user_agent=headers.get("user-agent", "unknown"),
                    process_time_ms=round((time.perf_counter() - started) * 1000, 2),
                )
        finally:
            clear_contextvars()
