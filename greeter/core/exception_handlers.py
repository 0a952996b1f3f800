"""
例外ハンドラー
アプリケーション全体の例外処理を定義
"""
import structlog
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from greeter.schemas.error import ErrorCodes, create_error_response
from greeter.utils.exceptions import AppError

logger = structlog.get_logger(__name__)


def _get_request_id(request: Request) -> str | None:
    """リクエストIDを取得"""
    return getattr(request.state, "request_id", None)


def register_exception_handlers(app: FastAPI) -> None:
    """全例外ハンドラーをアプリケーションに登録"""

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError):
        """アプリケーションエラーハンドラー"""
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=create_error_response(
                code=exc.error_code,
                message=exc.message,
                request_id=_get_request_id(request),
            ),
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        """
        HTTP例外ハンドラー

        未定義パス（404）や未定義メソッド（405）もここで統一形式に変換する。
        Allowなどのヘッダーはそのまま引き継ぐ。
        """
        if exc.status_code >= 500:
            logger.warning(
                "HTTPエラー",
                status_code=exc.status_code,
                detail=exc.detail,
                path=request.url.path,
            )
        return JSONResponse(
            status_code=exc.status_code,
            content=create_error_response(
                code=ErrorCodes.for_status(exc.status_code),
                message=str(exc.detail),
                request_id=_get_request_id(request),
            ),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        """一般エラーハンドラー"""
        logger.error(
            "内部エラー",
            error=str(exc),
            error_type=type(exc).__name__,
            path=request.url.path,
            exc_info=True,
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=create_error_response(
                code=ErrorCodes.INTERNAL_ERROR,
                message="内部サーバーエラーが発生しました",
                request_id=_get_request_id(request),
            ),
        )
