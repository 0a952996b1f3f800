"""
エラーレスポンススキーマ

統一されたエラーレスポンス形式を定義
"""
from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field


class ErrorResponse(BaseModel):
    """
    統一エラーレスポンス

    RFC 7807 Problem Details for HTTP APIsを参考にした形式
    """
    error: "ErrorBody"

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "error": {
                    "code": "NOT_FOUND",
                    "message": "Not Found",
                    "request_id": "550e8400-e29b-41d4-a716-446655440000",
                    "timestamp": "2024-01-15T10:30:00Z",
                }
            }
        }
    )


class ErrorBody(BaseModel):
    """エラー本体"""
    code: str = Field(..., description="エラーコード")
    message: str = Field(..., description="ユーザー向けエラーメッセージ")
    request_id: str | None = Field(
        None,
        description="リクエストID（トレーシング用）",
    )
    timestamp: str = Field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat(),
        description="エラー発生時刻",
    )


# ErrorResponseのモデル再構築（前方参照の解決）
ErrorResponse.model_rebuild()


def create_error_response(
    code: str,
    message: str,
    request_id: str | None = None,
) -> dict:
    """
    エラーレスポンスを作成

    Args:
        code: エラーコード
        message: ユーザー向けメッセージ
        request_id: リクエストID

    Returns:
        エラーレスポンス辞書
    """
    return ErrorResponse(
        error=ErrorBody(
            code=code,
            message=message,
            request_id=request_id,
        )
    ).model_dump()


# よく使用するエラーコード
class ErrorCodes:
    """エラーコード定数"""
    # リソース
    NOT_FOUND = "NOT_FOUND"
    METHOD_NOT_ALLOWED = "METHOD_NOT_ALLOWED"

    # HTTP層の汎用エラー
    HTTP_ERROR = "HTTP_ERROR"

    # サーバーエラー
    INTERNAL_ERROR = "INTERNAL_ERROR"
    SERVICE_UNAVAILABLE = "SERVICE_UNAVAILABLE"

    @classmethod
    def for_status(cls, status_code: int) -> str:
        """HTTPステータスコードに対応するエラーコードを取得"""
        return {
            404: cls.NOT_FOUND,
            405: cls.METHOD_NOT_ALLOWED,
            503: cls.SERVICE_UNAVAILABLE,
        }.get(status_code, cls.HTTP_ERROR)
