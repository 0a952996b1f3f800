"""
Pydanticスキーマ
エラーレスポンスの定義
"""
from greeter.schemas.error import ErrorCodes, ErrorResponse, create_error_response

__all__ = [
    "ErrorCodes",
    "ErrorResponse",
    "create_error_response",
]
