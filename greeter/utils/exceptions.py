"""
カスタム例外クラス
アプリケーション全体で使用する例外の定義
"""
from typing import Optional


class AppError(Exception):
    """アプリケーション基底例外"""

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[dict] = None,
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code or "APP_ERROR"
        self.details = details or {}


class BindError(AppError):
    """リスナーのバインド失敗

    ポートが既に使用中、または権限不足の場合に発生。リトライは行わない。
    """

    def __init__(
        self,
        host: str,
        port: int,
        original_error: Optional[str] = None,
    ):
        self.host = host
        self.port = port
        self.original_error = original_error
        super().__init__(
            message=f"{host}:{port} へのバインドに失敗しました",
            error_code="BIND_ERROR",
            details={
                "host": host,
                "port": port,
                "original_error": original_error,
            },
        )


class ServerStateError(AppError):
    """リスナーの状態遷移が不正な場合のエラー"""

    def __init__(self, current_state: str, operation: str):
        self.current_state = current_state
        self.operation = operation
        super().__init__(
            message=f"状態 '{current_state}' では {operation} を実行できません",
            error_code="INVALID_SERVER_STATE",
            details={
                "current_state": current_state,
                "operation": operation,
            },
        )
