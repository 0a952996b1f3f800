"""
ユーティリティモジュール
共通例外の公開
"""
from greeter.utils.exceptions import (
    AppError,
    BindError,
    ServerStateError,
)

__all__ = [
    "AppError",
    "BindError",
    "ServerStateError",
]
