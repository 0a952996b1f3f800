"""
アプリケーション設定
環境変数からの読み込みと設定値の管理を行う
"""
import logging
from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class Settings(BaseSettings):
    """アプリケーション設定クラス"""

    # ============================================
    # アプリケーション設定
    # ============================================
    # 起動ログに表示される名前
    app_name: str = "Nodejs Application"
    app_env: str = "development"
    app_host: str = "0.0.0.0"
    app_port: int = 3000  # 0はエフェメラルポート
    log_level: str = "INFO"

    # Swagger UI / ReDoc の公開
    docs_enabled: bool = False

    # ============================================
    # サーバー設定
    # ============================================
    server_start_timeout: float = 10.0  # 秒
    uvicorn_timeout_keep_alive: int = 5

    # ============================================
    # バリデーション
    # ============================================

    @field_validator("app_port")
    @classmethod
    def validate_app_port(cls, v: int) -> int:
        """ポート番号の範囲をバリデーション"""
        if not 0 <= v <= 65535:
            raise ValueError(f"無効なポート番号: {v}")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """ログレベルのバリデーション"""
        if v.upper() not in _VALID_LOG_LEVELS:
            raise ValueError(f"無効なログレベル: {v}")
        return v.upper()

    @field_validator("server_start_timeout")
    @classmethod
    def validate_server_start_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("SERVER_START_TIMEOUTは正の値である必要があります")
        return v

    # ============================================
    # プロパティ
    # ============================================

    @property
    def is_production(self) -> bool:
        """本番環境かどうか"""
        return self.app_env == "production"

    @property
    def docs_visible(self) -> bool:
        """ドキュメントを公開するか（本番環境では常に非公開）"""
        return self.docs_enabled and not self.is_production

    @property
    def log_level_int(self) -> int:
        """ログレベルを数値で取得"""
        return getattr(logging, self.log_level.upper(), logging.INFO)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )


@lru_cache()
def get_settings() -> Settings:
    """設定インスタンスを取得（キャッシュ付き）"""
    return Settings()


def clear_settings_cache() -> None:
    """設定キャッシュをクリア（テスト用）"""
    get_settings.cache_clear()
