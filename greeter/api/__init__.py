"""
APIルーター
エンドポイントの定義
"""
from fastapi import APIRouter

from greeter.api import greeting, health

# メインルーター
api_router = APIRouter()

# 挨拶エンドポイント
api_router.include_router(greeting.router)

# ヘルスチェック
api_router.include_router(health.router)
