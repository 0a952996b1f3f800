"""
ミドルウェア層
リクエストトレーシング
"""
from greeter.middleware.tracing import TracingMiddleware

__all__ = [
    "TracingMiddleware",
]
