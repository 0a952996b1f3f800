"""
Greeterウェブアプリケーション
GET / に固定の挨拶メッセージを返すHTTPサービス
"""
__version__ = "0.1.0"
