"""
Greeterウェブアプリケーション メインモジュール
ASGIアプリケーションとプロセスのエントリポイント
"""
from greeter.config import get_settings
from greeter.core.app_factory import create_app

app = create_app()


def main() -> None:
    """
    ポートをバインドしてリクエストの受付を開始

    バインドに失敗した場合は BindError がそのまま伝播し、プロセスは異常終了する。
    """
    from greeter.server import GreeterServer

    settings = get_settings()
    GreeterServer(app=app, settings=settings).serve_forever(settings.app_port)


if __name__ == "__main__":
    main()
