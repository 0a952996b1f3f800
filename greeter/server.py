"""
HTTPリスナー

TCPソケットをバインドし、uvicornでASGIアプリケーションを配信する

状態遷移:
  NOT_LISTENING --start()--> LISTENING
  stop() はテスト・組み込み用途のポート解放のみを目的とする
"""
import socket
import threading
import time
from enum import Enum
from typing import Optional

import structlog
import uvicorn
from fastapi import FastAPI

from greeter.config import Settings, get_settings
from greeter.utils.exceptions import AppError, BindError, ServerStateError

logger = structlog.get_logger(__name__)

# uvicornのデフォルトと同じ値
LISTEN_BACKLOG = 2048


class ServerState(str, Enum):
    """リスナー状態"""
    NOT_LISTENING = "not_listening"
    LISTENING = "listening"


def startup_message(app_name: str, port: int) -> str:
    """起動ログのメッセージを生成"""
    return f"{app_name} listening on port {port}"


def bind_socket(host: str, port: int) -> socket.socket:
    """
    リスニングソケットを作成してバインドする

    Args:
        host: バインドするホスト
        port: バインドするポート（0はエフェメラルポート）

    Returns:
        listen済みのソケット

    Raises:
        BindError: アドレスが使用中、または権限不足の場合
    """
    family = socket.AF_INET6 if ":" in host else socket.AF_INET
    sock = socket.socket(family, socket.SOCK_STREAM)
    try:
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        sock.bind((host, port))
        sock.listen(LISTEN_BACKLOG)
    except OSError as e:
        sock.close()
        raise BindError(host=host, port=port, original_error=str(e)) from e
    sock.set_inheritable(True)
    return sock


class GreeterServer:
    """
    Greeterサーバー

    start() はバックグラウンドスレッドでuvicornを起動し、起動完了まで待機する。
    serve_forever() は呼び出しスレッドでブロックする（プロセスのエントリポイント用）。
    """

    def __init__(
        self,
        app: Optional[FastAPI] = None,
        host: Optional[str] = None,
        settings: Optional[Settings] = None,
    ):
        """
        初期化

        Args:
            app: 配信するアプリケーション（省略時は create_app() で生成）
            host: バインドするホスト（省略時は設定値）
            settings: 設定（省略時は環境変数から読み込み）
        """
        self.settings = settings or get_settings()
        if app is None:
            from greeter.core.app_factory import create_app
            app = create_app(self.settings)
        self.app = app
        self.host = host or self.settings.app_host
        self._state = ServerState.NOT_LISTENING
        self._socket: Optional[socket.socket] = None
        self._server: Optional[uvicorn.Server] = None
        self._thread: Optional[threading.Thread] = None

    @property
    def state(self) -> ServerState:
        """現在の状態"""
        return self._state

    @property
    def port(self) -> Optional[int]:
        """バインド済みのポート（エフェメラルポート解決後の値）"""
        if self._socket is None:
            return None
        return self._socket.getsockname()[1]

    def _listen(self, port: Optional[int]) -> socket.socket:
        """ソケットをバインドし、起動ログを出力"""
        if self._state is ServerState.LISTENING:
            raise ServerStateError(self._state.value, "start")

        port = self.settings.app_port if port is None else port
        self._socket = bind_socket(self.host, port)
        self._state = ServerState.LISTENING

        logger.info(
            startup_message(self.settings.app_name, self.port),
            host=self.host,
            port=self.port,
        )
        return self._socket

    def _build_uvicorn_server(self) -> uvicorn.Server:
        """uvicornサーバーを構築（ログ設定はstructlog側に任せる）"""
        config = uvicorn.Config(
            self.app,
            host=self.host,
            port=self.port,
            log_config=None,
            lifespan="on",
            timeout_keep_alive=self.settings.uvicorn_timeout_keep_alive,
        )
        return uvicorn.Server(config)

    def start(self, port: Optional[int] = None) -> "GreeterServer":
        """
        リスナーを起動（ノンブロッキング）

        Args:
            port: バインドするポート（省略時は設定値）

        Raises:
            BindError: ポートが既に使用されている場合
            ServerStateError: 既に起動済みの場合
            AppError: タイムアウトまでに起動が完了しなかった場合
        """
        sock = self._listen(port)
        bound_port = self.port
        self._server = self._build_uvicorn_server()
        self._thread = threading.Thread(
            target=self._server.run,
            kwargs={"sockets": [sock]},
            name=f"greeter-server-{bound_port}",
            daemon=True,
        )
        self._thread.start()

        deadline = time.monotonic() + self.settings.server_start_timeout
        while not self._server.started:
            if not self._thread.is_alive() or time.monotonic() > deadline:
                self.stop()
                raise AppError(
                    message="サーバーの起動に失敗しました",
                    error_code="SERVER_START_FAILED",
                    details={"host": self.host, "port": bound_port},
                )
            time.sleep(0.01)

        return self

    def serve_forever(self, port: Optional[int] = None) -> None:
        """
        リスナーを起動し、uvicornが終了するまでブロック

        Raises:
            BindError: ポートが既に使用されている場合
        """
        sock = self._listen(port)
        self._server = self._build_uvicorn_server()
        try:
            self._server.run(sockets=[sock])
        finally:
            self._close_socket()

    def stop(self, timeout: float = 5.0) -> None:
        """uvicornに終了を要求し、ソケットを解放"""
        if self._server is not None:
            self._server.should_exit = True
        if self._thread is not None:
            self._thread.join(timeout=timeout)
            if self._thread.is_alive():
                logger.warning("サーバースレッドの終了待機がタイムアウト", timeout=timeout)
            self._thread = None
        self._server = None
        self._close_socket()

    def _close_socket(self) -> None:
        if self._socket is not None:
            self._socket.close()
            self._socket = None
        self._state = ServerState.NOT_LISTENING

    def __enter__(self) -> "GreeterServer":
        if self._state is ServerState.NOT_LISTENING:
            self.start()
        return self

    def __exit__(self, *exc_info) -> None:
        self.stop()
