"""
挨拶エンドポイント

GET / に固定の挨拶メッセージを返す
"""
from fastapi import APIRouter, Request
from fastapi.responses import HTMLResponse

# 全リクエストで同一のペイロードを返す
GREETING_MESSAGE = "Hello World! Welcome to my Web Application!😀😀"

router = APIRouter(tags=["ルート"])


@router.api_route(
    "/",
    methods=["GET", "HEAD"],
    response_class=HTMLResponse,
    summary="挨拶メッセージ",
)
async def greet(request: Request) -> HTMLResponse:
    """
    挨拶メッセージを返す（ステートレス）

    HEADではGETと同じヘッダー（Content-Length含む）でボディのみ空にする。
    """
    response = HTMLResponse(GREETING_MESSAGE)
    if request.method == "HEAD":
        response.body = b""
    return response
