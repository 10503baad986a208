from fastapi import HTTPException
from fastapi.responses import JSONResponse
from starlette.datastructures import Headers
from starlette.types import ASGIApp, Message, Receive, Scope, Send
import logging

logger = logging.getLogger(__name__)

# Room for multipart boundaries and part headers on top of the file itself
MULTIPART_OVERHEAD = 64 * 1024


class UploadSizeLimitMiddleware:
    """
    Cap the request body of an upload route before the form is parsed.

    A declared Content-Length over the cap is answered with 413 without
    reading the body. Bodies without one (chunked transfer) are counted
    as they arrive and abandoned as soon as they cross the cap.
    """

    def __init__(self, app: ASGIApp, path: str, max_size: int):
        self.app = app
        self.path = path
        self.max_body_size = max_size + MULTIPART_OVERHEAD

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http" or scope["path"] != self.path:
            await self.app(scope, receive, send)
            return

        content_length = Headers(scope=scope).get("content-length")
        if content_length and content_length.isdigit() and int(content_length) > self.max_body_size:
            logger.warning(f"Rejected upload of {content_length} bytes on {self.path}")
            response = JSONResponse(status_code=413, content={"error": "File too large"})
            await response(scope, receive, send)
            return

        received = 0

        async def limited_receive() -> Message:
            nonlocal received
            message = await receive()
            if message["type"] == "http.request":
                received += len(message.get("body", b""))
                if received > self.max_body_size:
                    logger.warning(f"Aborted upload on {self.path} after {received} bytes")
                    raise HTTPException(status_code=413, detail="File too large")
            return message

        await self.app(scope, limited_receive, send)
