from __future__ import annotations

import logging
import typing as t

from notmodified._core._headers import Headers
from notmodified._core._spec import ConditionalOptions
from notmodified._core.models import Request, Response
from notmodified._pipeline import FinalizationPipeline
from notmodified._utils import HEADERS_ENCODING, make_async_iterator

logger = logging.getLogger("notmodified.asgi")


class _ASGIScope(t.TypedDict, total=False):
    """ASGI HTTP scope type."""

    type: str
    asgi: dict[str, str]
    http_version: str
    method: str
    scheme: str
    path: str
    query_string: bytes
    root_path: str
    headers: list[tuple[bytes, bytes]]
    server: tuple[str, int | None] | None
    client: tuple[str, int] | None
    state: dict[str, t.Any]
    extensions: dict[str, t.Any]


_Scope = _ASGIScope
_Receive = t.Callable[[], t.Awaitable[dict[str, t.Any]]]
_Send = t.Callable[[dict[str, t.Any]], t.Awaitable[None]]
_ASGIApp = t.Callable[[_Scope, _Receive, _Send], t.Awaitable[None]]


class ASGIConditionalMiddleware:
    """
    ASGI middleware that answers conditional requests with 304 or 412.

    The wrapped application's response is collected in full, then passed
    through a FinalizationPipeline before anything is sent to the client.
    When the request's If-Match, If-Unmodified-Since, If-None-Match or
    If-Modified-Since headers say so, the response is replaced with an empty
    304 Not Modified or 412 Precondition Failed.

    Per-request state only lives in closures, so a single instance can serve
    concurrent requests.

    Args:
        app: The ASGI application to wrap.
        pipeline: Finalization pipeline to run on every response. Defaults to
            a pipeline holding only the conditional request finalizer.
        options: Options for the default pipeline. Ignored when `pipeline` is given.

    Example:
        ```python
        from notmodified.asgi import ASGIConditionalMiddleware

        app = ASGIConditionalMiddleware(app=my_asgi_app)
        ```
    """

    def __init__(
        self,
        app: _ASGIApp,
        pipeline: FinalizationPipeline | None = None,
        options: ConditionalOptions | None = None,
    ) -> None:
        self.app = app
        self.pipeline = pipeline if pipeline is not None else FinalizationPipeline(options=options)

        logger.info(
            "Initialized ASGIConditionalMiddleware with finalizers=%d",
            len(self.pipeline.finalizers),
        )

    async def __call__(self, scope: _Scope, receive: _Receive, send: _Send) -> None:
        if scope["type"] != "http":
            logger.debug("Skipping non-HTTP request: type=%s", scope["type"])
            await self.app(scope, receive, send)
            return

        method = scope.get("method", "GET")
        path = scope.get("path", "/")

        logger.debug("Incoming HTTP request: method=%s path=%s", method, path)

        response_started = False
        status_code = 200
        response_headers = Headers({})
        response_body_chunks: list[bytes] = []

        async def inner_send(message: dict[str, t.Any]) -> None:
            nonlocal response_started, status_code
            if message["type"] == "http.response.start":
                response_started = True
                status_code = message["status"]
                for key, value in message.get("headers", []):
                    response_headers[key.decode(HEADERS_ENCODING)] = value.decode(HEADERS_ENCODING)
                logger.debug("Application response started: status=%d", status_code)
            elif message["type"] == "http.response.body":
                body_chunk = message.get("body", b"")
                if body_chunk:
                    response_body_chunks.append(body_chunk)

        try:
            await self.app(scope, receive, inner_send)
        except Exception as e:
            logger.error(
                "Error calling wrapped application: method=%s path=%s error=%s",
                method,
                path,
                str(e),
                exc_info=True,
            )
            raise

        if not response_started:
            logger.warning("Application finished without starting a response: method=%s path=%s", method, path)
            return

        request = self._asgi_to_internal_request(scope)
        response = Response(
            status_code=status_code,
            headers=response_headers,
            stream=make_async_iterator(response_body_chunks),
        )

        response = self.pipeline.finalize(request, response)

        if response.status_code != status_code:
            logger.info(
                "Conditional request answered: method=%s path=%s status=%d original_status=%d",
                method,
                path,
                response.status_code,
                status_code,
            )

        await self._send_internal_response(response, send)

    def _asgi_to_internal_request(self, scope: _Scope) -> Request:
        scheme = scope.get("scheme", "http")
        server = scope.get("server") or ("localhost", 80)

        host = server[0]
        port = server[1] if server[1] is not None else (443 if scheme == "https" else 80)
        if (scheme == "http" and port != 80) or (scheme == "https" and port != 443):
            host = f"{host}:{port}"

        path = scope.get("path", "/")
        query_string = scope.get("query_string", b"")
        if query_string:
            path = f"{path}?{query_string.decode(HEADERS_ENCODING)}"

        headers = Headers({})
        for key, value in scope.get("headers", []):
            headers[key.decode(HEADERS_ENCODING)] = value.decode(HEADERS_ENCODING)

        return Request(
            method=scope.get("method", "GET"),
            url=f"{scheme}://{host}{path}",
            headers=headers,
        )

    async def _send_internal_response(self, response: Response, send: _Send) -> None:
        if response.status_code == 412 and "content-length" in response.headers:
            # 412 goes out without a body
            del response.headers["content-length"]
            response.headers["content-length"] = "0"

        headers: list[tuple[bytes, bytes]] = [
            (key.encode(HEADERS_ENCODING), value.encode(HEADERS_ENCODING))
            for key in response.headers
            for value in response.headers.get_list(key) or []
        ]

        await send(
            {
                "type": "http.response.start",
                "status": response.status_code,
                "headers": headers,
            }
        )

        async for chunk in response._aiter_stream():
            await send(
                {
                    "type": "http.response.body",
                    "body": chunk,
                    "more_body": True,
                }
            )

        await send(
            {
                "type": "http.response.body",
                "body": b"",
                "more_body": False,
            }
        )
