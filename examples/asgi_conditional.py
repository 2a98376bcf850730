#!/usr/bin/env uv run
# /// script
# requires-python = ">=3.9"
# dependencies = [
#     "notmodified",
#     "httpx",
# ]
#
# [tool.uv.sources]
# notmodified = { path = "../", editable = true }
# ///

import asyncio
import hashlib
import logging

import httpx

from notmodified.asgi import ASGIConditionalMiddleware

logging.basicConfig(level=logging.DEBUG)

BODY = b"Hello, World!"


async def app(scope, receive, send):
    await send(
        {
            "type": "http.response.start",
            "status": 200,
            "headers": [
                (b"content-type", b"text/plain"),
                (b"etag", b'"' + hashlib.md5(BODY).hexdigest().encode() + b'"'),
                (b"last-modified", b"Sun, 06 Nov 1994 08:49:37 GMT"),
            ],
        }
    )
    await send({"type": "http.response.body", "body": BODY, "more_body": False})


async def main():
    transport = httpx.ASGITransport(app=ASGIConditionalMiddleware(app))
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as client:
        first = await client.get("/")
        print(first.status_code, first.headers["etag"])

        second = await client.get("/", headers={"If-None-Match": first.headers["etag"]})
        print(second.status_code, second.content)

        third = await client.put("/", headers={"If-Match": '"stale"'})
        print(third.status_code)


asyncio.run(main())
