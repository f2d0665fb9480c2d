r"""Shared test helpers for the Loki push clients.

This module contains a fake Loki push endpoint used with
``httpx.MockTransport`` so that ``LokiClient`` can be tested without a
running Loki instance.
"""

from __future__ import annotations

__all__ = ["FakeLokiServer", "TEST_URL"]

import json
from typing import Any

import httpx

from loki_logger import PUSH_PATH

TEST_URL = "http://loki.example.com" + PUSH_PATH


class FakeLokiServer:
    """Fake Loki push endpoint storing the streams posted to it.

    Args:
        send_error: Number of requests answered with a 500 status
            before requests are accepted.
        status_code: Status code of the failing responses.
    """

    def __init__(self, send_error: int = 0, status_code: int = 500) -> None:
        self.send_error = send_error
        self.status_code = status_code
        self.streams: list[dict[str, Any]] = []
        self.requests: list[httpx.Request] = []

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=self.transport())

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.url.path != PUSH_PATH:
            return httpx.Response(404)
        if request.method != "POST":
            return httpx.Response(405, headers={"Allow": "POST"}, text="Method Not Allowed")
        if self.send_error > 0:
            self.send_error -= 1
            return httpx.Response(self.status_code, text="Internal Server Error")
        try:
            payload = json.loads(request.content)
        except ValueError:
            return httpx.Response(400, text="Failed to decode request body")
        self.streams.extend(payload["streams"])
        return httpx.Response(204)
