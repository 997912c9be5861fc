"""Test helper functions."""

import json
from io import BytesIO
from typing import Any, Dict, NamedTuple, Optional


class MockSocket:
    """Socket stand-in that feeds one raw request and records the response."""

    def __init__(self, raw_request: bytes):
        self._request = raw_request
        self.sent = b""

    def makefile(self, *args, **kwargs):
        return BytesIO(self._request)

    def sendall(self, data):
        self.sent += bytes(data)

    def close(self):
        pass


class HandlerResponse(NamedTuple):
    status: int
    body: Any
    headers: Dict[str, str]


def build_request(method: str = "GET", path: str = "/api/health", headers: Optional[Dict[str, str]] = None) -> bytes:
    """Raw HTTP/1.1 request bytes."""
    lines = [f"{method} {path} HTTP/1.1"]
    for name, value in (headers or {}).items():
        lines.append(f"{name}: {value}")
    return ("\r\n".join(lines) + "\r\n\r\n").encode("utf-8")


def call_handler(
    handler_cls, method: str = "GET", path: str = "/", headers: Optional[Dict[str, str]] = None
) -> HandlerResponse:
    """Run one request through a Vercel handler class and parse the JSON response."""
    sock = MockSocket(build_request(method, path, headers))
    handler_cls(sock, ("127.0.0.1", 8000), None)

    head, _, body = sock.sent.partition(b"\r\n\r\n")
    status_line, *header_lines = head.decode("utf-8").split("\r\n")
    response_headers = dict(line.split(": ", 1) for line in header_lines)
    return HandlerResponse(int(status_line.split(" ", 2)[1]), json.loads(body.decode("utf-8")), response_headers)
