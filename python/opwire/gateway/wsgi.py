"""WSGI application around a ServiceGateway.

Example:
    >>> from wsgiref.simple_server import make_server
    >>> app = WsgiAdapter(gateway)
    >>> make_server("", 8080, app).serve_forever()

WSGI upper-cases header names, so header names reach the gateway in
title case (``HTTP_X_ACME_SESSION_USERID`` becomes
``X-Acme-Session-Userid``). Property headers therefore yield lower-case
keys after the first letter is lowered.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from http import HTTPStatus
from typing import Any

from ..logging import log_debug
from .query import parse_query
from .service import ServiceGateway

StartResponse = Callable[..., Any]


def request_headers(environ: dict[str, Any]) -> dict[str, str]:
    """Rebuild request header names from a WSGI environ."""
    headers: dict[str, str] = {}
    for key, value in environ.items():
        if key.startswith("HTTP_"):
            name = "-".join(part.capitalize() for part in key[5:].split("_"))
            headers[name] = value
    if environ.get("CONTENT_TYPE"):
        headers["Content-Type"] = environ["CONTENT_TYPE"]
    return headers


def read_body(environ: dict[str, Any]) -> bytes:
    """Read the request body, honouring CONTENT_LENGTH."""
    try:
        length = int(environ.get("CONTENT_LENGTH") or 0)
    except ValueError:
        length = 0
    if length <= 0:
        return b""
    return environ["wsgi.input"].read(length)


class WsgiAdapter:
    """WSGI callable delegating every request to a gateway."""

    def __init__(self, gateway: ServiceGateway) -> None:
        self.gateway = gateway

    def __call__(self, environ: dict[str, Any], start_response: StartResponse) -> Iterable[bytes]:
        method = environ.get("REQUEST_METHOD", "GET")
        path = environ.get("PATH_INFO", "")
        log_debug(f"WSGI {method} {path}")

        response = self.gateway.handle(
            method,
            path,
            parse_query(environ.get("QUERY_STRING", "")),
            request_headers(environ),
            read_body(environ),
        )

        body = response.body.encode("utf-8")
        headers = [(name, value) for name, value in response.headers.items()]
        headers.append(("Content-Length", str(len(body))))
        start_response(f"{response.status} {HTTPStatus(response.status).phrase}", headers)
        return [body]


__all__ = ["WsgiAdapter", "request_headers", "read_body"]
