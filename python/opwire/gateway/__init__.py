"""HTTP gateway over operation dispatchers.

This package wires HTTP-shaped requests onto dispatchers without tying
them to a web framework:

- query: query string flattening
- headers: vendor header objects
- service: the ServiceGateway itself
- builder: fluent GatewayBuilder
- wsgi: WsgiAdapter, a WSGI application around a gateway

Example:
    >>> from opwire.gateway import GatewayBuilder, WsgiAdapter
    >>>
    >>> gateway = GatewayBuilder({"accounts": Accounts}).with_vendor("Acme").build()
    >>> app = WsgiAdapter(gateway)
"""

from __future__ import annotations

from .builder import GatewayBuilder
from .headers import process_vendor_headers
from .query import parse_query, simplify_query_parameters
from .service import ServiceGateway, compile_operation_pattern
from .wsgi import WsgiAdapter

__all__ = [
    "GatewayBuilder",
    "ServiceGateway",
    "WsgiAdapter",
    "compile_operation_pattern",
    "parse_query",
    "process_vendor_headers",
    "simplify_query_parameters",
]
