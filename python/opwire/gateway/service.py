"""Transport-neutral HTTP gateway over operation dispatchers.

The ServiceGateway maps one HTTP-shaped request onto a dispatcher:

- the path is ``<service path>/<operation>``; the service path selects
  the dispatcher
- query parameters and JSON body fields form the non-header parameters
- vendor headers form the header parameters
- POST is always allowed; GET, PUT and DELETE only for operations whose
  name matches the configured pattern for that verb

Every outcome is a GatewayResponse. Failures are rendered as
``{"message": ...}`` with 404, 400, 405 or 500.

Example:
    >>> gateway = (
    ...     GatewayBuilder({"accounts": OperationDispatcher(Accounts)})
    ...     .with_vendor("Acme")
    ...     .with_supported_get_operations("get.*")
    ...     .build()
    ... )
    >>> gateway.handle("GET", "/accounts/getBalance", {"accountId": ["7"]}).status
    200
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping

from pydantic_core import from_json

from ..conversion import JsonCodec, PydanticJsonCodec
from ..dispatcher import OperationDispatcher
from ..errors import BadRequestError, InternalServerError, NotFoundError, OperationFailure
from ..logging import log_error, log_info, log_warn
from ..types import FailureKind, GatewayResponse
from .headers import process_vendor_headers
from .query import simplify_query_parameters

POST = "POST"
GET = "GET"
PUT = "PUT"
DELETE = "DELETE"

JSON_CONTENT_TYPE = "application/json"
GENERIC_ERROR_MESSAGE = "Internal server error"

STATUS_BY_KIND: dict[FailureKind, int] = {
    FailureKind.NOT_FOUND: 404,
    FailureKind.BAD_REQUEST: 400,
    FailureKind.INTERNAL_SERVER_ERROR: 500,
}


def compile_operation_pattern(regexes: Iterable[str]) -> re.Pattern[str] | None:
    """Join regular expressions with ``|`` into one case-insensitive pattern.

    Returns None when no expressions are given.
    """
    parts = [r for r in regexes if r]
    if not parts:
        return None
    return re.compile("|".join(parts), re.IGNORECASE)


class ServiceGateway:
    """Routes HTTP-shaped requests to operation dispatchers.

    Attributes:
        vendor: Vendor name for header objects, or None.
    """

    def __init__(
        self,
        services: Mapping[str, OperationDispatcher],
        *,
        vendor: str | None = None,
        supported_get_operations: re.Pattern[str] | None = None,
        supported_put_operations: re.Pattern[str] | None = None,
        supported_delete_operations: re.Pattern[str] | None = None,
        json_codec: JsonCodec | None = None,
    ) -> None:
        """Initialize the gateway.

        Prefer GatewayBuilder over calling this directly.

        Args:
            services: Service path to dispatcher.
            vendor: Vendor name for header objects.
            supported_get_operations: Operation names allowed over GET.
            supported_put_operations: Operation names allowed over PUT.
            supported_delete_operations: Operation names allowed over DELETE.
            json_codec: Codec for response bodies and body fields.
        """
        self._services = dict(services)
        self.vendor = vendor
        self._verb_patterns: dict[str, re.Pattern[str] | None] = {
            GET: supported_get_operations,
            PUT: supported_put_operations,
            DELETE: supported_delete_operations,
        }
        self._codec = json_codec or PydanticJsonCodec()

    @property
    def service_paths(self) -> list[str]:
        return sorted(self._services)

    def supported_methods(self, operation_name: str) -> list[str]:
        """HTTP methods allowed for an operation, POST first."""
        methods = [POST]
        for verb, pattern in self._verb_patterns.items():
            if pattern is not None and pattern.fullmatch(operation_name):
                methods.append(verb)
        return methods

    def handle(
        self,
        method: str,
        path: str,
        query: Mapping[str, Iterable[str]] | None = None,
        headers: Mapping[str, str] | None = None,
        body: str | bytes | None = None,
    ) -> GatewayResponse:
        """Handle one request.

        Args:
            method: HTTP method.
            path: Request path, ``<service path>/<operation>``.
            query: Query key to its values.
            headers: Request headers.
            body: JSON object body, or None.

        Returns:
            The response.
        """
        method = method.upper()
        path = path.strip("/")
        log_info(f"{method} {path}")

        operation_name = path[path.rfind("/") + 1 :]

        if method != POST:
            allowed = self.supported_methods(operation_name)
            if method not in allowed:
                log_warn(f"{method} not supported for {path}", {"operation": operation_name})
                return self._error_response(
                    405,
                    f"{method} is not supported for {operation_name}",
                    headers={"Allow": ", ".join(allowed)},
                )

        try:
            dispatcher = self._dispatcher_for(path)
            non_header = simplify_query_parameters(query or {})
            non_header.update(self._body_parameters(body))
            header = process_vendor_headers(headers, self.vendor)
            result = dispatcher.invoke_operation(operation_name, non_header, header)
        except OperationFailure as failure:
            return self._failure_response(failure)

        try:
            encoded = self._codec.encode(result)
        except Exception as e:
            log_error(
                f"Error encoding response from {path}: {e}",
                {"operation": operation_name, "error_type": type(e).__name__},
            )
            return self._failure_response(InternalServerError(cause=e))

        return GatewayResponse(
            status=200,
            body=encoded,
            headers={"Content-Type": JSON_CONTENT_TYPE},
        )

    def _dispatcher_for(self, path: str) -> OperationDispatcher:
        if "/" not in path:
            log_warn(f"Path {path} should include an operation")
            raise NotFoundError(f"Path '{path}' does not name an operation")

        service_path = path[: path.rfind("/")]
        dispatcher = self._services.get(service_path)
        if dispatcher is None:
            log_warn(f"No service mapped for {service_path}")
            raise NotFoundError(f"No service mapped for '{service_path}'")
        return dispatcher

    def _body_parameters(self, body: str | bytes | None) -> dict[str, str | None]:
        if body is None:
            return {}
        if isinstance(body, bytes):
            body = body.decode("utf-8", errors="replace")
        if not body.strip():
            return {}

        try:
            document = from_json(body)
        except ValueError as e:
            raise BadRequestError("Request body is not valid JSON") from e
        if not isinstance(document, dict):
            raise BadRequestError("Request body must be a JSON object")

        # Text passes through, null is absent, anything else is re-encoded
        return {
            key: value if value is None or isinstance(value, str) else self._codec.encode(value)
            for key, value in document.items()
        }

    def _failure_response(self, failure: OperationFailure) -> GatewayResponse:
        status = STATUS_BY_KIND.get(failure.kind, 500)
        if status != 500:
            return self._error_response(status, failure.message)

        log_error(
            f"Internal failure: {failure.message}",
            {"error_type": type(failure.__cause__ or failure).__name__},
        )
        return self._error_response(status, GENERIC_ERROR_MESSAGE)

    def _error_response(
        self,
        status: int,
        message: str,
        headers: dict[str, str] | None = None,
    ) -> GatewayResponse:
        return GatewayResponse(
            status=status,
            body=self._codec.encode({"message": message}),
            headers={"Content-Type": JSON_CONTENT_TYPE, **(headers or {})},
        )

    def __repr__(self) -> str:
        return f"ServiceGateway({self.service_paths})"


__all__ = [
    "ServiceGateway",
    "compile_operation_pattern",
    "STATUS_BY_KIND",
]
