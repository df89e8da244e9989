"""HTTP client for operations exposed through a ServiceGateway.

The OperationClient POSTs parameters as a JSON object body and turns
error responses back into the categorized failures the server raised.

Example:
    >>> from opwire.client import OperationClient
    >>>
    >>> with OperationClient("https://api.example.com/soap", vendor="Acme") as client:
    ...     balance = client.invoke(
    ...         "accounts",
    ...         "getBalance",
    ...         {"accountId": "7"},
    ...         headers={"Session": {"user": "alice"}},
    ...     )
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import httpx

from .errors import BadRequestError, InternalServerError, NotFoundError, OperationFailure
from .logging import log_debug, log_error

# HTTP status code classifications
BAD_REQUEST_STATUS_CODES = {400, 405}
NOT_FOUND_STATUS_CODES = {404}


class OperationClient:
    """Invokes remote operations over HTTP.

    Attributes:
        base_url: Base URL the gateway is mounted at.
        vendor: Vendor name for header objects, or None.
    """

    def __init__(
        self,
        base_url: str,
        *,
        vendor: str | None = None,
        timeout: float = 30.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            base_url: Base URL the gateway is mounted at.
            vendor: Vendor name for ``X-<vendor>-<Object>`` headers.
            timeout: Request timeout in seconds.
            transport: Optional httpx transport (e.g. ``httpx.WSGITransport``).
        """
        self.base_url = base_url.rstrip("/")
        self.vendor = vendor
        self._client = httpx.Client(
            base_url=self.base_url,
            timeout=timeout,
            headers={"Accept": "application/json"},
            transport=transport,
        )

    def invoke(
        self,
        service_path: str,
        operation: str,
        parameters: Mapping[str, Any] | None = None,
        headers: Mapping[str, Any] | None = None,
    ) -> Any:
        """Invoke one operation.

        Args:
            service_path: Path the service is mapped at.
            operation: Operation name.
            parameters: Non-header parameters; non-string values are sent as JSON.
            headers: Header objects by name. Mapping values are sent as
                ``X-<vendor>-<Name>: key=value;...``, strings as given.

        Returns:
            The decoded JSON result.

        Raises:
            NotFoundError: The server answered 404.
            BadRequestError: The server answered 400 or 405.
            InternalServerError: Any other error status, or a transport failure.
        """
        path = f"/{service_path.strip('/')}/{operation}"
        log_debug(f"POST {self.base_url}{path}", {"operation": operation})

        try:
            response = self._client.post(
                path,
                json=dict(parameters or {}),
                headers=self._request_headers(headers),
            )
        except httpx.HTTPError as e:
            log_error(f"Request to {path} failed: {e}", {"error_type": type(e).__name__})
            raise InternalServerError(cause=e) from e

        if response.status_code >= 400:
            raise self._failure_for(response)

        if not response.content:
            return None
        return response.json()

    def _request_headers(self, headers: Mapping[str, Any] | None) -> dict[str, str]:
        if not headers:
            return {}

        request_headers: dict[str, str] = {}
        for name, value in headers.items():
            if self.vendor and not name.lower().startswith("x-"):
                name = f"X-{self.vendor}-{name[:1].upper()}{name[1:]}"
            if isinstance(value, Mapping):
                value = ";".join(f"{k}={v}" for k, v in value.items())
            request_headers[name] = str(value)
        return request_headers

    @staticmethod
    def _failure_for(response: httpx.Response) -> OperationFailure:
        try:
            body = response.json()
        except ValueError:
            body = None

        message = body.get("message") if isinstance(body, dict) else None
        message = message or f"HTTP {response.status_code}"
        status_code = response.status_code

        if status_code in NOT_FOUND_STATUS_CODES:
            return NotFoundError(message, metadata={"status_code": status_code})
        if status_code in BAD_REQUEST_STATUS_CODES:
            return BadRequestError(message, metadata={"status_code": status_code})
        return InternalServerError(message, metadata={"status_code": status_code})

    def close(self) -> None:
        """Close the HTTP client."""
        self._client.close()

    def __enter__(self) -> OperationClient:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()


__all__ = ["OperationClient"]
