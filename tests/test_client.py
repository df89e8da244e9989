"""Tests for OperationClient.

The client is exercised against a real gateway through httpx's WSGI
transport, and against httpx.MockTransport for transport-level cases.
"""

from __future__ import annotations

import json

import httpx
import pytest

from opwire import (
    BadRequestError,
    InternalServerError,
    NotFoundError,
    OperationClient,
    WsgiAdapter,
)
from tests.services.sample_services import EXPECTED_RESPONSE, THROW_TRIGGER

BASE_URL = "http://testserver"


@pytest.fixture
def client(gateway):
    """Client wired to the sample gateway in-process."""
    transport = httpx.WSGITransport(app=WsgiAdapter(gateway))
    with OperationClient(BASE_URL, vendor="Acme", transport=transport) as operation_client:
        yield operation_client


def mock_client(handler, **kwargs):
    return OperationClient(BASE_URL, transport=httpx.MockTransport(handler), **kwargs)


# =============================================================================
# Round Trip Tests
# =============================================================================


class TestInvoke:
    """Tests for successful invocations."""

    def test_string_result(self, client):
        assert client.invoke("mocked", "mockedMethod", {"parameter": "x"}) == EXPECTED_RESPONSE

    def test_non_string_parameters_sent_as_json(self, client):
        assert client.invoke("mocked", "mockedMethodWithIntArg", {"intParameter": 34}) == 34
        assert client.invoke("mocked", "mockedMethodWithBooleanArg", {"booleanParameter": True})

    def test_object_parameter(self, client):
        result = client.invoke(
            "mocked",
            "mockedMethodWithCustomParameterClassArg",
            {"customParameter": {"fieldOne": "a", "fieldTwo": 2}},
        )
        assert result == {"fieldOne": "a", "fieldTwo": 2}

    def test_nested_service_path(self, client):
        assert client.invoke("/finance/ledger/", "balance", {"account": "vip"}) == 250

    def test_header_objects(self, client):
        result = client.invoke(
            "finance/ledger",
            "transfer",
            {"source": "a", "target": "b", "amount": 5},
            headers={"session": {"user": "alice"}},
        )
        assert result == {
            "source": "a",
            "target": "b",
            "amount": 5,
            "session": '{"user":"alice"}',
        }

    def test_none_result(self, client):
        assert client.invoke("values", "nothing") is None


# =============================================================================
# Failure Tests
# =============================================================================


class TestInvokeFailures:
    """Tests for error responses turned back into failures."""

    @pytest.mark.parametrize(
        ("service", "operation", "parameters", "failure_type", "message"),
        [
            ("finance/ledger", "lookup", {"key": "missing"}, NotFoundError,
             "No record for missing"),
            ("finance/ledger", "lookup", {"key": "invalid"}, BadRequestError,
             "Key 'invalid' is not valid"),
            ("finance/ledger", "lookup", {"key": "boom"}, InternalServerError,
             "Internal server error"),
            ("mocked", "mockedMethod", {"parameter": THROW_TRIGGER}, BadRequestError,
             "Service rejected the request"),
            ("mocked", "overloadedMethod", {"parameter": "x"}, BadRequestError,
             "Unable to distinguish methods"),
            ("nowhere", "lookup", {}, NotFoundError, "No service mapped for 'nowhere'"),
        ],
    )
    def test_failures(self, client, service, operation, parameters, failure_type, message):
        with pytest.raises(failure_type) as exc_info:
            client.invoke(service, operation, parameters)
        assert exc_info.value.message == message

    def test_status_code_metadata(self, client):
        with pytest.raises(NotFoundError) as exc_info:
            client.invoke("finance/ledger", "lookup", {"key": "gone"})
        assert exc_info.value.metadata == {"status_code": 404}

    def test_method_not_allowed_is_bad_request(self):
        def handler(request):
            return httpx.Response(405, json={"message": "GET is not supported for lookup"})

        with pytest.raises(BadRequestError) as exc_info:
            mock_client(handler).invoke("ledger", "lookup")
        assert exc_info.value.metadata == {"status_code": 405}

    def test_non_json_error_body(self):
        def handler(request):
            return httpx.Response(502, text="bad gateway")

        with pytest.raises(InternalServerError) as exc_info:
            mock_client(handler).invoke("ledger", "lookup")
        assert exc_info.value.message == "HTTP 502"

    def test_transport_error(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(InternalServerError) as exc_info:
            mock_client(handler).invoke("ledger", "lookup")
        assert isinstance(exc_info.value.cause, httpx.ConnectError)


# =============================================================================
# Request Tests
# =============================================================================


class TestRequests:
    """Tests for the requests the client sends."""

    @pytest.fixture
    def captured(self):
        return []

    @pytest.fixture
    def recording_client(self, captured):
        def handler(request):
            captured.append(request)
            return httpx.Response(200, content=b"")

        client = mock_client(handler, vendor="Acme")
        yield client
        client.close()

    def test_post_with_json_body(self, recording_client, captured):
        assert recording_client.invoke("ledger", "balance", {"account": "7"}) is None

        (request,) = captured
        assert request.method == "POST"
        assert request.url.path == "/ledger/balance"
        assert request.headers["Accept"] == "application/json"
        assert json.loads(request.content) == {"account": "7"}

    def test_vendor_headers(self, recording_client, captured):
        recording_client.invoke(
            "ledger",
            "balance",
            headers={"session": {"user": "alice", "locale": "en"}, "X-Trace-Id": "t-1"},
        )

        headers = captured[0].headers
        assert headers["X-Acme-Session"] == "user=alice;locale=en"
        assert headers["X-Trace-Id"] == "t-1"

    def test_headers_without_vendor(self, captured):
        def handler(request):
            captured.append(request)
            return httpx.Response(200, json=1)

        mock_client(handler).invoke("ledger", "balance", headers={"Session": "user=alice"})
        assert captured[0].headers["Session"] == "user=alice"
