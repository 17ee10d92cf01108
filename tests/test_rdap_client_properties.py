"""
Property-based tests for the RDAP client module.

HTTP traffic is served by httpx.MockTransport, so no network access is needed.
"""

import asyncio

import httpx
from hypothesis import given, settings
from hypothesis import strategies as st

from dmncheck.enums import ProbeOutcome, RDAPErrorCode
from dmncheck.rdap_client import RDAPClient, build_query_url


def run_query(handler, endpoint: str = "https://rdap.example/", domain: str = "example.com"):
    async def go():
        async with RDAPClient(transport=httpx.MockTransport(handler)) as client:
            return await client.query(endpoint, domain)

    return asyncio.run(go())


class TestQueryURL:
    """Query URLs are the endpoint followed by domain/<name>."""

    def test_endpoint_with_trailing_slash(self) -> None:
        assert build_query_url("https://rdap.verisign.com/com/v1/", "example.com") == (
            "https://rdap.verisign.com/com/v1/domain/example.com"
        )

    def test_endpoint_without_trailing_slash(self) -> None:
        assert build_query_url("https://rdap.nic.example", "a.example") == (
            "https://rdap.nic.example/domain/a.example"
        )

    def test_request_is_sent_to_query_url(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(404)

        run_query(handler, endpoint="https://rdap.example/v1/", domain="foo.example")

        assert len(seen) == 1
        assert seen[0].method == "GET"
        assert str(seen[0].url) == "https://rdap.example/v1/domain/foo.example"
        assert "application/rdap+json" in seen[0].headers["Accept"]


class TestAvailabilityClassificationProperty:
    """404 means available, any 2xx means registered, anything else is retryable."""

    def test_404_is_available(self) -> None:
        result = run_query(lambda request: httpx.Response(404))
        assert result.outcome == ProbeOutcome.AVAILABLE
        assert result.available is True
        assert result.http_status_code == 404

    def test_200_is_registered(self) -> None:
        result = run_query(lambda request: httpx.Response(200, json={"ldhName": "example.com"}))
        assert result.outcome == ProbeOutcome.REGISTERED
        assert result.available is False

    @given(status=st.integers(min_value=200, max_value=299))
    @settings(max_examples=20)
    def test_any_success_status_is_registered(self, status: int) -> None:
        result = RDAPClient.classify_response("example.com", httpx.Response(status))
        assert result.outcome == ProbeOutcome.REGISTERED

    @given(
        status=st.integers(min_value=100, max_value=599).filter(
            lambda s: s != 404 and not 200 <= s <= 299
        )
    )
    @settings(max_examples=100)
    def test_other_statuses_are_retryable(self, status: int) -> None:
        result = RDAPClient.classify_response("example.com", httpx.Response(status))
        assert result.outcome == ProbeOutcome.RETRYABLE_FAILURE
        assert result.error_code == RDAPErrorCode.UNEXPECTED_STATUS
        assert result.http_status_code == status

    def test_500_is_retryable(self) -> None:
        result = run_query(lambda request: httpx.Response(500))
        assert result.outcome == ProbeOutcome.RETRYABLE_FAILURE
        assert not result.outcome.is_definitive


class TestTransportFailures:
    """Transport errors become results instead of exceptions."""

    def test_timeout(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        result = run_query(handler)
        assert result.outcome == ProbeOutcome.RETRYABLE_FAILURE
        assert result.error_code == RDAPErrorCode.TIMEOUT
        assert result.http_status_code == 0

    def test_connect_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("name resolution failed", request=request)

        result = run_query(handler)
        assert result.outcome == ProbeOutcome.RETRYABLE_FAILURE
        assert result.error_code == RDAPErrorCode.NETWORK_ERROR
        assert "ConnectError" in result.error_message

    def test_unsupported_protocol_is_fatal(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.UnsupportedProtocol("unsupported scheme", request=request)

        result = run_query(handler)
        assert result.outcome == ProbeOutcome.FATAL_FAILURE
        assert result.error_code == RDAPErrorCode.INVALID_URL

    def test_client_is_closed_on_exit(self) -> None:
        client = RDAPClient(transport=httpx.MockTransport(lambda request: httpx.Response(404)))

        async def go() -> None:
            async with client:
                await client.query("https://rdap.example/", "a.example")

        asyncio.run(go())
        assert client._client is None
