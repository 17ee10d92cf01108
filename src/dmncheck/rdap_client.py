"""
RDAP client for domain availability lookups.

This module performs exactly one RDAP domain lookup per call and classifies
the outcome. It never raises for network problems: every failure becomes a
ProbeResult so the retry layer can decide what to do with it.

Classification:
- HTTP 404 -> AVAILABLE
- any 2xx -> REGISTERED
- any other status, timeouts, connection errors -> RETRYABLE_FAILURE
- invalid or unsupported endpoint URLs -> FATAL_FAILURE
"""

from dataclasses import dataclass
from typing import Optional
import time

import httpx

from .enums import ProbeOutcome, RDAPErrorCode


@dataclass
class ProbeResult:
    """Result of a single RDAP lookup."""

    domain: str
    outcome: ProbeOutcome
    http_status_code: int = 0
    error_code: Optional[RDAPErrorCode] = None
    error_message: Optional[str] = None
    response_time_ms: float = 0.0

    @property
    def available(self) -> bool:
        return self.outcome == ProbeOutcome.AVAILABLE


def build_query_url(endpoint: str, domain: str) -> str:
    """Join a service base URL and a domain into an RDAP domain query URL."""
    if not endpoint.endswith("/"):
        endpoint += "/"
    return f"{endpoint}domain/{domain}"


class RDAPClient:
    """
    Async RDAP client.

    Owns one httpx.AsyncClient for its lifetime so concurrent lookups share
    a connection pool. Use as an async context manager.
    """

    def __init__(
        self,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        max_connections: Optional[int] = None,
    ) -> None:
        """
        Initialize the RDAP client.

        Args:
            timeout: Request timeout in seconds
            transport: Optional httpx transport (tests pass httpx.MockTransport)
            max_connections: Optional connection pool ceiling
        """
        self._timeout = timeout
        self._transport = transport
        self._limits = httpx.Limits(max_connections=max_connections)
        self._client: Optional[httpx.AsyncClient] = None

    async def __aenter__(self) -> "RDAPClient":
        self._ensure_client()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    def _ensure_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self._timeout),
                follow_redirects=True,
                limits=self._limits,
                transport=self._transport,
            )
        return self._client

    async def query(self, endpoint: str, domain: str) -> ProbeResult:
        """
        Look up one domain at one RDAP service.

        Args:
            endpoint: Service base URL from the bootstrap registry
            domain: Canonical domain name

        Returns:
            ProbeResult classifying the response
        """
        client = self._ensure_client()
        url = build_query_url(endpoint, domain)
        start_time = time.perf_counter()

        try:
            response = await client.get(
                url,
                headers={"Accept": "application/rdap+json, application/json"},
            )
        except (httpx.InvalidURL, httpx.UnsupportedProtocol) as e:
            return ProbeResult(
                domain=domain,
                outcome=ProbeOutcome.FATAL_FAILURE,
                error_code=RDAPErrorCode.INVALID_URL,
                error_message=f"Invalid RDAP URL {url}: {e}",
                response_time_ms=self._elapsed_ms(start_time),
            )
        except httpx.TimeoutException:
            return ProbeResult(
                domain=domain,
                outcome=ProbeOutcome.RETRYABLE_FAILURE,
                error_code=RDAPErrorCode.TIMEOUT,
                error_message=f"RDAP request timed out after {self._timeout}s",
                response_time_ms=self._elapsed_ms(start_time),
            )
        except httpx.HTTPError as e:
            return ProbeResult(
                domain=domain,
                outcome=ProbeOutcome.RETRYABLE_FAILURE,
                error_code=RDAPErrorCode.NETWORK_ERROR,
                error_message=f"{type(e).__name__}: {e}",
                response_time_ms=self._elapsed_ms(start_time),
            )

        return self.classify_response(domain, response, self._elapsed_ms(start_time))

    @staticmethod
    def classify_response(
        domain: str,
        response: httpx.Response,
        response_time_ms: float = 0.0,
    ) -> ProbeResult:
        """Map an HTTP response onto a probe outcome."""
        status = response.status_code

        if status == 404:
            outcome = ProbeOutcome.AVAILABLE
        elif response.is_success:
            outcome = ProbeOutcome.REGISTERED
        else:
            return ProbeResult(
                domain=domain,
                outcome=ProbeOutcome.RETRYABLE_FAILURE,
                http_status_code=status,
                error_code=RDAPErrorCode.UNEXPECTED_STATUS,
                error_message=f"Unexpected HTTP status: {status}",
                response_time_ms=response_time_ms,
            )

        return ProbeResult(
            domain=domain,
            outcome=outcome,
            http_status_code=status,
            response_time_ms=response_time_ms,
        )

    def _elapsed_ms(self, start_time: float) -> float:
        """Calculate elapsed time in milliseconds."""
        return (time.perf_counter() - start_time) * 1000

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None
