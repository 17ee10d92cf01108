"""
Availability Prober.

Combines the RDAP client and the retry manager: one probe is one domain
checked against one service until a definitive answer arrives.
"""

import asyncio
from typing import Optional

from .audit_logger import AuditLogger
from .enums import LogLevel
from .exceptions import ProbeError, ProbeTimeoutError
from .rdap_client import ProbeResult, RDAPClient, build_query_url
from .retry_manager import RetryManager


class AvailabilityProber:
    """
    Checks whether a single domain is available at an RDAP service.

    Args:
        client: RDAP client used for each lookup
        retry_manager: Retry policy applied to failed lookups
        deadline_seconds: Optional upper bound on the whole probe, retries
            included. None keeps the probe running until it succeeds.
        logger: Optional audit logger
    """

    def __init__(
        self,
        client: RDAPClient,
        retry_manager: Optional[RetryManager] = None,
        deadline_seconds: Optional[float] = None,
        logger: Optional[AuditLogger] = None,
    ) -> None:
        self._client = client
        self._retry_manager = retry_manager or RetryManager()
        self._deadline_seconds = deadline_seconds
        self._logger = logger

    async def probe_result(self, endpoint: str, domain: str) -> ProbeResult:
        """
        Probe a domain and return the definitive lookup result.

        Raises:
            ProbeTimeoutError: If ``deadline_seconds`` elapses first
            ProbeError: If the retry policy gives up
        """

        async def do_query() -> ProbeResult:
            result = await self._client.query(endpoint, domain)
            if not result.outcome.is_definitive:
                self._log_debug(
                    "AvailabilityProber",
                    f"Lookup for {domain} failed: {result.error_message}",
                    {
                        "domain": domain,
                        "endpoint": endpoint,
                        "outcome": result.outcome.value,
                        "http_status_code": result.http_status_code,
                    },
                )
            return result

        try:
            result, attempts = await self._run_with_deadline(
                self._retry_manager.execute_probe_with_retry(do_query),
                endpoint,
                domain,
            )
        except ProbeError as e:
            if self._logger:
                self._logger.log_error(
                    "AvailabilityProber",
                    f"Gave up on {domain}",
                    error=e,
                    request_url=build_query_url(endpoint, domain),
                    additional_data={"domain": domain},
                )
            raise

        if attempts > 1:
            self._log_debug(
                "AvailabilityProber",
                f"{domain} resolved after {attempts} attempts",
                {"domain": domain, "attempts": attempts},
            )
        return result

    async def _run_with_deadline(self, retrying, endpoint: str, domain: str):
        if self._deadline_seconds is None:
            return await retrying
        try:
            return await asyncio.wait_for(retrying, self._deadline_seconds)
        except asyncio.TimeoutError:
            raise ProbeTimeoutError(
                code="probe_timeout",
                message=f"Probe for {domain} exceeded {self._deadline_seconds}s",
                details={"domain": domain, "endpoint": endpoint},
            )

    async def probe(self, endpoint: str, domain: str) -> bool:
        """Return True if the domain is available, False if registered."""
        result = await self.probe_result(endpoint, domain)
        return result.available

    def _log_debug(self, component: str, message: str, data: dict) -> None:
        if self._logger:
            self._logger.log(LogLevel.DEBUG, component, message, data)
