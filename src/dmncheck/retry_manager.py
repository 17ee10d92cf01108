"""
Retry Manager for availability probes.

The default policy waits a fixed delay after every failed lookup and retries
without limit, so a probe either eventually produces a definitive answer or
runs until the process is stopped. Attempt caps, backoff and the set of
retried outcomes are all configurable through RetryConfig.
"""

from __future__ import annotations

import asyncio
from typing import Awaitable, Callable, Optional

from .config import RetryConfig
from .exceptions import ProbeError, RetryExhaustedError
from .rdap_client import ProbeResult

SleepFunc = Callable[[float], Awaitable[None]]


class RetryManager:
    """
    Runs a probe operation until it returns a definitive outcome.

    Args:
        config: Retry configuration
        sleep: Coroutine used to wait between attempts (tests inject a fake)
        on_retry: Optional callback invoked with (result, attempt, delay)
            before each wait
    """

    def __init__(
        self,
        config: Optional[RetryConfig] = None,
        sleep: SleepFunc = asyncio.sleep,
        on_retry: Optional[Callable[[ProbeResult, int, float], None]] = None,
    ) -> None:
        self._config = config or RetryConfig()
        self._sleep = sleep
        self._on_retry = on_retry

    @property
    def config(self) -> RetryConfig:
        return self._config

    def calculate_delay(self, attempt: int) -> float:
        """
        Delay before retry number ``attempt`` (0-indexed).

        With the default multiplier of 1.0 this is the fixed base delay.
        """
        delay = self._config.delay_seconds * (self._config.backoff_multiplier ** attempt)
        return min(delay, self._config.max_delay_seconds)

    def should_retry(self, result: ProbeResult) -> bool:
        if result.outcome.is_definitive:
            return False
        return result.outcome in self._config.retry_on

    def _attempts_left(self, attempts: int) -> bool:
        max_attempts = self._config.max_attempts
        return max_attempts is None or attempts < max_attempts

    async def execute_probe_with_retry(
        self,
        operation: Callable[[], Awaitable[ProbeResult]],
    ) -> tuple[ProbeResult, int]:
        """
        Execute a probe operation with retry.

        Args:
            operation: Zero-argument coroutine factory performing one lookup

        Returns:
            Tuple of (definitive ProbeResult, number of attempts)

        Raises:
            ProbeError: If a failure outcome is not in ``retry_on``
            RetryExhaustedError: If ``max_attempts`` is reached
        """
        attempts = 0

        while True:
            result = await operation()
            attempts += 1

            if result.outcome.is_definitive:
                return result, attempts

            if not self.should_retry(result):
                raise ProbeError(
                    code=result.outcome.value,
                    message=f"Probe for {result.domain} failed: {result.error_message}",
                    details={
                        "domain": result.domain,
                        "http_status_code": result.http_status_code,
                        "attempts": attempts,
                    },
                )

            if not self._attempts_left(attempts):
                raise RetryExhaustedError(
                    code="retry_exhausted",
                    message=(
                        f"Probe for {result.domain} failed after {attempts} attempts: "
                        f"{result.error_message}"
                    ),
                    details={
                        "domain": result.domain,
                        "http_status_code": result.http_status_code,
                        "attempts": attempts,
                    },
                )

            delay = self.calculate_delay(attempts - 1)
            if self._on_retry:
                self._on_retry(result, attempts, delay)
            await self._sleep(delay)
