"""
Property-based tests for the Retry Manager module.

Sleeping is replaced with a recording coroutine so retry delays can be
counted without waiting.
"""

import asyncio

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from dmncheck.config import RetryConfig
from dmncheck.enums import ProbeOutcome
from dmncheck.exceptions import ProbeError, RetryExhaustedError
from dmncheck.rdap_client import ProbeResult
from dmncheck.retry_manager import RetryManager


class RecordingSleep:
    """Async sleep double that records requested delays."""

    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


def scripted_operation(outcomes: list[ProbeOutcome]):
    """Operation returning the given outcomes in order."""
    calls = iter(outcomes)

    async def operation() -> ProbeResult:
        return ProbeResult(
            domain="example.com",
            outcome=next(calls),
            error_message="scripted",
        )

    return operation


failure_outcome = st.sampled_from([ProbeOutcome.RETRYABLE_FAILURE, ProbeOutcome.FATAL_FAILURE])
definitive_outcome = st.sampled_from([ProbeOutcome.AVAILABLE, ProbeOutcome.REGISTERED])


class TestFixedDelayProperty:
    """The default policy waits the same delay before every retry."""

    def test_default_delay_is_100ms(self) -> None:
        manager = RetryManager()
        assert [manager.calculate_delay(n) for n in range(5)] == [0.1] * 5

    @given(
        base=st.floats(min_value=0.001, max_value=1.0),
        multiplier=st.floats(min_value=1.0, max_value=4.0),
        cap=st.floats(min_value=0.5, max_value=10.0),
    )
    @settings(max_examples=100)
    def test_backoff_is_non_decreasing_and_capped(
        self, base: float, multiplier: float, cap: float
    ) -> None:
        manager = RetryManager(RetryConfig(
            delay_seconds=base,
            backoff_multiplier=multiplier,
            max_delay_seconds=cap,
        ))
        delays = [manager.calculate_delay(n) for n in range(8)]

        assert all(d <= cap for d in delays)
        assert all(later >= earlier for earlier, later in zip(delays, delays[1:]))


class TestRetryTerminationProperty:
    """Failures are retried until a definitive outcome arrives."""

    def test_fails_twice_then_succeeds(self) -> None:
        sleep = RecordingSleep()
        manager = RetryManager(sleep=sleep)
        operation = scripted_operation([
            ProbeOutcome.RETRYABLE_FAILURE,
            ProbeOutcome.RETRYABLE_FAILURE,
            ProbeOutcome.AVAILABLE,
        ])

        result, attempts = asyncio.run(manager.execute_probe_with_retry(operation))

        assert result.outcome == ProbeOutcome.AVAILABLE
        assert attempts == 3
        assert sleep.delays == [0.1, 0.1]

    @given(
        failures=st.lists(failure_outcome, min_size=0, max_size=30),
        final=definitive_outcome,
    )
    @settings(max_examples=100, deadline=None)
    def test_unbounded_retry_eventually_returns(
        self, failures: list[ProbeOutcome], final: ProbeOutcome
    ) -> None:
        sleep = RecordingSleep()
        manager = RetryManager(sleep=sleep)

        result, attempts = asyncio.run(
            manager.execute_probe_with_retry(scripted_operation(failures + [final]))
        )

        assert result.outcome == final
        assert attempts == len(failures) + 1
        assert len(sleep.delays) == len(failures)

    @given(final=definitive_outcome)
    @settings(max_examples=10, deadline=None)
    def test_definitive_outcome_is_never_retried(self, final: ProbeOutcome) -> None:
        sleep = RecordingSleep()
        manager = RetryManager(sleep=sleep)

        result, attempts = asyncio.run(manager.execute_probe_with_retry(scripted_operation([final])))

        assert attempts == 1
        assert sleep.delays == []


class TestRetryPolicyProperty:
    """Attempt caps and retried outcomes are configurable."""

    @given(max_attempts=st.integers(min_value=1, max_value=10))
    @settings(max_examples=20, deadline=None)
    def test_max_attempts_exhausted(self, max_attempts: int) -> None:
        sleep = RecordingSleep()
        manager = RetryManager(RetryConfig(max_attempts=max_attempts), sleep=sleep)
        operation = scripted_operation([ProbeOutcome.RETRYABLE_FAILURE] * max_attempts)

        with pytest.raises(RetryExhaustedError) as exc_info:
            asyncio.run(manager.execute_probe_with_retry(operation))

        assert exc_info.value.details["attempts"] == max_attempts
        assert len(sleep.delays) == max_attempts - 1

    def test_fatal_failure_not_retried_when_excluded(self) -> None:
        sleep = RecordingSleep()
        config = RetryConfig(retry_on=[ProbeOutcome.RETRYABLE_FAILURE])
        manager = RetryManager(config, sleep=sleep)

        with pytest.raises(ProbeError) as exc_info:
            asyncio.run(manager.execute_probe_with_retry(
                scripted_operation([ProbeOutcome.FATAL_FAILURE])
            ))

        assert not isinstance(exc_info.value, RetryExhaustedError)
        assert exc_info.value.code == ProbeOutcome.FATAL_FAILURE.value
        assert sleep.delays == []

    def test_fatal_failure_retried_by_default(self) -> None:
        manager = RetryManager(sleep=RecordingSleep())
        result, attempts = asyncio.run(manager.execute_probe_with_retry(
            scripted_operation([ProbeOutcome.FATAL_FAILURE, ProbeOutcome.REGISTERED])
        ))
        assert result.outcome == ProbeOutcome.REGISTERED
        assert attempts == 2

    def test_on_retry_callback(self) -> None:
        seen = []
        manager = RetryManager(
            sleep=RecordingSleep(),
            on_retry=lambda result, attempt, delay: seen.append((result.outcome, attempt, delay)),
        )
        asyncio.run(manager.execute_probe_with_retry(
            scripted_operation([ProbeOutcome.RETRYABLE_FAILURE, ProbeOutcome.AVAILABLE])
        ))
        assert seen == [(ProbeOutcome.RETRYABLE_FAILURE, 1, 0.1)]

    def test_should_retry(self) -> None:
        manager = RetryManager()
        for outcome in ProbeOutcome:
            result = ProbeResult(domain="a.com", outcome=outcome)
            assert manager.should_retry(result) is (not outcome.is_definitive)
