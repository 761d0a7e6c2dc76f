"""Unit tests for the notification circuit breaker.

All timing is driven by an injected fake clock.
"""

import threading

import pytest

from infrastructure.resilience import CircuitBreaker, CircuitState


class FakeClock:
    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def breaker(clock):
    return CircuitBreaker("ntfy", clock=clock)


@pytest.mark.unit
class TestCircuitBreakerThreshold:
    """Tests for opening the circuit."""

    def test_starts_closed(self, breaker):
        """A new breaker allows requests."""
        assert breaker.state == CircuitState.CLOSED
        assert breaker.allow_request() is True

    def test_four_failures_keep_circuit_closed(self, breaker):
        """The circuit stays closed below the threshold."""
        for _ in range(4):
            breaker.record_failure()

        assert breaker.state == CircuitState.CLOSED
        assert breaker.allow_request() is True

    def test_opens_at_exactly_five_failures(self, breaker):
        """The fifth consecutive failure opens the circuit."""
        for _ in range(5):
            breaker.record_failure()

        assert breaker.state == CircuitState.OPEN
        assert breaker.allow_request() is False

    def test_success_resets_failure_count(self, breaker):
        """Any success resets the consecutive failure count."""
        for _ in range(4):
            breaker.record_failure()
        breaker.record_success()
        for _ in range(4):
            breaker.record_failure()

        assert breaker.state == CircuitState.CLOSED
        assert breaker.consecutive_failures == 4


@pytest.mark.unit
class TestCircuitBreakerHalfOpen:
    """Tests for the half-open probe window."""

    def _open(self, breaker):
        for _ in range(5):
            breaker.record_failure()

    def test_rejects_until_window_elapses(self, breaker, clock):
        """Requests are rejected for 30s after the last failure."""
        self._open(breaker)

        clock.advance(30.0)

        assert breaker.allow_request() is False
        assert breaker.state == CircuitState.OPEN

    def test_allows_probe_after_window(self, breaker, clock):
        """After 30s a probe is allowed and the circuit closes."""
        self._open(breaker)

        clock.advance(30.1)

        assert breaker.allow_request() is True
        assert breaker.state == CircuitState.CLOSED
        assert breaker.consecutive_failures == 0

    def test_failing_probe_needs_fresh_threshold(self, breaker, clock):
        """A failed probe counts toward a new threshold of five."""
        self._open(breaker)
        clock.advance(31)
        breaker.allow_request()

        breaker.record_failure()

        assert breaker.state == CircuitState.CLOSED
        assert breaker.consecutive_failures == 1

    def test_success_closes_open_circuit(self, breaker):
        """A recorded success closes an open circuit."""
        self._open(breaker)

        breaker.record_success()

        assert breaker.state == CircuitState.CLOSED
        assert breaker.allow_request() is True


@pytest.mark.unit
class TestCircuitBreakerStats:
    """Tests for counters and reset."""

    def test_counts_sent_failed_and_retries(self, breaker):
        """Lifetime totals are tracked independently of state."""
        breaker.record_success()
        breaker.record_success()
        breaker.record_failure()
        breaker.record_retry()
        breaker.record_retry()
        breaker.record_retry()

        stats = breaker.get_stats()

        assert stats["name"] == "ntfy"
        assert stats["state"] == "closed"
        assert stats["total_sent"] == 2
        assert stats["total_failed"] == 1
        assert stats["total_retries"] == 3
        assert stats["consecutive_failures"] == 1

    def test_reset_closes_and_keeps_totals(self, breaker):
        """Manual reset closes the circuit without clearing totals."""
        for _ in range(5):
            breaker.record_failure()

        breaker.reset()

        assert breaker.state == CircuitState.CLOSED
        assert breaker.get_stats()["total_failed"] == 5

    def test_concurrent_updates_are_consistent(self):
        """Counters stay exact under concurrent updates from many threads."""
        breaker = CircuitBreaker("ntfy", failure_threshold=10_000)

        def hammer():
            for _ in range(500):
                breaker.record_failure()
                breaker.record_retry()

        threads = [threading.Thread(target=hammer) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        stats = breaker.get_stats()
        assert stats["total_failed"] == 4000
        assert stats["total_retries"] == 4000
        assert stats["consecutive_failures"] == 4000
