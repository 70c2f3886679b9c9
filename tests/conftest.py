r"""
Shared pytest fixtures for microbench tests.
"""

from collections.abc import Callable, Iterable

import pytest

from microbench.runner import Bench, Elapsed, Precision
from microbench.types import BenchResult, Options


class FakeClock:
    """Tick source that only moves when told to."""

    def __init__(self) -> None:
        self.ticks = 0

    def __call__(self) -> int:
        return self.ticks

    def advance(self, ticks: int) -> None:
        self.ticks += ticks


@pytest.fixture(autouse=True)
def clean_verbose_env(monkeypatch):
    """Keep verbose defaults independent of the caller's environment."""
    monkeypatch.delenv("BENCHMARK_VERBOSE", raising=False)
    monkeypatch.delenv("MICROBENCH_VERBOSE", raising=False)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def precision(clock: FakeClock) -> Precision:
    """Nanosecond precision driven by the fake clock."""
    return Precision(frequency=1_000_000_000, clock=clock)


@pytest.fixture
def bench(precision: Precision) -> Bench:
    return Bench(precision)


@pytest.fixture
def scripted(clock: FakeClock) -> Callable[[Iterable[int]], Callable[[], int]]:
    """Build a workload whose calls take the given nanosecond durations in turn."""

    def factory(durations_ns: Iterable[int]) -> Callable[[], int]:
        durations = iter(durations_ns)

        def workload() -> int:
            duration = next(durations)
            clock.advance(duration)
            return duration

        return workload

    return factory


@pytest.fixture
def make_result(precision: Precision) -> Callable[..., BenchResult]:
    """Build a BenchResult with a given elapsed time in nanoseconds."""

    def factory(elapsed_ns: int, *, iterations: int = 1) -> BenchResult:
        return BenchResult(
            elapsed=Elapsed(elapsed_ns),
            precision=precision,
            options=Options(iterations=iterations),
        )

    return factory
