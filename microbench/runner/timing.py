r"""
Clock and precision utilities for benchmarks.

A Precision describes a monotonic tick source and how to turn ticks into
wall time. Elapsed spans are kept as raw ticks and converted on demand.

    from microbench.runner.timing import Precision, Timer

    precision = Precision.detect()
    with Timer(precision) as t:
        do_something()
    print(f"Elapsed: {t.elapsed.as_millis(precision)}ms")
"""

import time
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

__all__ = ["Clock", "Elapsed", "Precision", "PrecisionError", "Timer"]

Clock = Callable[[], int]

NANOS_PER_SECOND = 1_000_000_000

# Clocks usable as tick sources, keyed by their time.get_clock_info() name
_CLOCKS: dict[str, Clock] = {
    "perf_counter": time.perf_counter_ns,
    "monotonic": time.monotonic_ns,
}


class PrecisionError(RuntimeError):
    """Raised when no usable monotonic clock can be obtained."""


@dataclass(frozen=True, slots=True, order=True)
class Elapsed:
    """A span of time measured in clock ticks.

    Attributes:
        ticks: Number of ticks between two clock readings.
    """

    ticks: int

    def __add__(self, other: "Elapsed") -> "Elapsed":
        if not isinstance(other, Elapsed):
            return NotImplemented
        return Elapsed(self.ticks + other.ticks)

    def as_secs(self, precision: "Precision") -> int:
        """Whole seconds, truncated."""
        return self.ticks // precision.frequency

    def as_secs_f(self, precision: "Precision") -> float:
        """Seconds as a float."""
        return self.ticks / precision.frequency

    def as_millis(self, precision: "Precision") -> int:
        """Whole milliseconds, truncated."""
        return self.ticks * 1_000 // precision.frequency

    def as_ns(self, precision: "Precision") -> int:
        """Whole nanoseconds, truncated."""
        return self.ticks * NANOS_PER_SECOND // precision.frequency


@dataclass(frozen=True, slots=True)
class Precision:
    """Tick source and tick-to-time conversion.

    Two precisions compare equal when they share a tick frequency, which is
    what makes elapsed spans taken from them comparable.

    Attributes:
        frequency: Ticks per second.
        clock: Zero-argument callable returning the current tick count.
    """

    frequency: int = NANOS_PER_SECOND
    clock: Clock = field(default=time.perf_counter_ns, compare=False, repr=False)

    def __post_init__(self) -> None:
        if self.frequency <= 0:
            msg = f"Clock frequency must be positive, got {self.frequency}"
            raise PrecisionError(msg)

    @classmethod
    def detect(cls, clock_name: str = "perf_counter") -> "Precision":
        """Build a precision backed by one of the interpreter's clocks.

        Args:
            clock_name: Name accepted by time.get_clock_info().

        Returns:
            Precision ticking in nanoseconds.

        Raises:
            PrecisionError: If the clock is unknown, not monotonic, or
                reports no usable resolution.
        """
        clock = _CLOCKS.get(clock_name)
        if clock is None:
            valid = ", ".join(_CLOCKS)
            msg = f"Unknown clock '{clock_name}'. Valid clocks: {valid}"
            raise PrecisionError(msg)

        try:
            info = time.get_clock_info(clock_name)
        except ValueError as e:
            msg = f"Clock '{clock_name}' is unavailable: {e}"
            raise PrecisionError(msg) from e

        if not info.monotonic:
            msg = f"Clock '{clock_name}' is not monotonic"
            raise PrecisionError(msg)
        if info.resolution <= 0:
            msg = f"Clock '{clock_name}' reports resolution {info.resolution}"
            raise PrecisionError(msg)

        return cls(frequency=NANOS_PER_SECOND, clock=clock)

    def now(self) -> int:
        """Current tick count."""
        return self.clock()

    def since(self, start: int) -> Elapsed:
        """Elapsed span from a previous reading until now."""
        return Elapsed(self.now() - start)


class Timer:
    """Context manager for timing code blocks against a Precision.

        with Timer(precision) as t:
            do_something()
        print(f"Elapsed: {t.elapsed_ms}ms")
    """

    def __init__(self, precision: Precision) -> None:
        self._precision = precision
        self._start: int = 0
        self._end: int = 0

    def __enter__(self) -> "Timer":
        self._start = self._precision.now()
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self._end = self._precision.now()

    @property
    def elapsed(self) -> Elapsed:
        """Elapsed span in ticks."""
        return Elapsed(self._end - self._start)

    @property
    def elapsed_ns(self) -> int:
        """Elapsed time in nanoseconds."""
        return self.elapsed.as_ns(self._precision)

    @property
    def elapsed_ms(self) -> float:
        """Elapsed time in milliseconds."""
        return self.elapsed_ns / 1_000_000

    @property
    def elapsed_seconds(self) -> float:
        """Elapsed time in seconds."""
        return self.elapsed.as_secs_f(self._precision)
