r"""
Core types for micro-benchmarks.

    from microbench.types import Options

    options = Options(iterations=1_000, max_samples=10)
    result = Bench().run(options, workload)
    print(f"Fastest sample: {result}, {result.throughput_bytes(64)}")
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import IntEnum, StrEnum, auto
from typing import TYPE_CHECKING

from microbench.config import (
    DEFAULT_ITERATIONS,
    DEFAULT_MAX_DURATION,
    DEFAULT_MAX_RSD,
    DEFAULT_MAX_SAMPLES,
    DEFAULT_MIN_SAMPLES,
    DEFAULT_WARMUP_ITERATIONS,
    verbose_from_env,
)

if TYPE_CHECKING:
    from microbench.runner.timing import Elapsed, Precision

__all__ = [
    "BenchResult",
    "Options",
    "StopReason",
    "Throughput",
    "Unit",
]

_NS_PER_SECOND = 1_000_000_000


class StopReason(IntEnum):
    """Why a run stopped collecting samples."""

    CONVERGED = auto()
    MAX_SAMPLES = auto()
    TIMEOUT = auto()


class Unit(StrEnum):
    """Unit tag of a throughput."""

    NONE = ""
    BYTES = "B"
    BITS = "b"


@dataclass(frozen=True, slots=True)
class Options:
    """Sampling options for a benchmark run.

    Attributes:
        iterations: Workload calls folded into one timed sample (0 runs once).
        warmup_iterations: Untimed calls before sampling starts.
        min_samples: Samples required before convergence may be declared.
        max_samples: Hard cap on timed samples (0 collects one).
        max_rsd: Relative standard deviation to tolerate, in percent (0-100).
        max_duration: Wall-clock budget in seconds, or None for no budget.
        verbose: Narrate progress; defaults to the environment flag.
    """

    iterations: int = DEFAULT_ITERATIONS
    warmup_iterations: int = DEFAULT_WARMUP_ITERATIONS
    min_samples: int = DEFAULT_MIN_SAMPLES
    max_samples: int = DEFAULT_MAX_SAMPLES
    max_rsd: float = DEFAULT_MAX_RSD
    max_duration: float | None = DEFAULT_MAX_DURATION
    verbose: bool = field(default_factory=verbose_from_env)

    def __post_init__(self) -> None:
        for name in ("iterations", "warmup_iterations", "max_samples"):
            if getattr(self, name) < 0:
                msg = f"{name} must not be negative, got {getattr(self, name)}"
                raise ValueError(msg)
        if self.min_samples < 1:
            msg = f"min_samples must be at least 1, got {self.min_samples}"
            raise ValueError(msg)
        if not 0.0 <= self.max_rsd <= 100.0:
            msg = f"max_rsd must be within 0..100, got {self.max_rsd}"
            raise ValueError(msg)
        if self.max_duration is not None and self.max_duration < 0:
            msg = f"max_duration must not be negative, got {self.max_duration}"
            raise ValueError(msg)

    def normalized(self) -> Options:
        """Copy with iterations and max_samples clamped to at least 1."""
        return replace(
            self,
            iterations=max(1, self.iterations),
            max_samples=max(1, self.max_samples),
        )


@dataclass(frozen=True, slots=True)
class BenchResult:
    """One timed sample: ``options.iterations`` workload calls measured once.

    The fastest sample of a run is reported as the run's result.

    Attributes:
        elapsed: Raw tick span of the sample.
        precision: Precision the ticks were taken with.
        options: Options of the run that produced the sample.
    """

    elapsed: Elapsed
    precision: Precision
    options: Options

    def __add__(self, other: BenchResult) -> BenchResult:
        if not isinstance(other, BenchResult):
            return NotImplemented
        return self.merge(other)

    def __str__(self) -> str:
        return f"{self.as_seconds_f():.2f}s"

    def merge(self, other: BenchResult) -> BenchResult:
        """Sum elapsed time of two results.

        The options and precision of ``self`` are kept.

        Raises:
            ValueError: If the results were measured with incompatible
                precisions.
        """
        if self.precision != other.precision:
            msg = (
                f"Cannot merge results measured at {self.precision.frequency} "
                f"and {other.precision.frequency} ticks per second"
            )
            raise ValueError(msg)
        return replace(self, elapsed=self.elapsed + other.elapsed)

    def elapsed_ticks(self) -> int:
        """Number of clock ticks."""
        return self.elapsed.ticks

    def as_seconds(self) -> int:
        """Elapsed time in whole seconds."""
        return self.elapsed.as_secs(self.precision)

    def as_seconds_f(self) -> float:
        """Elapsed time in seconds."""
        return self.elapsed.as_secs_f(self.precision)

    def as_millis(self) -> int:
        """Elapsed time in whole milliseconds."""
        return self.elapsed.as_millis(self.precision)

    def as_nanos(self) -> int:
        """Elapsed time in nanoseconds."""
        return self.elapsed.as_ns(self.precision)

    def throughput(self, volume: int) -> Throughput:
        """Untagged throughput for ``volume`` items processed per iteration."""
        return Throughput(volume=volume * self.options.iterations, result=self)

    def throughput_bits(self, volume: int) -> Throughput:
        """Throughput in bits for ``volume`` bytes processed per iteration."""
        return Throughput(volume=volume * self.options.iterations * 8, result=self, unit=Unit.BITS)

    def throughput_bytes(self, volume: int) -> Throughput:
        """Throughput in bytes for ``volume`` bytes processed per iteration."""
        return Throughput(volume=volume * self.options.iterations, result=self, unit=Unit.BYTES)


@dataclass(frozen=True, slots=True)
class Throughput:
    """Rate view of a result.

    Attributes:
        volume: Total units processed by the sample (iterations included).
        result: Result the rate is derived from.
        unit: Unit tag used when rendering.
    """

    volume: int
    result: BenchResult
    unit: Unit = Unit.NONE

    def _nanos(self) -> int:
        # Elapsed time can underflow the clock resolution
        return max(1, self.result.as_nanos())

    def as_f(self) -> float:
        """Units per second."""
        return self.volume * 1e9 / self._nanos()

    def as_int(self) -> int:
        """Units per second, truncated."""
        return self.volume * _NS_PER_SECOND // self._nanos()

    def as_kilo(self) -> float:
        return self.as_f() / 1_000

    def as_mega(self) -> float:
        return self.as_f() / 1_000**2

    def as_giga(self) -> float:
        return self.as_f() / 1_000**3

    def as_kibi(self) -> float:
        return self.as_f() / 1_024

    def as_mebi(self) -> float:
        return self.as_f() / 1_024**2

    def as_gibi(self) -> float:
        return self.as_f() / 1_024**3

    def as_kilobits(self) -> float:
        """Kilobits per second, reading the volume as bytes."""
        return self.as_kilo() * 8

    def as_megabits(self) -> float:
        """Megabits per second, reading the volume as bytes."""
        return self.as_mega() * 8

    def as_gigabits(self) -> float:
        """Gigabits per second, reading the volume as bytes."""
        return self.as_giga() * 8

    def __str__(self) -> str:
        rate = self.as_int()
        if rate < 1_000:
            value, prefix = self.as_f(), ""
        elif rate < 1_000_000:
            value, prefix = self.as_kilo(), "K"
        elif rate < 1_000_000_000:
            value, prefix = self.as_mega(), "M"
        else:
            value, prefix = self.as_giga(), "G"
        return f"{value:.2f} {prefix}{self.unit}/s"
