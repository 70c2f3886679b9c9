r"""
Adaptive sampling engine.

Runs warm-up calls, then timed samples until the samples converge, the
sample cap is reached, or the wall-clock budget runs out. The fastest
sample is reported.

    from microbench.runner import Bench
    from microbench.types import Options

    bench = Bench()
    result = bench.run(Options(iterations=1_000), lambda: sorted(data))
    print(f"{result} ({result.throughput(len(data))})")
"""

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Any, TypeVar

from microbench.runner.stats import SampleStats, compute_stats, is_converged
from microbench.runner.timing import Precision, Timer
from microbench.types import BenchResult, Options, StopReason

__all__ = [
    "Bench",
    "BenchRun",
    "ProgressCallback",
    "black_box",
    "is_timed_out",
    "select_fastest",
]

T = TypeVar("T")

ProgressCallback = Callable[[str], None]
Workload = Callable[[], Any]

# Last value passed through black_box
_sink: Any = None


def black_box(value: T) -> T:
    """Mark a value as used so the call that produced it counts as observed.

    The value is stored in a module-level slot, overwritten on every call,
    and returned unchanged. Bench runs clear the slot when they finish.
    """
    global _sink
    _sink = value
    return _sink


def _release_sink() -> None:
    global _sink
    _sink = None


def is_timed_out(start: int, precision: Precision, options: Options) -> bool:
    """True if the run's wall-clock budget is used up.

    Elapsed time since ``start`` is truncated to whole seconds before the
    comparison. Never fires when no budget is configured.
    """
    if options.max_duration is None:
        return False
    return precision.since(start).as_secs(precision) >= options.max_duration


def select_fastest(samples: Sequence[BenchResult]) -> BenchResult:
    """Return the sample with the smallest elapsed time.

    Ties go to the earliest sample.

    Raises:
        ValueError: If no samples were collected.
    """
    if not samples:
        msg = "Cannot select a result from an empty sample sequence"
        raise ValueError(msg)
    return min(samples, key=lambda sample: sample.as_nanos())


@dataclass(frozen=True, slots=True)
class BenchRun:
    """Outcome of a benchmark run.

    Attributes:
        result: Fastest sample.
        samples: Every sample, in collection order.
        stop_reason: Why sampling stopped.
        options: Options snapshot the run used.
        stats: Statistics after the last sample (None with a single sample).
    """

    result: BenchResult
    samples: tuple[BenchResult, ...]
    stop_reason: StopReason
    options: Options
    stats: SampleStats | None = None

    @property
    def sample_count(self) -> int:
        """Number of samples collected."""
        return len(self.samples)

    @property
    def converged(self) -> bool:
        """True if sampling stopped because samples converged."""
        return self.stop_reason == StopReason.CONVERGED

    def to_dict(self) -> dict[str, Any]:
        """Plain-data view of the run."""
        data: dict[str, Any] = {
            "result_ns": self.result.as_nanos(),
            "result_seconds": self.result.as_seconds_f(),
            "iterations": self.options.iterations,
            "samples_ns": [sample.as_nanos() for sample in self.samples],
            "stop_reason": self.stop_reason.name,
        }
        if self.stats is not None:
            data["stats"] = {
                "mean_seconds": self.stats.mean,
                "std_dev_seconds": self.stats.std_dev,
                "rsd_percent": self.stats.rsd,
            }
        return data


class Bench:
    """A benchmarking environment bound to one clock precision."""

    def __init__(
        self,
        precision: Precision | None = None,
        *,
        progress_callback: ProgressCallback | None = None,
    ) -> None:
        self._precision = precision if precision is not None else Precision.detect()
        self._progress_callback = progress_callback

    @property
    def precision(self) -> Precision:
        """Precision samples are measured with."""
        return self._precision

    def set_progress_callback(self, callback: ProgressCallback) -> None:
        """Set callback for verbose progress messages."""
        self._progress_callback = callback

    def _narrate(self, options: Options, message: str) -> None:
        if not options.verbose:
            return
        if self._progress_callback:
            self._progress_callback(message)
        else:
            print(message)

    def _warm_up(self, options: Options, workload: Workload) -> None:
        for _ in range(options.warmup_iterations):
            black_box(workload())

    def _run_once(self, options: Options, workload: Workload) -> BenchResult:
        """Time ``options.iterations`` back-to-back workload calls."""
        with Timer(self._precision) as timer:
            for _ in range(options.iterations):
                black_box(workload())
        return BenchResult(elapsed=timer.elapsed, precision=self._precision, options=options)

    def run(self, options: Options | None, workload: Workload) -> BenchResult:
        """Run a benchmark and return its fastest sample.

        Args:
            options: Sampling options (None = defaults).
            workload: Zero-argument callable to time.

        Returns:
            The fastest sample collected.
        """
        return self.run_detailed(options, workload).result

    def run_detailed(self, options: Options | None, workload: Workload) -> BenchRun:
        """Run a benchmark and return every sample with the stop reason.

        Args:
            options: Sampling options (None = defaults).
            workload: Zero-argument callable to time.

        Returns:
            BenchRun holding the fastest sample and the full sequence.
        """
        options = (options if options is not None else Options()).normalized()

        self._narrate(options, "Starting a new benchmark.")
        if options.warmup_iterations > 0:
            self._narrate(options, f"Warming up for {options.warmup_iterations} iterations.")

        try:
            self._warm_up(options, workload)
            samples, stats, stop_reason = self._sample(options, workload)
        finally:
            _release_sink()

        result = select_fastest(samples)
        self._narrate(options, f"Result: {result}")

        return BenchRun(
            result=result,
            samples=tuple(samples),
            stop_reason=stop_reason,
            options=options,
            stats=stats,
        )

    def _sample(
        self, options: Options, workload: Workload
    ) -> tuple[list[BenchResult], SampleStats | None, StopReason]:
        """Collect samples until convergence, timeout, or the sample cap."""
        samples: list[BenchResult] = []
        stats: SampleStats | None = None
        start = self._precision.now()

        for i in range(1, options.max_samples + 1):
            self._narrate(options, f"Running sample {i}.")
            sample = self._run_once(options, workload)
            samples.append(sample)

            if len(samples) == 1:
                self._narrate(options, f"Sample {i}: {sample.as_nanos() / 1_000_000:.3f}ms")
                continue

            stats = compute_stats([s.as_seconds_f() for s in samples])
            self._narrate(options, f"Sample {i}: {stats.mean_ms:.3f}ms ± {stats.rsd:.2f}%")

            if is_converged(stats, options):
                self._narrate(options, "Enough samples have been collected.")
                return samples, stats, StopReason.CONVERGED

            if is_timed_out(start, self._precision, options):
                self._narrate(options, "Timeout.")
                return samples, stats, StopReason.TIMEOUT

        return samples, stats, StopReason.MAX_SAMPLES
