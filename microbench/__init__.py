r"""
microbench: adaptive micro-benchmark harness.

Times repeated calls of a workload, stops once samples agree within a
relative standard deviation threshold, and reports the fastest sample.

    from microbench import Bench, Options

    result = Bench().run(Options(iterations=100), lambda: sum(range(1_000)))
    print(result, result.throughput(1_000))
"""

from microbench.runner import Bench, BenchRun, Precision, PrecisionError, black_box
from microbench.types import BenchResult, Options, StopReason, Throughput, Unit

__all__ = [
    "Bench",
    "BenchResult",
    "BenchRun",
    "Options",
    "Precision",
    "PrecisionError",
    "StopReason",
    "Throughput",
    "Unit",
    "black_box",
]

__version__ = "0.1.0"
