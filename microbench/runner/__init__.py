r"""
Benchmark runner and timing.

Coordinates warm-up, timed sampling, convergence checks,
and result selection.

    from microbench.runner import Bench

    bench = Bench()
    result = bench.run(options, workload)
"""

from microbench.runner.engine import Bench, BenchRun, ProgressCallback, black_box, is_timed_out, select_fastest
from microbench.runner.stats import SampleStats, compute_stats, is_converged
from microbench.runner.timing import Elapsed, Precision, PrecisionError, Timer

__all__ = [
    "Bench",
    "BenchRun",
    "Elapsed",
    "Precision",
    "PrecisionError",
    "ProgressCallback",
    "SampleStats",
    "Timer",
    "black_box",
    "compute_stats",
    "is_converged",
    "is_timed_out",
    "select_fastest",
]
