r"""
Running statistics and the convergence test.

    from microbench.runner.stats import compute_stats, is_converged

    stats = compute_stats([0.010, 0.011, 0.010])
    if is_converged(stats, options):
        ...
"""

import math
import statistics
from collections.abc import Sequence
from dataclasses import dataclass

from microbench.types import Options

__all__ = ["SampleStats", "compute_stats", "is_converged"]


@dataclass(frozen=True, slots=True)
class SampleStats:
    """Statistics over the samples collected so far.

    Attributes:
        count: Number of samples.
        mean: Mean sample time in seconds.
        std_dev: Sample standard deviation (n - 1 divisor) in seconds.
        rsd: Relative standard deviation in percent; inf when mean is zero.
    """

    count: int
    mean: float
    std_dev: float
    rsd: float

    @property
    def mean_ms(self) -> float:
        """Mean sample time in milliseconds."""
        return self.mean * 1_000


def compute_stats(values: Sequence[float]) -> SampleStats:
    """Compute mean, standard deviation and RSD of sample times.

    Args:
        values: Sample times in seconds, at least two.

    Returns:
        SampleStats for the values.

    Raises:
        ValueError: If fewer than two values are given.
    """
    n = len(values)
    if n < 2:
        msg = f"At least two samples are required, got {n}"
        raise ValueError(msg)

    mean = statistics.fmean(values)
    std_dev = statistics.stdev(values, mean)
    rsd = std_dev * 100 / mean if mean > 0 else math.inf

    return SampleStats(count=n, mean=mean, std_dev=std_dev, rsd=rsd)


def is_converged(stats: SampleStats, options: Options) -> bool:
    """True once enough samples agree closely enough to stop.

    Requires ``min_samples`` samples and an RSD strictly below ``max_rsd``.
    An undefined RSD never converges.
    """
    if not math.isfinite(stats.rsd):
        return False
    return stats.count >= options.min_samples and stats.rsd < options.max_rsd
