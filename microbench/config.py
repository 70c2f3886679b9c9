r"""
Benchmark defaults and environment configuration.

Default sampling parameters:
    - iterations: 1 workload call per sample
    - warmup_iterations: 0 untimed calls
    - min_samples: 3 samples before convergence may be declared
    - max_samples: 5 samples at most
    - max_rsd: 5.0 percent relative standard deviation
    - max_duration: unset (no wall-clock budget)

Setting BENCHMARK_VERBOSE (or MICROBENCH_VERBOSE) to any value turns on
progress narration for options built afterwards.

    from microbench.config import get_env, verbose_from_env

    if verbose_from_env():
        print("Narrating benchmark progress")
"""

import os
from pathlib import Path

# Load .env file if it exists
try:
    from dotenv import load_dotenv

    # Look for .env in current dir or the project root
    env_file = Path(".env")
    if not env_file.exists():
        env_file = Path(__file__).parent.parent / ".env"
    if env_file.exists():
        load_dotenv(env_file)
except ImportError:
    pass  # python-dotenv not installed, skip

__all__ = [
    "DEFAULT_ITERATIONS",
    "DEFAULT_MAX_DURATION",
    "DEFAULT_MAX_RSD",
    "DEFAULT_MAX_SAMPLES",
    "DEFAULT_MIN_SAMPLES",
    "DEFAULT_WARMUP_ITERATIONS",
    "ENV_PREFIX",
    "VERBOSE_ENV",
    "get_env",
    "verbose_from_env",
]

ENV_PREFIX = "MICROBENCH_"
VERBOSE_ENV = "BENCHMARK_VERBOSE"

DEFAULT_ITERATIONS = 1
DEFAULT_WARMUP_ITERATIONS = 0
DEFAULT_MIN_SAMPLES = 3
DEFAULT_MAX_SAMPLES = 5
DEFAULT_MAX_RSD = 5.0
DEFAULT_MAX_DURATION: float | None = None


def get_env(key: str, *, default: str | None = None) -> str | None:
    """Get environment variable with MICROBENCH_ prefix.

    Args:
        key: Variable name without prefix (e.g., "VERBOSE").
        default: Default value if not set.

    Returns:
        Environment variable value or default.
    """
    return os.environ.get(f"{ENV_PREFIX}{key}", default)


def verbose_from_env() -> bool:
    """True if a verbose benchmarking flag is present in the environment.

    Only presence matters; the value is ignored.
    """
    return VERBOSE_ENV in os.environ or get_env("VERBOSE") is not None
