r"""
Command-line interface for microbench.

    microbench run "sum(range(1_000))" -n 100
    microbench version
"""

from microbench.cli.main import app, main

__all__ = [
    "app",
    "main",
]
