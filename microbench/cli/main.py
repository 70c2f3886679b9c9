r"""
Command-line interface for microbench.

    microbench run mypkg.workloads:sort_reversed -n 100
    microbench run mypkg.codecs:encode_block --volume 4096 --unit bits --max-duration 5
"""

import pkgutil
from collections.abc import Callable
from enum import Enum
from typing import Annotated, Any

try:
    import typer
except ImportError:
    typer = None  # type: ignore

from microbench.config import (
    DEFAULT_ITERATIONS,
    DEFAULT_MAX_RSD,
    DEFAULT_MAX_SAMPLES,
    DEFAULT_MIN_SAMPLES,
    DEFAULT_WARMUP_ITERATIONS,
)

__all__ = ["app", "main"]


class UnitName(str, Enum):
    none = "none"
    bytes = "bytes"
    bits = "bits"


def _check_typer() -> None:
    if typer is None:
        msg = "typer package not installed. Install with: pip install 'microbench[cli]'"
        raise ImportError(msg)


def _resolve_workload(target: str) -> Callable[[], Any]:
    """Resolve a ``module:callable`` target to a zero-argument workload.

    Args:
        target: Importable name, e.g. ``package.module:function``.

    Returns:
        The resolved callable.

    Raises:
        ValueError: If the target cannot be imported or is not callable.
    """
    try:
        workload = pkgutil.resolve_name(target)
    except (ImportError, AttributeError, ValueError) as e:
        msg = f"Cannot resolve '{target}': {e}"
        raise ValueError(msg) from e

    if not callable(workload):
        msg = f"'{target}' is not callable"
        raise ValueError(msg)
    return workload


if typer is not None:
    app = typer.Typer(
        name="microbench",
        help="Adaptive micro-benchmark harness.",
        no_args_is_help=True,
    )

    @app.command()
    def run(
        target: Annotated[str, typer.Argument(help="Zero-argument callable to benchmark (module:callable)")],
        iterations: Annotated[
            int, typer.Option("-n", "--iterations", help="Calls per sample")
        ] = DEFAULT_ITERATIONS,
        warmup: Annotated[
            int, typer.Option("-w", "--warmup", help="Untimed runs before sampling")
        ] = DEFAULT_WARMUP_ITERATIONS,
        min_samples: Annotated[
            int, typer.Option("--min-samples", help="Samples required before convergence")
        ] = DEFAULT_MIN_SAMPLES,
        max_samples: Annotated[int, typer.Option("--max-samples", help="Maximum samples")] = DEFAULT_MAX_SAMPLES,
        max_rsd: Annotated[
            float, typer.Option("--max-rsd", help="Relative standard deviation to tolerate (percent)")
        ] = DEFAULT_MAX_RSD,
        max_duration: Annotated[
            float | None, typer.Option("--max-duration", help="Wall-clock budget in seconds")
        ] = None,
        volume: Annotated[
            int | None, typer.Option("--volume", help="Units processed per call")
        ] = None,
        unit: Annotated[UnitName, typer.Option("--unit", help="Throughput unit: none, bytes, bits")] = UnitName.bytes,
        verbose: Annotated[bool, typer.Option("-v", "--verbose", help="Verbose output")] = False,
        json_: Annotated[bool, typer.Option("--json", help="Print the run as JSON")] = False,
    ) -> None:
        """Benchmark an importable callable."""
        import json

        from microbench.config import verbose_from_env
        from microbench.runner import Bench
        from microbench.types import Options

        try:
            options = Options(
                iterations=iterations,
                warmup_iterations=warmup,
                min_samples=min_samples,
                max_samples=max_samples,
                max_rsd=max_rsd,
                max_duration=max_duration,
                verbose=verbose or verbose_from_env(),
            )
        except ValueError as e:
            typer.echo(f"Error: {e}", err=True)
            raise typer.Exit(1)

        try:
            workload = _resolve_workload(target)
        except ValueError as e:
            typer.echo(f"Error: {e}", err=True)
            raise typer.Exit(1)

        bench = Bench(progress_callback=typer.echo)
        bench_run = bench.run_detailed(options, workload)
        result = bench_run.result

        throughput = None
        if volume is not None:
            if unit is UnitName.bits:
                throughput = result.throughput_bits(volume)
            elif unit is UnitName.bytes:
                throughput = result.throughput_bytes(volume)
            else:
                throughput = result.throughput(volume)

        if json_:
            data = bench_run.to_dict()
            if throughput is not None:
                data["throughput_per_second"] = throughput.as_f()
                data["throughput"] = str(throughput)
            typer.echo(json.dumps(data, indent=2))
            return

        typer.echo(f"Result: {result} ({result.as_nanos():,} ns for {options.iterations} iterations)")
        typer.echo(f"Samples: {bench_run.sample_count} ({bench_run.stop_reason.name.lower()})")
        if bench_run.stats is not None:
            typer.echo(f"Mean: {bench_run.stats.mean_ms:.3f}ms ± {bench_run.stats.rsd:.2f}%")
        if throughput is not None:
            typer.echo(f"Throughput: {throughput}")

    @app.command()
    def version() -> None:
        """Show the installed version."""
        from microbench import __version__

        typer.echo(f"microbench {__version__}")

    def main() -> None:
        """Main entry point."""
        _check_typer()
        app()

else:

    def app() -> None:
        _check_typer()

    def main() -> None:
        _check_typer()


if __name__ == "__main__":
    main()
