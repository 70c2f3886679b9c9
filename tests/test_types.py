r"""
Tests for microbench.types module.
"""

import dataclasses

import pytest

from microbench.runner import Elapsed, Precision
from microbench.types import BenchResult, Options, StopReason, Throughput, Unit

SECOND = 1_000_000_000


class TestStopReason:
    def test_stop_reason_values(self):
        assert StopReason.CONVERGED.value == 1
        assert StopReason.MAX_SAMPLES.value == 2
        assert StopReason.TIMEOUT.value == 3


class TestUnit:
    def test_unit_symbols(self):
        assert str(Unit.NONE) == ""
        assert str(Unit.BYTES) == "B"
        assert str(Unit.BITS) == "b"


class TestOptions:
    def test_defaults(self):
        options = Options()
        assert options.iterations == 1
        assert options.warmup_iterations == 0
        assert options.min_samples == 3
        assert options.max_samples == 5
        assert options.max_rsd == 5.0
        assert options.max_duration is None
        assert options.verbose is False

    def test_verbose_from_environment(self, monkeypatch):
        monkeypatch.setenv("BENCHMARK_VERBOSE", "")
        assert Options().verbose is True

    def test_prefixed_verbose_from_environment(self, monkeypatch):
        monkeypatch.setenv("MICROBENCH_VERBOSE", "1")
        assert Options().verbose is True

    def test_explicit_verbose_wins(self, monkeypatch):
        monkeypatch.setenv("BENCHMARK_VERBOSE", "1")
        assert Options(verbose=False).verbose is False

    def test_environment_read_at_construction(self, monkeypatch):
        options = Options()
        monkeypatch.setenv("BENCHMARK_VERBOSE", "1")
        assert options.verbose is False

    def test_options_immutable(self):
        options = Options()
        with pytest.raises(dataclasses.FrozenInstanceError):
            options.max_samples = 10  # type: ignore

    @pytest.mark.parametrize(
        "kwargs,match",
        [
            ({"iterations": -1}, "iterations"),
            ({"warmup_iterations": -1}, "warmup_iterations"),
            ({"max_samples": -1}, "max_samples"),
            ({"min_samples": 0}, "min_samples"),
            ({"max_rsd": -0.1}, "max_rsd"),
            ({"max_rsd": 100.1}, "max_rsd"),
            ({"max_rsd": float("nan")}, "max_rsd"),
            ({"max_duration": -1.0}, "max_duration"),
        ],
    )
    def test_invalid_options(self, kwargs, match):
        with pytest.raises(ValueError, match=match):
            Options(**kwargs)

    def test_threshold_bounds_accepted(self):
        assert Options(max_rsd=0.0).max_rsd == 0.0
        assert Options(max_rsd=100.0).max_rsd == 100.0

    def test_normalized_clamps(self):
        options = Options(iterations=0, max_samples=0).normalized()
        assert options.iterations == 1
        assert options.max_samples == 1

    def test_normalized_is_copy(self):
        options = Options(iterations=5, verbose=True)
        normalized = options.normalized()
        assert normalized == options
        assert normalized is not options


class TestBenchResult:
    def test_conversions(self, make_result):
        result = make_result(1_234_567_890)

        assert result.elapsed_ticks() == 1_234_567_890
        assert result.as_seconds() == 1
        assert result.as_seconds_f() == pytest.approx(1.23456789)
        assert result.as_millis() == 1_234
        assert result.as_nanos() == 1_234_567_890

    @pytest.mark.parametrize("elapsed_ns", [0, 1, 999, 10_000_000, 1_234_567_890, 7 * SECOND + 13])
    def test_nanos_agree_with_seconds(self, make_result, elapsed_ns):
        result = make_result(elapsed_ns)
        assert result.as_nanos() / 1e9 == pytest.approx(result.as_seconds_f())

    def test_str(self, make_result):
        assert str(make_result(1_500_000_000)) == "1.50s"

    def test_add(self, make_result):
        total = make_result(SECOND, iterations=3) + make_result(2 * SECOND)

        assert total.as_nanos() == 3 * SECOND
        assert total.options.iterations == 3

    def test_add_is_associative(self, make_result):
        a, b, c = make_result(1), make_result(20), make_result(300)
        assert ((a + b) + c).as_nanos() == (a + (b + c)).as_nanos() == 321

    def test_merge_incompatible_precision(self, make_result):
        coarse = BenchResult(elapsed=Elapsed(1), precision=Precision(frequency=1_000), options=Options())

        with pytest.raises(ValueError, match="Cannot merge"):
            make_result(1).merge(coarse)

    def test_add_other_type(self, make_result):
        with pytest.raises(TypeError):
            make_result(1) + 1  # type: ignore


class TestThroughput:
    def test_bytes_kilo_bucket(self, make_result):
        throughput = make_result(SECOND, iterations=10).throughput_bytes(100)

        assert throughput.unit == Unit.BYTES
        assert throughput.volume == 1_000
        assert throughput.as_f() == pytest.approx(1000.0)
        assert throughput.as_int() == 1_000
        assert str(throughput) == "1.00 KB/s"

    def test_bits_multiply_by_eight(self, make_result):
        throughput = make_result(SECOND, iterations=10).throughput_bits(100)

        assert throughput.unit == Unit.BITS
        assert throughput.volume == 8_000
        assert str(throughput) == "8.00 Kb/s"

    def test_untagged(self, make_result):
        throughput = make_result(SECOND).throughput(5)

        assert throughput.unit == Unit.NONE
        assert str(throughput) == "5.00 /s"

    def test_unit_suffix_below_thousand(self, make_result):
        assert str(make_result(SECOND).throughput_bytes(999)) == "999.00 B/s"

    @pytest.mark.parametrize(
        "volume,expected",
        [
            (1_500_000, "1.50 MB/s"),
            (999_999_999, "1000.00 MB/s"),
            (2_000_000_000, "2.00 GB/s"),
            (5_000_000_000_000, "5000.00 GB/s"),
        ],
    )
    def test_magnitude_buckets(self, make_result, volume, expected):
        assert str(make_result(SECOND).throughput_bytes(volume)) == expected

    def test_untagged_buckets(self, make_result):
        assert str(make_result(SECOND).throughput(2_500)) == "2.50 K/s"
        assert str(make_result(SECOND).throughput(3_000_000)) == "3.00 M/s"
        assert str(make_result(SECOND).throughput(4_000_000_000)) == "4.00 G/s"

    def test_scaled_conversions(self, make_result):
        throughput = make_result(SECOND).throughput_bytes(1_073_741_824)

        assert throughput.as_kilo() == pytest.approx(1_073_741.824)
        assert throughput.as_mega() == pytest.approx(1_073.741824)
        assert throughput.as_giga() == pytest.approx(1.073741824)
        assert throughput.as_kibi() == pytest.approx(1_048_576.0)
        assert throughput.as_mebi() == pytest.approx(1_024.0)
        assert throughput.as_gibi() == pytest.approx(1.0)

    def test_bit_conversions(self, make_result):
        throughput = make_result(SECOND).throughput_bytes(1_000_000)

        assert throughput.as_kilobits() == pytest.approx(8_000.0)
        assert throughput.as_megabits() == pytest.approx(8.0)
        assert throughput.as_gigabits() == pytest.approx(0.008)

    def test_rate_uses_half_second(self, make_result):
        assert make_result(SECOND // 2).throughput(1_000).as_f() == pytest.approx(2_000.0)

    def test_zero_elapsed_guard(self, make_result):
        throughput = make_result(0).throughput(3)

        assert throughput.as_f() == 3e9
        assert throughput.as_int() == 3_000_000_000

    def test_large_volume_is_exact(self, make_result):
        throughput = make_result(SECOND, iterations=10**12).throughput(10**12)
        assert throughput.volume == 10**24

    def test_throughput_immutable(self, make_result):
        throughput = make_result(SECOND).throughput(1)
        assert isinstance(throughput, Throughput)
        with pytest.raises(dataclasses.FrozenInstanceError):
            throughput.volume = 2  # type: ignore
