from __future__ import annotations

import json

import pytest

from sealbench.errors import HarnessArgumentError
from sealbench.harness import (
    BenchmarkRegistry,
    RunOptions,
    measure_case,
    parse_harness_args,
    run_all,
)
from sealbench.reporting import (
    build_json_payload,
    console_header,
    console_row,
    export_json,
    memory_pool_line,
    name_width,
)


def _noop() -> None:
    return None


def _counting_registry():
    calls = {"factory": 0, "op": 0}

    def factory():
        calls["factory"] += 1

        def op():
            calls["op"] += 1
        return op

    registry = BenchmarkRegistry()
    registry.register("n=1024 / log_q=27 / BFV / Decrypt", factory)
    registry.register("n=1024 / log_q=27 / CKKS / Decrypt", lambda: _noop)
    registry.register("n=1024 / log_q=27 / KeyGen / Secret", lambda: _noop)
    return registry, calls


def test_measure_runs_factory_before_every_iteration():
    registry, calls = _counting_registry()
    result = measure_case(registry.cases[0])
    assert calls == {"factory": 10, "op": 10}
    assert result.iterations == 10
    assert result.time_unit == "us"
    assert len(result.series) == 10
    assert result.real_time >= 0.0
    assert result.cpu_time >= 0.0
    assert result.stddev_time >= 0.0
    assert result.mem_delta_kb is None


def test_measure_with_memory_capture_reports_delta():
    registry = BenchmarkRegistry()
    case = registry.register("n=1024 / log_q=27 / BFV / EncodeBatch", lambda: _noop, iterations=2)
    result = measure_case(case, capture_memory=True)
    assert result.iterations == 2
    assert result.mem_delta_kb is not None
    assert result.mem_delta_kb >= 0.0


def test_register_rejects_bad_iteration_count_and_unit():
    registry = BenchmarkRegistry()
    with pytest.raises(ValueError):
        registry.register("x", lambda: _noop, iterations=0)
    with pytest.raises(ValueError):
        registry.register("x", lambda: _noop, unit="fortnights")


def test_run_all_honours_filter_and_order():
    registry, _ = _counting_registry()
    results = run_all(registry, RunOptions(filter="Decrypt"))
    assert [r.name for r in results] == [
        "n=1024 / log_q=27 / BFV / Decrypt",
        "n=1024 / log_q=27 / CKKS / Decrypt",
    ]
    seen = []
    run_all(registry, progress_cb=seen.append)
    assert len(seen) == 3


def test_parse_forwarded_arguments():
    opts = parse_harness_args(
        ["--benchmark_filter=BFV", "--benchmark_format=json", "--benchmark_out=out.json"]
    )
    assert opts == RunOptions(filter="BFV", list_tests=False, format="json", out="out.json")
    assert parse_harness_args(["--benchmark_list_tests"]).list_tests is True
    assert parse_harness_args(["--benchmark_list_tests=false"]).list_tests is False
    assert parse_harness_args(None) == RunOptions()


@pytest.mark.parametrize(
    "argv",
    [
        ["--benchmark_format=csv"],
        ["--benchmark_filter=("],
        ["--benchmark_list_tests=maybe"],
        ["--benchmark_repetitions=3"],
        ["positional"],
    ],
)
def test_parse_rejects_unknown_or_malformed(argv):
    with pytest.raises(HarnessArgumentError):
        parse_harness_args(argv)


def test_memory_pool_line_format():
    assert memory_pool_line(0) == "[      0 MB] Total allocation from the memory pool"
    assert memory_pool_line(5 << 20) == "[      5 MB] Total allocation from the memory pool"
    assert memory_pool_line((1234 << 20) + 99) == "[   1234 MB] Total allocation from the memory pool"


def test_console_and_json_reporting(tmp_path):
    registry, _ = _counting_registry()
    results = run_all(registry)
    names = [r.name for r in results]
    width = name_width(names)
    assert width == max(len(n) for n in names)
    lines = [*console_header(names), *(console_row(r, width) for r in results)]
    assert len(lines[0]) == len(lines[1])
    assert "Benchmark" in lines[1] and "Iterations" in lines[1]
    assert lines[3].startswith("n=1024 / log_q=27 / BFV / Decrypt")
    assert lines[3].rstrip().endswith("10")

    payload = build_json_payload(results, {"library": "Dummy HE"})
    assert payload["context"]["library"] == "Dummy HE"
    assert [b["name"] for b in payload["benchmarks"]] == registry.names()
    assert all(b["time_unit"] == "us" and b["iterations"] == 10 for b in payload["benchmarks"])

    path = export_json(payload, str(tmp_path / "nested" / "out.json"))
    assert json.loads(path.read_text(encoding="utf-8")) == payload
    assert export_json(payload, None) is None
