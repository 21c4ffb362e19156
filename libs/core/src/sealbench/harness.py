from __future__ import annotations
"""Benchmark registry and runner.

The registry is an explicit value handed to the family registrar; nothing in
here is process-global. The runner executes each case a fixed number of
iterations, times only the operation returned by the case factory, and
reports in microseconds.
"""
import argparse
import gc
import logging
import os
import re
import statistics
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Iterator, List, Optional, Sequence

from .errors import HarnessArgumentError
from .params import ParameterSet

log = logging.getLogger(__name__)

ITERATIONS = 10
TIME_UNIT = "us"

_UNIT_SCALE = {"ns": 1e9, "us": 1e6, "ms": 1e3, "s": 1.0}


@dataclass(frozen=True)
class BenchmarkCase:
    name: str
    factory: Callable[[], Callable[[], Any]]
    params: Optional[ParameterSet] = None
    iterations: int = ITERATIONS
    unit: str = TIME_UNIT


class BenchmarkRegistry:
    """Ordered collection of registered cases.

    Names are not required to be unique: registering the same family twice
    yields a second, identically named set of cases.
    """

    def __init__(self) -> None:
        self._cases: List[BenchmarkCase] = []

    def register(
        self,
        name: str,
        factory: Callable[[], Callable[[], Any]],
        params: Optional[ParameterSet] = None,
        *,
        iterations: int = ITERATIONS,
        unit: str = TIME_UNIT,
    ) -> BenchmarkCase:
        if iterations <= 0:
            raise ValueError("iterations must be positive")
        if unit not in _UNIT_SCALE:
            raise ValueError(f"unsupported time unit {unit!r}")
        case = BenchmarkCase(name=name, factory=factory, params=params, iterations=iterations, unit=unit)
        self._cases.append(case)
        return case

    @property
    def cases(self) -> List[BenchmarkCase]:
        return list(self._cases)

    def names(self) -> List[str]:
        return [c.name for c in self._cases]

    def select(self, pattern: str | None) -> List[BenchmarkCase]:
        if not pattern or pattern == "all":
            return self.cases
        rx = re.compile(pattern)
        return [c for c in self._cases if rx.search(c.name)]

    def __iter__(self) -> Iterator[BenchmarkCase]:
        return iter(self._cases)

    def __len__(self) -> int:
        return len(self._cases)


@dataclass
class CaseResult:
    name: str
    iterations: int
    real_time: float
    cpu_time: float
    time_unit: str
    median_time: float
    stddev_time: float
    series: List[float] = field(default_factory=list)
    mem_delta_kb: float | None = None


@dataclass
class RunOptions:
    filter: str | None = None
    list_tests: bool = False
    format: str = "console"
    out: str | None = None


def _parse_bool(value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in ("1", "true", "yes", "on"):
        return True
    if lowered in ("0", "false", "no", "off"):
        return False
    raise HarnessArgumentError(f"expected a boolean, got {value!r}")


def parse_harness_args(argv: Sequence[str] | None) -> RunOptions:
    """Parse the google-benchmark style flags forwarded from the command line."""
    parser = argparse.ArgumentParser(
        prog="sealbench", add_help=False, allow_abbrev=False, exit_on_error=False
    )
    parser.add_argument("--benchmark_filter", default=None)
    parser.add_argument("--benchmark_list_tests", nargs="?", const="true", default="false")
    parser.add_argument("--benchmark_format", default="console")
    parser.add_argument("--benchmark_out", default=None)
    try:
        ns, rest = parser.parse_known_args(list(argv or []))
    except argparse.ArgumentError as exc:
        raise HarnessArgumentError(str(exc)) from exc
    if rest:
        raise HarnessArgumentError(f"unrecognized harness arguments: {' '.join(rest)}")
    if ns.benchmark_format not in ("console", "json"):
        raise HarnessArgumentError(f"unsupported --benchmark_format {ns.benchmark_format!r}")
    if ns.benchmark_filter:
        try:
            re.compile(ns.benchmark_filter)
        except re.error as exc:
            raise HarnessArgumentError(f"invalid --benchmark_filter: {exc}") from exc
    return RunOptions(
        filter=ns.benchmark_filter,
        list_tests=_parse_bool(ns.benchmark_list_tests),
        format=ns.benchmark_format,
        out=ns.benchmark_out,
    )


def _rss_bytes(proc) -> int:
    import psutil

    try:
        full = proc.memory_full_info()
    except psutil.AccessDenied:
        return int(proc.memory_info().rss)
    uss = getattr(full, "uss", None)
    return int(uss if uss is not None else full.rss)


def measure_case(case: BenchmarkCase, *, capture_memory: bool = False) -> CaseResult:
    """Run `case.iterations` iterations of one case.

    The case factory runs before each iteration, outside the timed region.
    With `capture_memory` the process memory delta across the timed
    operations is sampled through psutil (KB, largest single iteration).
    """
    scale = _UNIT_SCALE[case.unit]
    wall: List[float] = []
    cpu: List[float] = []
    mem_deltas: List[float] = []
    proc = None
    if capture_memory:
        import psutil

        proc = psutil.Process(os.getpid())

    gc.collect()
    for _ in range(case.iterations):
        op = case.factory()
        before = _rss_bytes(proc) if proc is not None else None
        c0 = time.process_time()
        t0 = time.perf_counter()
        op()
        t1 = time.perf_counter()
        c1 = time.process_time()
        wall.append((t1 - t0) * scale)
        cpu.append((c1 - c0) * scale)
        if before is not None:
            mem_deltas.append(max(0.0, float(_rss_bytes(proc) - before)) / 1024.0)

    return CaseResult(
        name=case.name,
        iterations=case.iterations,
        real_time=sum(wall) / len(wall),
        cpu_time=sum(cpu) / len(cpu),
        time_unit=case.unit,
        median_time=statistics.median(wall),
        stddev_time=statistics.pstdev(wall) if len(wall) > 1 else 0.0,
        series=wall,
        mem_delta_kb=max(mem_deltas) if mem_deltas else None,
    )


def run_all(
    registry: BenchmarkRegistry,
    options: RunOptions | None = None,
    *,
    capture_memory: bool = False,
    progress_cb: Optional[Callable[[CaseResult], None]] = None,
) -> List[CaseResult]:
    """Run every selected case in registration order."""
    options = options or RunOptions()
    selected = registry.select(options.filter)
    log.info("running %d of %d registered cases", len(selected), len(registry))
    results: List[CaseResult] = []
    for case in selected:
        log.debug("running %s", case.name)
        result = measure_case(case, capture_memory=capture_memory)
        results.append(result)
        if progress_cb is not None:
            progress_cb(result)
    return results
