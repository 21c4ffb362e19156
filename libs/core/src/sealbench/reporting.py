from __future__ import annotations
"""Console and JSON rendering of run results.

Functions here only build strings or payloads; the CLI decides where they go.
"""
import json
import pathlib
import platform
from dataclasses import asdict
from typing import Any, Dict, Iterable, List, Sequence

from .harness import CaseResult


def memory_pool_line(byte_count: int) -> str:
    mb = int(byte_count) >> 20
    return f"[{mb:>7} MB] Total allocation from the memory pool"


def banner(library: str, version: str) -> List[str]:
    return [
        f"{library} version: {version}",
        "SEALBench is performing precomputation ...",
    ]


def name_width(names: Iterable[str]) -> int:
    return max([len("Benchmark"), *(len(n) for n in names)])


def console_header(names: Sequence[str]) -> List[str]:
    width = name_width(names)
    header = f"{'Benchmark':<{width}} {'Time':>13} {'CPU':>13} {'Iterations':>11}"
    return ["-" * len(header), header, "-" * len(header)]


def console_row(result: CaseResult, width: int) -> str:
    row = (
        f"{result.name:<{width}} "
        f"{result.real_time:>10.1f} {result.time_unit:<2} "
        f"{result.cpu_time:>10.1f} {result.time_unit:<2} "
        f"{result.iterations:>11}"
    )
    if result.mem_delta_kb is not None:
        row += f" mem={result.mem_delta_kb:.1f}KB"
    return row


def build_json_payload(results: Sequence[CaseResult], meta: Dict[str, Any] | None = None) -> Dict[str, Any]:
    context: Dict[str, Any] = {
        "host_name": platform.node(),
        "python": platform.python_version(),
        "os": platform.platform(aliased=True),
    }
    if meta:
        context.update(meta)
    benchmarks = []
    for r in results:
        row = asdict(r)
        row["run_type"] = "iteration"
        benchmarks.append(row)
    return {"context": context, "benchmarks": benchmarks}


def export_json(payload: Dict[str, Any], export_path: str | None) -> pathlib.Path | None:
    if not export_path:
        return None
    path = pathlib.Path(export_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as f:
        json.dump(payload, f, indent=2)
    return path
