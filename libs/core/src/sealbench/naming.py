from __future__ import annotations
"""Benchmark display names.

The name is the externally visible identity of a case and is parsed by
result tooling, so the format is fixed:

    n=<poly_degree> / log_q=<total_modulus_bits> / <Category> / <Operation>
"""
import re
from dataclasses import dataclass

CATEGORIES = ("KeyGen", "BFV", "CKKS")

NAME_PATTERN = re.compile(
    r"^n=(?P<n>\d+) / log_q=(?P<log_q>\d+) / (?P<category>[A-Za-z]+) / (?P<operation>[A-Za-z0-9]+)$"
)


@dataclass(frozen=True)
class BenchmarkName:
    n: int
    log_q: int
    category: str
    operation: str

    def __str__(self) -> str:
        return benchmark_name(self.n, self.log_q, self.category, self.operation)


def benchmark_name(n: int, log_q: int, category: str, operation: str) -> str:
    return f"n={int(n)} / log_q={int(log_q)} / {category} / {operation}"


def parse_benchmark_name(name: str) -> BenchmarkName:
    m = NAME_PATTERN.match(name)
    if m is None:
        raise ValueError(f"not a benchmark name: {name!r}")
    if m.group("category") not in CATEGORIES:
        raise ValueError(f"unknown benchmark category {m.group('category')!r} in {name!r}")
    return BenchmarkName(
        n=int(m.group("n")),
        log_q=int(m.group("log_q")),
        category=m.group("category"),
        operation=m.group("operation"),
    )
