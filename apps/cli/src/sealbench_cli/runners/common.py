from __future__ import annotations
"""Shared driver utilities for the CLI.

Includes adapter bootstrap, suite construction (parameter space, environment
cache, case registration) and the run/report loop.
"""
import importlib
import importlib.util
import json
import logging
import pathlib
import sys
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Sequence

from sealbench import registry
from sealbench.cache import EnvironmentCache
from sealbench.family import register_all
from sealbench.harness import BenchmarkRegistry, CaseResult, RunOptions, run_all
from sealbench.interfaces import HEBackend
from sealbench.params import PLAIN_MODULUS_BITS, ParameterSpace, default_parameter_space
from sealbench.reporting import (
    banner,
    build_json_payload,
    console_header,
    console_row,
    export_json,
    memory_pool_line,
    name_width,
)

log = logging.getLogger(__name__)

_HERE = pathlib.Path(__file__).resolve()

try:
    _PROJECT_ROOT = next(p for p in _HERE.parents if (p / "libs").exists())
except StopIteration:
    _PROJECT_ROOT = _HERE.parents[0]

_ADAPTER_PATHS = {
    "sealbench_tenseal": _PROJECT_ROOT / "libs" / "adapters" / "tenseal" / "src",
}

_BACKEND_INSTANCE_CACHE: Dict[str, HEBackend] = {}


def _load_adapters() -> None:
    for mod in _ADAPTER_PATHS:
        spec = importlib.util.find_spec(mod)
        if spec is None:
            candidate = _ADAPTER_PATHS.get(mod)
            if candidate and candidate.exists():
                if str(candidate) not in sys.path:
                    sys.path.append(str(candidate))
                spec = importlib.util.find_spec(mod)
        if spec is None:
            log.warning("adapter %s is not installed", mod)
            continue
        module = importlib.import_module(mod)
        if not getattr(module, "_available", False):
            log.warning("adapter %s is installed but its library is missing", mod)


def get_backend(name: str) -> HEBackend:
    inst = _BACKEND_INSTANCE_CACHE.get(name)
    if inst is None:
        inst = registry.get(name)()
        _BACKEND_INSTANCE_CACHE[name] = inst
    return inst


def reset_backend_cache(name: Optional[str] = None) -> None:
    if name is None:
        _BACKEND_INSTANCE_CACHE.clear()
    else:
        _BACKEND_INSTANCE_CACHE.pop(name, None)


@dataclass
class Suite:
    backend: HEBackend
    space: ParameterSpace
    cache: EnvironmentCache
    registry: BenchmarkRegistry


def prepare_suite(
    backend: HEBackend,
    degrees: Sequence[int],
    *,
    echo: Callable[[str], None] = print,
    space: ParameterSpace | None = None,
) -> Suite:
    """Build every environment, print the first memory line, register cases."""
    for line in banner(backend.library, backend.version):
        echo(line)
    if space is None:
        space = default_parameter_space(backend, degrees)
    cache = EnvironmentCache.build(space, backend, plain_modulus_bits=PLAIN_MODULUS_BITS)
    echo(memory_pool_line(backend.memory_pool_bytes()))

    bench_registry = BenchmarkRegistry()
    register_all(space, cache, bench_registry)
    return Suite(backend=backend, space=space, cache=cache, registry=bench_registry)


def run_suite(
    suite: Suite,
    options: RunOptions,
    *,
    capture_memory: bool = False,
    echo: Callable[[str], None] = print,
) -> List[CaseResult]:
    """Run (or list) the selected cases and print the closing memory line."""
    if options.list_tests:
        for case in suite.registry.select(options.filter):
            echo(case.name)
        return []

    selected = suite.registry.select(options.filter)
    width = name_width(c.name for c in selected)
    if options.format == "console":
        for line in console_header([c.name for c in selected]):
            echo(line)

    results = run_all(
        suite.registry,
        options,
        capture_memory=capture_memory,
        progress_cb=(lambda r: echo(console_row(r, width))) if options.format == "console" else None,
    )

    payload = None
    if options.format == "json" or options.out:
        payload = build_json_payload(
            results,
            {"library": suite.backend.library, "library_version": suite.backend.version},
        )
    if options.format == "json":
        echo(json.dumps(payload, indent=2))
    if options.out:
        path = export_json(payload, options.out)
        log.info("wrote %s", path)

    echo(memory_pool_line(suite.backend.memory_pool_bytes()))
    return results
