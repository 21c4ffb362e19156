from __future__ import annotations
import logging
from typing import Optional, Sequence, Tuple

import typer

from sealbench import registry
from sealbench.config import load_settings, parse_degrees
from sealbench.errors import SealBenchError
from sealbench.harness import parse_harness_args
from sealbench.params import default_parameter_space
from .runners.common import _load_adapters, get_backend, prepare_suite, run_suite

app = typer.Typer(add_completion=False, help="SEAL homomorphic-encryption benchmark CLI")

_FORWARD = {"allow_extra_args": True, "ignore_unknown_options": True}


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format="%(levelname)s %(name)s: %(message)s",
    )


def _fail(exc: Exception) -> None:
    typer.echo(f"error: {exc}", err=True)
    raise typer.Exit(code=1)


def _degrees(raw: str | None, default: Sequence[int]) -> Tuple[int, ...]:
    if not raw:
        return tuple(default)
    try:
        return parse_degrees(raw)
    except ValueError as exc:
        _fail(exc)


@app.command("list-backends")
def list_backends():
    """List registered backends available via adapters."""
    _load_adapters()
    for name in registry.list().keys():
        typer.echo(f"- {name}")


@app.command()
def params(
    backend: Optional[str] = typer.Option(None, help="Backend name (default: SEALBENCH_BACKEND or 'seal')."),
    degrees: Optional[str] = typer.Option(None, help="Comma-separated poly degrees."),
):
    """Print the parameter space without building any environment."""
    settings = load_settings()
    _load_adapters()
    try:
        be = get_backend(backend or settings.backend)
        space = default_parameter_space(be, _degrees(degrees, settings.degrees))
    except SealBenchError as exc:
        _fail(exc)
    for entry in space:
        bits = sum(q.bit_length() for q in entry.coeff_modulus)
        chain = ", ".join(hex(q) for q in entry.coeff_modulus)
        typer.echo(f"n={entry.poly_modulus_degree} primes={len(entry.coeff_modulus)} bits={bits} [{chain}]")


@app.command(context_settings=_FORWARD)
def run(
    ctx: typer.Context,
    backend: Optional[str] = typer.Option(None, help="Backend name (default: SEALBENCH_BACKEND or 'seal')."),
    degrees: Optional[str] = typer.Option(None, help="Comma-separated poly degrees (default: all)."),
    capture_memory: Optional[bool] = typer.Option(
        None,
        "--capture-memory/--no-capture-memory",
        help="Sample per-case process memory deltas via psutil.",
    ),
    log_level: Optional[str] = typer.Option(None, help="Logging level (default: SEALBENCH_LOG_LEVEL or WARNING)."),
):
    """Build all environments, register every case and run them.

    Unrecognised arguments are forwarded to the harness, e.g.
    --benchmark_filter='BFV' or --benchmark_format=json.
    """
    settings = load_settings()
    _configure_logging(log_level or settings.log_level)
    _load_adapters()
    try:
        options = parse_harness_args(ctx.args)
        be = get_backend(backend or settings.backend)
        suite = prepare_suite(
            be,
            _degrees(degrees, settings.degrees),
            echo=typer.echo,
        )
        run_suite(
            suite,
            options,
            capture_memory=settings.capture_memory if capture_memory is None else capture_memory,
            echo=typer.echo,
        )
    except SealBenchError as exc:
        _fail(exc)


@app.command("list-cases", context_settings=_FORWARD)
def list_cases(
    ctx: typer.Context,
    backend: Optional[str] = typer.Option(None, help="Backend name."),
    degrees: Optional[str] = typer.Option(None, help="Comma-separated poly degrees."),
):
    """Register every case and print the names (same as --benchmark_list_tests)."""
    settings = load_settings()
    _load_adapters()
    try:
        options = parse_harness_args([*ctx.args, "--benchmark_list_tests=true"])
        be = get_backend(backend or settings.backend)
        suite = prepare_suite(be, _degrees(degrees, settings.degrees), echo=typer.echo)
        run_suite(suite, options, echo=typer.echo)
    except SealBenchError as exc:
        _fail(exc)


def app_main():
    app()

if __name__ == "__main__":
    app_main()
