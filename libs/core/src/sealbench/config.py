from __future__ import annotations
"""Environment-driven settings.

    SEALBENCH_BACKEND          registered backend name (default: seal)
    SEALBENCH_DEGREES          comma-separated poly degrees to benchmark
    SEALBENCH_LOG_LEVEL        logging level name (default: WARNING)
    SEALBENCH_CAPTURE_MEMORY   1 to sample per-case RSS deltas via psutil
"""
import os
from dataclasses import dataclass
from typing import Mapping, Optional, Tuple

from .params import DEFAULT_POLY_DEGREES

DEFAULT_BACKEND = "seal"


@dataclass(frozen=True)
class Settings:
    backend: str = DEFAULT_BACKEND
    degrees: Tuple[int, ...] = DEFAULT_POLY_DEGREES
    log_level: str = "WARNING"
    capture_memory: bool = False


def parse_degrees(raw: str | None) -> Tuple[int, ...]:
    if raw is None or not raw.strip():
        return DEFAULT_POLY_DEGREES
    degrees = []
    for part in raw.split(","):
        part = part.strip()
        if not part:
            continue
        try:
            degrees.append(int(part))
        except ValueError as exc:
            raise ValueError(f"SEALBENCH_DEGREES must list integers, got {part!r}") from exc
    return tuple(degrees)


def _flag(raw: str | None) -> bool:
    return (raw or "").strip().lower() in ("1", "true", "yes", "on")


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    env = os.environ if environ is None else environ
    return Settings(
        backend=env.get("SEALBENCH_BACKEND", DEFAULT_BACKEND).strip() or DEFAULT_BACKEND,
        degrees=parse_degrees(env.get("SEALBENCH_DEGREES")),
        log_level=env.get("SEALBENCH_LOG_LEVEL", "WARNING").strip().upper() or "WARNING",
        capture_memory=_flag(env.get("SEALBENCH_CAPTURE_MEMORY")),
    )
