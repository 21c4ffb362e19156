from __future__ import annotations
import random
from typing import Iterable, List, Tuple


def try_import_sealapi():
    try:
        import tenseal.sealapi as sealapi  # type: ignore
        return sealapi
    except Exception:
        return None


def tenseal_version() -> str:
    try:
        import tenseal  # type: ignore
    except Exception:
        return "unknown"
    return str(getattr(tenseal, "__version__", "unknown"))


def modulus_values(moduli: Iterable) -> Tuple[int, ...]:
    """Convert library Modulus objects to plain ints."""
    return tuple(int(m.value()) for m in moduli)


def sample_ints(count: int, bound: int, seed: int = 0x5EA1) -> List[int]:
    rng = random.Random(seed)
    return [rng.randrange(bound) for _ in range(count)]


def sample_reals(count: int, seed: int = 0x5EA1) -> List[float]:
    rng = random.Random(seed)
    return [rng.uniform(-1.0, 1.0) for _ in range(count)]
