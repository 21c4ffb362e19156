from __future__ import annotations

import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Sequence

import pytest

ROOT = Path(__file__).resolve().parents[1]
for candidate in (
    ROOT / "libs" / "core" / "src",
    ROOT / "libs" / "adapters" / "tenseal" / "src",
    ROOT / "apps" / "cli" / "src",
):
    candidate_str = str(candidate)
    if candidate_str not in sys.path:
        sys.path.insert(0, candidate_str)

from sealbench.params import ParameterSet, ParameterSpace  # noqa: E402

# Three-prime and single-prime chains; the last prime is the "special" one
CHAIN_4096 = (0xFFFFEE001, 0xFFFFC4001, 0x1FFFFE0001)
CHAIN_2048 = (0x3FFFFFFF000001,)
PLAIN_4096 = 40961


@dataclass
class DummyContext:
    keyswitching: bool
    data_primes: int
    key_bits: int

    def using_keyswitching(self) -> bool:
        return self.keyswitching

    def coeff_modulus_size(self) -> int:
        return self.data_primes

    def total_coeff_modulus_bit_count(self) -> int:
        return self.key_bits


class DummyEnv:
    """Mimics the backend environment with tagged tuples instead of ciphertexts."""

    def __init__(self, parms: ParameterSet) -> None:
        self.parms = parms
        chain = parms.coeff_modulus
        # a single prime cannot serve as both data and special prime
        keyswitching = len(chain) > 1
        self.context = DummyContext(
            keyswitching=keyswitching,
            data_primes=len(chain) - 1 if keyswitching else len(chain),
            key_bits=sum(q.bit_length() for q in chain),
        )
        self.calls: List[str] = []

    def _op(self, name: str, *args: Any) -> tuple:
        self.calls.append(name)
        return (name, *args)

    def keygen_secret(self): return self._op("keygen_secret")
    def keygen_public(self): return self._op("keygen_public")
    def keygen_relin(self): return self._op("keygen_relin")
    def keygen_galois(self): return self._op("keygen_galois")

    def sample_values(self) -> List[int]:
        return [1, 2, 3, 4]

    def encode(self, values: Sequence[Any]): return self._op("encode", tuple(values))
    def decode(self, plain) -> List[Any]: return list(plain[1])
    def encrypt_secret(self, plain): return ["ct", plain]
    def encrypt_public(self, plain): return ["ct", plain]
    def decrypt(self, cipher): return cipher[1]

    def add(self, a, b): return self._op("add")
    def add_plain(self, a, plain): return self._op("add_plain")
    def multiply(self, a, b): return ["ct3", a, b]
    def multiply_plain(self, a, plain): return self._op("multiply_plain")
    def square(self, a): return self._op("square")

    def mod_switch_to_next_inplace(self, cipher) -> None:
        cipher.append("modswitched")

    def rescale_to_next_inplace(self, cipher) -> None:
        cipher.append("rescaled")

    def relinearize_inplace(self, cipher) -> None:
        cipher[0] = "ct"

    def rotate_rows(self, cipher, steps): return self._op("rotate_rows", steps)
    def rotate_columns(self, cipher): return self._op("rotate_columns")
    def rotate_vector(self, cipher, steps): return self._op("rotate_vector", steps)


class DummyBackend:
    name = "dummy"
    version = "0.0-test"
    library = "Dummy HE"

    CATALOG: Dict[int, tuple] = {2048: CHAIN_2048, 4096: CHAIN_4096}

    def __init__(self) -> None:
        self.created: List[ParameterSet] = []
        self.pool_bytes = 3 << 20

    def default_coeff_modulus(self, poly_modulus_degree: int):
        return self.CATALOG[poly_modulus_degree]

    def batching_plain_modulus(self, poly_modulus_degree: int, bit_size: int) -> int:
        return PLAIN_4096 if poly_modulus_degree == 4096 else 12289

    def create_env(self, parms: ParameterSet) -> DummyEnv:
        self.created.append(parms)
        self.pool_bytes += 1 << 20
        return DummyEnv(parms)

    def memory_pool_bytes(self) -> int:
        return self.pool_bytes


@pytest.fixture
def backend() -> DummyBackend:
    return DummyBackend()


@pytest.fixture
def space() -> ParameterSpace:
    return ParameterSpace.from_pairs([(2048, CHAIN_2048), (4096, CHAIN_4096)])
