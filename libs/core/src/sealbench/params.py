from __future__ import annotations
"""Parameter sets and the catalog of entries that defines the benchmark matrix.

A `ParameterSpaceEntry` is a (poly-degree, modulus-chain) pair. Each entry
yields one `ParameterSet` per scheme; the BFV one also carries a batching
plain modulus chosen by the backend.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Iterator, Optional, Sequence, Tuple, TYPE_CHECKING

if TYPE_CHECKING:
    from .interfaces import HEBackend

# Degrees covered by the library's 128-bit default coefficient moduli
DEFAULT_POLY_DEGREES: Tuple[int, ...] = (1024, 2048, 4096, 8192, 16384, 32768)

# BFV benchmark cases default to a 20-bit batching plain modulus
PLAIN_MODULUS_BITS = 20


class SchemeType(str, Enum):
    BFV = "bfv"
    CKKS = "ckks"


def _is_power_of_two(value: int) -> bool:
    return value > 0 and (value & (value - 1)) == 0


def _check_chain(degree: int, coeff_modulus: Sequence[int]) -> None:
    if not isinstance(degree, int) or not _is_power_of_two(degree):
        raise ValueError(f"poly_modulus_degree must be a positive power of two, got {degree!r}")
    if not coeff_modulus:
        raise ValueError("coeff_modulus must contain at least one prime")
    for q in coeff_modulus:
        if not isinstance(q, int) or q <= 1:
            raise ValueError(f"coeff_modulus entries must be integers > 1, got {q!r}")


@dataclass(frozen=True)
class ParameterSet:
    scheme: SchemeType
    poly_modulus_degree: int
    coeff_modulus: Tuple[int, ...]
    plain_modulus: Optional[int] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "scheme", SchemeType(self.scheme))
        object.__setattr__(self, "coeff_modulus", tuple(self.coeff_modulus))
        _check_chain(self.poly_modulus_degree, self.coeff_modulus)
        if self.scheme is SchemeType.BFV:
            if not isinstance(self.plain_modulus, int) or self.plain_modulus <= 1:
                raise ValueError("BFV parameter sets require an integer plain_modulus > 1")
        elif self.plain_modulus is not None:
            raise ValueError(f"{self.scheme.name} parameter sets take no plain_modulus")

    @property
    def chain_length(self) -> int:
        return len(self.coeff_modulus)

    def __str__(self) -> str:
        chain = ", ".join(hex(q) for q in self.coeff_modulus)
        text = f"{self.scheme.name}(n={self.poly_modulus_degree}, coeff_modulus=[{chain}]"
        if self.plain_modulus is not None:
            text += f", plain_modulus={self.plain_modulus}"
        return text + ")"


@dataclass(frozen=True)
class ParameterSpaceEntry:
    poly_modulus_degree: int
    coeff_modulus: Tuple[int, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "coeff_modulus", tuple(self.coeff_modulus))
        _check_chain(self.poly_modulus_degree, self.coeff_modulus)

    def bfv(self, plain_modulus: int) -> ParameterSet:
        return ParameterSet(
            SchemeType.BFV, self.poly_modulus_degree, self.coeff_modulus, plain_modulus
        )

    def ckks(self) -> ParameterSet:
        return ParameterSet(SchemeType.CKKS, self.poly_modulus_degree, self.coeff_modulus)


def derive_parameter_sets(
    entry: ParameterSpaceEntry, plain_modulus: int
) -> Tuple[ParameterSet, ParameterSet]:
    """Return the (CKKS, BFV) parameter sets benchmarked for `entry`."""
    return entry.ckks(), entry.bfv(plain_modulus)


class ParameterSpace:
    """Ordered, immutable catalog of parameter-space entries.

    Duplicates are not rejected here; `EnvironmentCache.build` fails on them
    so a bad catalog aborts before any case is registered.
    """

    def __init__(self, entries: Iterable[ParameterSpaceEntry]) -> None:
        self._entries: Tuple[ParameterSpaceEntry, ...] = tuple(entries)

    @classmethod
    def from_pairs(cls, pairs: Iterable[Tuple[int, Sequence[int]]]) -> "ParameterSpace":
        return cls(ParameterSpaceEntry(degree, tuple(chain)) for degree, chain in pairs)

    @property
    def entries(self) -> Tuple[ParameterSpaceEntry, ...]:
        return self._entries

    @property
    def degrees(self) -> Tuple[int, ...]:
        return tuple(e.poly_modulus_degree for e in self._entries)

    def __iter__(self) -> Iterator[ParameterSpaceEntry]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"ParameterSpace(degrees={list(self.degrees)})"


def default_parameter_space(
    backend: "HEBackend", degrees: Sequence[int] = DEFAULT_POLY_DEGREES
) -> ParameterSpace:
    """Build the 128-bit default catalog published by `backend`."""
    return ParameterSpace(
        ParameterSpaceEntry(degree, tuple(backend.default_coeff_modulus(degree)))
        for degree in degrees
    )
