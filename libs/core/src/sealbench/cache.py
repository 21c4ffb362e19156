from __future__ import annotations
"""One evaluation environment per distinct parameter set.

Environments are expensive (transform tables, keys, sample ciphertexts), so
they are built once in a single precomputation pass and shared read-only by
every case registered for them.
"""
import logging
from typing import Dict, Iterator

from .errors import DuplicateParameterSetError, MissingEnvironmentError
from .interfaces import BenchEnv, HEBackend
from .params import (
    PLAIN_MODULUS_BITS,
    ParameterSet,
    ParameterSpace,
    ParameterSpaceEntry,
    SchemeType,
    derive_parameter_sets,
)

log = logging.getLogger(__name__)


class EnvironmentCache:
    def __init__(self) -> None:
        self._envs: Dict[ParameterSet, BenchEnv] = {}
        self._plain: Dict[ParameterSpaceEntry, int] = {}

    def insert(self, parms: ParameterSet, env: BenchEnv) -> None:
        if parms in self._envs:
            raise DuplicateParameterSetError(parms)
        if parms.scheme is SchemeType.BFV:
            # one BFV environment per entry
            entry = ParameterSpaceEntry(parms.poly_modulus_degree, parms.coeff_modulus)
            if entry in self._plain:
                raise DuplicateParameterSetError(parms)
            self._plain[entry] = parms.plain_modulus
        self._envs[parms] = env

    def get(self, parms: ParameterSet) -> BenchEnv:
        try:
            return self._envs[parms]
        except KeyError:
            raise MissingEnvironmentError(parms) from None

    def plain_modulus(self, entry: ParameterSpaceEntry) -> int:
        """BFV plain modulus the entry was built with."""
        try:
            return self._plain[entry]
        except KeyError:
            raise MissingEnvironmentError(entry) from None

    def __contains__(self, parms: object) -> bool:
        return parms in self._envs

    def __len__(self) -> int:
        return len(self._envs)

    def __iter__(self) -> Iterator[ParameterSet]:
        return iter(self._envs)

    @classmethod
    def build(
        cls,
        space: ParameterSpace,
        backend: HEBackend,
        *,
        plain_modulus_bits: int = PLAIN_MODULUS_BITS,
    ) -> "EnvironmentCache":
        """Create the CKKS and BFV environments of every entry in `space`.

        Raises DuplicateParameterSetError on the first repeated entry; the
        partially built cache is discarded with it.
        """
        cache = cls()
        log.debug("memory pool before precomputation: %d bytes", backend.memory_pool_bytes())
        for entry in space:
            plain_modulus = backend.batching_plain_modulus(entry.poly_modulus_degree, plain_modulus_bits)
            for parms in derive_parameter_sets(entry, plain_modulus):
                if parms in cache:
                    raise DuplicateParameterSetError(parms)
                log.debug("building environment for %s", parms)
                cache.insert(parms, backend.create_env(parms))
        log.debug(
            "built %d environments; memory pool after precomputation: %d bytes",
            len(cache),
            backend.memory_pool_bytes(),
        )
        return cache
