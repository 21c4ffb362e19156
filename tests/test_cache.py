from __future__ import annotations

import logging

import pytest

from conftest import CHAIN_2048, CHAIN_4096, PLAIN_4096, DummyEnv
from sealbench.cache import EnvironmentCache
from sealbench.errors import DuplicateParameterSetError, MissingEnvironmentError, SealBenchError
from sealbench.params import ParameterSet, ParameterSpace, ParameterSpaceEntry, SchemeType


def test_build_creates_two_environments_per_entry(backend, space):
    cache = EnvironmentCache.build(space, backend)
    assert len(cache) == 2 * len(space)
    assert len(backend.created) == 4
    for degree, chain in ((2048, CHAIN_2048), (4096, CHAIN_4096)):
        ckks = ParameterSet(SchemeType.CKKS, degree, chain)
        bfv = ParameterSet(
            SchemeType.BFV, degree, chain, backend.batching_plain_modulus(degree, 20)
        )
        assert ckks in cache
        assert bfv in cache
        assert cache.get(ckks).parms == ckks
        assert cache.get(bfv).parms == bfv


def test_build_fails_fast_on_duplicate_entry(backend):
    space = ParameterSpace.from_pairs(
        [(2048, CHAIN_2048), (4096, CHAIN_4096), (2048, CHAIN_2048)]
    )
    with pytest.raises(DuplicateParameterSetError) as excinfo:
        EnvironmentCache.build(space, backend)
    assert "duplicate parameter sets" in str(excinfo.value)
    assert isinstance(excinfo.value, SealBenchError)
    # the duplicate itself is never constructed
    assert len(backend.created) == 4


def test_insert_never_overwrites():
    cache = EnvironmentCache()
    parms = ParameterSet(SchemeType.BFV, 4096, CHAIN_4096, PLAIN_4096)
    first = DummyEnv(parms)
    cache.insert(parms, first)
    with pytest.raises(DuplicateParameterSetError):
        cache.insert(parms, DummyEnv(parms))
    assert cache.get(parms) is first


def test_get_missing_parameter_set_is_explicit_error():
    cache = EnvironmentCache()
    parms = ParameterSet(SchemeType.CKKS, 2048, CHAIN_2048)
    with pytest.raises(MissingEnvironmentError) as excinfo:
        cache.get(parms)
    assert excinfo.value.parms == parms
    assert "n=2048" in str(excinfo.value)


def test_iteration_yields_parameter_sets_in_insertion_order(backend, space):
    cache = EnvironmentCache.build(space, backend)
    assert list(cache) == backend.created
    assert [p.scheme for p in cache] == [SchemeType.CKKS, SchemeType.BFV] * 2


def test_build_logs_memory_pool_before_and_after_at_debug(backend, space, caplog):
    caplog.set_level(logging.DEBUG, logger="sealbench.cache")
    EnvironmentCache.build(space, backend)
    pool = [r for r in caplog.records if "memory pool" in r.getMessage()]
    assert [r.levelno for r in pool] == [logging.DEBUG, logging.DEBUG]
    assert pool[0].getMessage() == f"memory pool before precomputation: {3 << 20} bytes"
    assert pool[1].getMessage().endswith(f"after precomputation: {7 << 20} bytes")


def test_build_records_plain_modulus_per_entry(backend, space):
    cache = EnvironmentCache.build(space, backend)
    for entry in space:
        assert cache.plain_modulus(entry) == backend.batching_plain_modulus(entry.poly_modulus_degree, 20)


def test_second_bfv_environment_for_an_entry_is_rejected():
    cache = EnvironmentCache()
    entry = ParameterSpaceEntry(4096, CHAIN_4096)
    cache.insert(entry.bfv(PLAIN_4096), DummyEnv(entry.bfv(PLAIN_4096)))
    with pytest.raises(DuplicateParameterSetError):
        cache.insert(entry.bfv(65537), DummyEnv(entry.bfv(65537)))
    assert cache.plain_modulus(entry) == PLAIN_4096
    assert len(cache) == 1
