from __future__ import annotations
"""Registration of the benchmark family of one parameter-space entry.

The family is described by `OPERATIONS`, a table of
(category, operation, scheme, case function, gate) rows walked once per
entry. Gates are evaluated against the BFV environment of the entry; the
KeyGen cases themselves run on the CKKS environment.

Registration / display order:
1. KeyGen
2. BFV
3. CKKS
"""
import logging
from dataclasses import dataclass
from functools import partial
from typing import Callable, List, Tuple

from . import cases
from .cache import EnvironmentCache
from .harness import ITERATIONS, TIME_UNIT, BenchmarkCase, BenchmarkRegistry
from .interfaces import BenchEnv
from .naming import benchmark_name
from .params import ParameterSpace, ParameterSpaceEntry, SchemeType, derive_parameter_sets

log = logging.getLogger(__name__)

Gate = Callable[[BenchEnv], bool]


def always(env: BenchEnv) -> bool:
    return True


def using_keyswitching(env: BenchEnv) -> bool:
    return bool(env.context.using_keyswitching())


def has_modulus_chain(env: BenchEnv) -> bool:
    return env.context.coeff_modulus_size() > 1


@dataclass(frozen=True)
class Operation:
    category: str
    name: str
    scheme: SchemeType
    case_fn: Callable[[BenchEnv], cases.TimedOp]
    gate: Gate = always


_BFV, _CKKS = SchemeType.BFV, SchemeType.CKKS

OPERATIONS: Tuple[Operation, ...] = (
    Operation("KeyGen", "Secret", _CKKS, cases.keygen_secret),
    Operation("KeyGen", "Public", _CKKS, cases.keygen_public),
    Operation("KeyGen", "Relin", _CKKS, cases.keygen_relin, using_keyswitching),
    Operation("KeyGen", "Galois", _CKKS, cases.keygen_galois, using_keyswitching),

    Operation("BFV", "EncryptSecret", _BFV, cases.encrypt_secret),
    Operation("BFV", "EncryptPublic", _BFV, cases.encrypt_public),
    Operation("BFV", "Decrypt", _BFV, cases.decrypt),
    Operation("BFV", "EncodeBatch", _BFV, cases.encode),
    Operation("BFV", "DecodeBatch", _BFV, cases.decode),
    Operation("BFV", "EvaluateAddCt", _BFV, cases.add_ct),
    Operation("BFV", "EvaluateAddPt", _BFV, cases.add_pt),
    Operation("BFV", "EvaluateMulCt", _BFV, cases.mul_ct),
    Operation("BFV", "EvaluateMulPt", _BFV, cases.mul_pt),
    Operation("BFV", "EvaluateSquare", _BFV, cases.square),
    Operation("BFV", "EvaluateModSwitchInplace", _BFV, cases.modswitch_inplace, has_modulus_chain),
    Operation("BFV", "EvaluateRelinInplace", _BFV, cases.relin_inplace, using_keyswitching),
    Operation("BFV", "EvaluateRotateRows", _BFV, cases.rotate_rows, using_keyswitching),
    Operation("BFV", "EvaluateRotateCols", _BFV, cases.rotate_cols, using_keyswitching),

    Operation("CKKS", "EncryptSecret", _CKKS, cases.encrypt_secret),
    Operation("CKKS", "EncryptPublic", _CKKS, cases.encrypt_public),
    Operation("CKKS", "Decrypt", _CKKS, cases.decrypt),
    Operation("CKKS", "EncodeDouble", _CKKS, cases.encode),
    Operation("CKKS", "DecodeDouble", _CKKS, cases.decode),
    Operation("CKKS", "EvaluateAddCt", _CKKS, cases.add_ct),
    Operation("CKKS", "EvaluateAddPt", _CKKS, cases.add_pt),
    Operation("CKKS", "EvaluateMulCt", _CKKS, cases.mul_ct),
    Operation("CKKS", "EvaluateMulPt", _CKKS, cases.mul_pt),
    Operation("CKKS", "EvaluateSquare", _CKKS, cases.square),
    Operation("CKKS", "EvaluateRescaleInplace", _CKKS, cases.rescale_inplace, has_modulus_chain),
    Operation("CKKS", "EvaluateRelinInplace", _CKKS, cases.relin_inplace, using_keyswitching),
    Operation("CKKS", "EvaluateRotate", _CKKS, cases.rotate_vector, using_keyswitching),
)


def family_log_q(cache: EnvironmentCache, entry: ParameterSpaceEntry) -> int:
    """Total key-context modulus bits, read from the entry's CKKS environment."""
    env = cache.get(entry.ckks())
    return int(env.context.total_coeff_modulus_bit_count())


def register_family(
    entry: ParameterSpaceEntry,
    cache: EnvironmentCache,
    registry: BenchmarkRegistry,
    *,
    operations: Tuple[Operation, ...] = OPERATIONS,
) -> List[BenchmarkCase]:
    """Register every applicable case of `entry` into `registry`.

    The BFV parameter set is derived with the plain modulus the cache recorded
    for `entry`; an entry that was never built raises MissingEnvironmentError.
    """
    parms_ckks, parms_bfv = derive_parameter_sets(entry, cache.plain_modulus(entry))
    envs = {SchemeType.BFV: cache.get(parms_bfv), SchemeType.CKKS: cache.get(parms_ckks)}
    gate_env = envs[SchemeType.BFV]

    n = entry.poly_modulus_degree
    log_q = family_log_q(cache, entry)
    added: List[BenchmarkCase] = []
    for op in operations:
        if not op.gate(gate_env):
            continue
        env = envs[op.scheme]
        added.append(
            registry.register(
                benchmark_name(n, log_q, op.category, op.name),
                partial(op.case_fn, env),
                env.parms,
                iterations=ITERATIONS,
                unit=TIME_UNIT,
            )
        )
    log.debug("registered %d cases for n=%d log_q=%d", len(added), n, log_q)
    return added


def register_all(
    space: ParameterSpace,
    cache: EnvironmentCache,
    registry: BenchmarkRegistry,
) -> List[BenchmarkCase]:
    """Register the family of every entry in `space`, in catalog order."""
    added: List[BenchmarkCase] = []
    for entry in space:
        added.extend(register_family(entry, cache, registry))
    return added
