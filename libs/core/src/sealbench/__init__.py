from .errors import (
    SealBenchError,
    DuplicateParameterSetError,
    MissingEnvironmentError,
    BackendUnavailableError,
    HarnessArgumentError,
)
from .interfaces import BenchEnv, HEBackend, HEContextInfo
from .registry import registry
from .params import (
    DEFAULT_POLY_DEGREES,
    PLAIN_MODULUS_BITS,
    ParameterSet,
    ParameterSpace,
    ParameterSpaceEntry,
    SchemeType,
    default_parameter_space,
    derive_parameter_sets,
)
from .cache import EnvironmentCache
from .naming import benchmark_name, parse_benchmark_name
from .harness import BenchmarkCase, BenchmarkRegistry, CaseResult, run_all
from .family import OPERATIONS, register_all, register_family

__all__ = [
    "SealBenchError",
    "DuplicateParameterSetError",
    "MissingEnvironmentError",
    "BackendUnavailableError",
    "HarnessArgumentError",
    "BenchEnv",
    "HEBackend",
    "HEContextInfo",
    "registry",
    "DEFAULT_POLY_DEGREES",
    "PLAIN_MODULUS_BITS",
    "ParameterSet",
    "ParameterSpace",
    "ParameterSpaceEntry",
    "SchemeType",
    "default_parameter_space",
    "derive_parameter_sets",
    "EnvironmentCache",
    "benchmark_name",
    "parse_benchmark_name",
    "BenchmarkCase",
    "BenchmarkRegistry",
    "CaseResult",
    "run_all",
    "OPERATIONS",
    "register_all",
    "register_family",
]
