from __future__ import annotations
from typing import Any, List, Protocol, Sequence

from .params import ParameterSet

"""Backend interfaces used by adapters.

Adapters implement these Protocols and register a backend class into the
global registry. The cache, case functions and CLI talk only to these
interfaces, never to the encryption library directly. Values such as keys,
plaintexts and ciphertexts are opaque library objects.
"""

class HEContextInfo(Protocol):
    """Structural facts about a validated context."""
    def using_keyswitching(self) -> bool: ...
    def coeff_modulus_size(self) -> int: ...
    def total_coeff_modulus_bit_count(self) -> int: ...

class BenchEnv(Protocol):
    """Precomputed fixtures for one parameter set.

    Every method returns fresh objects; none of them may modify the keys or
    context held by the environment.
    """
    parms: ParameterSet
    context: HEContextInfo

    def keygen_secret(self) -> Any: ...
    def keygen_public(self) -> Any: ...
    def keygen_relin(self) -> Any: ...
    def keygen_galois(self) -> Any: ...

    def sample_values(self) -> List[Any]: ...
    def encode(self, values: Sequence[Any]) -> Any: ...
    def decode(self, plain: Any) -> List[Any]: ...
    def encrypt_secret(self, plain: Any) -> Any: ...
    def encrypt_public(self, plain: Any) -> Any: ...
    def decrypt(self, cipher: Any) -> Any: ...

    def add(self, a: Any, b: Any) -> Any: ...
    def add_plain(self, a: Any, plain: Any) -> Any: ...
    def multiply(self, a: Any, b: Any) -> Any: ...
    def multiply_plain(self, a: Any, plain: Any) -> Any: ...
    def square(self, a: Any) -> Any: ...
    def mod_switch_to_next_inplace(self, cipher: Any) -> None: ...
    def rescale_to_next_inplace(self, cipher: Any) -> None: ...
    def relinearize_inplace(self, cipher: Any) -> None: ...
    def rotate_rows(self, cipher: Any, steps: int) -> Any: ...
    def rotate_columns(self, cipher: Any) -> Any: ...
    def rotate_vector(self, cipher: Any, steps: int) -> Any: ...

class HEBackend(Protocol):
    """Entry point into one encryption library."""
    name: str
    version: str
    library: str
    def default_coeff_modulus(self, poly_modulus_degree: int) -> Sequence[int]: ...
    def batching_plain_modulus(self, poly_modulus_degree: int, bit_size: int) -> int: ...
    def create_env(self, parms: ParameterSet) -> BenchEnv: ...
    def memory_pool_bytes(self) -> int: ...
