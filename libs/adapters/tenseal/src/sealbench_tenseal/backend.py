from __future__ import annotations
"""SEAL backend built on TenSEAL's low-level `sealapi` bindings.

`SealBenchEnv` owns the context, keys and encoders of one parameter set.
Each operation writes into a freshly allocated destination so concurrent
readers never observe a shared object changing.
"""
import logging
import os
from typing import Any, List, Sequence

from sealbench import registry
from sealbench.params import ParameterSet, SchemeType

from ._util import modulus_values, sample_ints, sample_reals, tenseal_version, try_import_sealapi

log = logging.getLogger(__name__)

seal = try_import_sealapi()


class SealContextInfo:
    def __init__(self, context) -> None:
        self._context = context

    @property
    def raw(self):
        return self._context

    def using_keyswitching(self) -> bool:
        return bool(self._context.using_keyswitching())

    def coeff_modulus_size(self) -> int:
        return len(self._context.first_context_data().parms().coeff_modulus())

    def total_coeff_modulus_bit_count(self) -> int:
        return int(self._context.key_context_data().total_coeff_modulus_bit_count())

    def first_total_coeff_modulus_bit_count(self) -> int:
        return int(self._context.first_context_data().total_coeff_modulus_bit_count())


def _encryption_parameters(parms: ParameterSet):
    scheme = seal.SCHEME_TYPE.BFV if parms.scheme is SchemeType.BFV else seal.SCHEME_TYPE.CKKS
    out = seal.EncryptionParameters(scheme)
    out.set_poly_modulus_degree(parms.poly_modulus_degree)
    out.set_coeff_modulus([seal.Modulus(q) for q in parms.coeff_modulus])
    if parms.plain_modulus is not None:
        out.set_plain_modulus(seal.Modulus(parms.plain_modulus))
    return out


class SealBenchEnv:
    def __init__(self, parms: ParameterSet) -> None:
        self.parms = parms
        # benchmark parameters may be custom and insecure; skip the security check
        raw = seal.SEALContext(_encryption_parameters(parms), True, seal.SEC_LEVEL_TYPE.NONE)
        self.context = SealContextInfo(raw)

        self._keygen = seal.KeyGenerator(raw)
        self._secret_key = self._keygen.secret_key()
        self._public_key = seal.PublicKey()
        self._keygen.create_public_key(self._public_key)
        self._relin_keys = None
        self._galois_keys = None
        if self.context.using_keyswitching():
            self._relin_keys = self.keygen_relin()
            self._galois_keys = self.keygen_galois()

        self._encryptor = seal.Encryptor(raw, self._public_key, self._secret_key)
        self._decryptor = seal.Decryptor(raw, self._secret_key)
        self._evaluator = seal.Evaluator(raw)

        n = parms.poly_modulus_degree
        if parms.scheme is SchemeType.BFV:
            self._encoder = seal.BatchEncoder(raw)
            self._values: List[Any] = sample_ints(n, parms.plain_modulus)
            self._scale = None
        else:
            self._encoder = seal.CKKSEncoder(raw)
            self._values = sample_reals(n // 2)
            # leave room for one squaring inside the data-level modulus
            bits = max(1, min(40, self.context.first_total_coeff_modulus_bit_count() // 4))
            self._scale = float(2 ** bits)
        log.debug("environment ready for %s", parms)

    # KeyGen

    def keygen_secret(self):
        return seal.KeyGenerator(self.context.raw).secret_key()

    def keygen_public(self):
        out = seal.PublicKey()
        self._keygen.create_public_key(out)
        return out

    def keygen_relin(self):
        out = seal.RelinKeys()
        self._keygen.create_relin_keys(out)
        return out

    def keygen_galois(self):
        out = seal.GaloisKeys()
        self._keygen.create_galois_keys(out)
        return out

    # Encoding and encryption

    def sample_values(self) -> List[Any]:
        return list(self._values)

    def encode(self, values: Sequence[Any]):
        plain = seal.Plaintext()
        if self._scale is None:
            self._encoder.encode(list(values), plain)
        else:
            self._encoder.encode(list(values), self._scale, plain)
        return plain

    def decode(self, plain) -> List[Any]:
        if self._scale is None:
            return list(self._encoder.decode_uint64(plain))
        return list(self._encoder.decode_double(plain))

    def encrypt_secret(self, plain):
        out = seal.Ciphertext()
        self._encryptor.encrypt_symmetric(plain, out)
        return out

    def encrypt_public(self, plain):
        out = seal.Ciphertext()
        self._encryptor.encrypt(plain, out)
        return out

    def decrypt(self, cipher):
        out = seal.Plaintext()
        self._decryptor.decrypt(cipher, out)
        return out

    # Evaluation

    def add(self, a, b):
        out = seal.Ciphertext()
        self._evaluator.add(a, b, out)
        return out

    def add_plain(self, a, plain):
        out = seal.Ciphertext()
        self._evaluator.add_plain(a, plain, out)
        return out

    def multiply(self, a, b):
        out = seal.Ciphertext()
        self._evaluator.multiply(a, b, out)
        return out

    def multiply_plain(self, a, plain):
        out = seal.Ciphertext()
        self._evaluator.multiply_plain(a, plain, out)
        return out

    def square(self, a):
        out = seal.Ciphertext()
        self._evaluator.square(a, out)
        return out

    def mod_switch_to_next_inplace(self, cipher) -> None:
        self._evaluator.mod_switch_to_next_inplace(cipher)

    def rescale_to_next_inplace(self, cipher) -> None:
        self._evaluator.rescale_to_next_inplace(cipher)

    def relinearize_inplace(self, cipher) -> None:
        self._evaluator.relinearize_inplace(cipher, self._relin_keys)

    def rotate_rows(self, cipher, steps: int):
        out = seal.Ciphertext()
        self._evaluator.rotate_rows(cipher, steps, self._galois_keys, out)
        return out

    def rotate_columns(self, cipher):
        out = seal.Ciphertext()
        self._evaluator.rotate_columns(cipher, self._galois_keys, out)
        return out

    def rotate_vector(self, cipher, steps: int):
        out = seal.Ciphertext()
        self._evaluator.rotate_vector(cipher, steps, self._galois_keys, out)
        return out


@registry.register("seal")
class SealBackend:
    name = "seal"

    def __init__(self) -> None:
        self.version = tenseal_version()
        self.library = "Microsoft SEAL (TenSEAL)"

    def default_coeff_modulus(self, poly_modulus_degree: int) -> Sequence[int]:
        return modulus_values(
            seal.CoeffModulus.BFVDefault(poly_modulus_degree, seal.SEC_LEVEL_TYPE.TC128)
        )

    def batching_plain_modulus(self, poly_modulus_degree: int, bit_size: int) -> int:
        return int(seal.PlainModulus.Batching(poly_modulus_degree, bit_size).value())

    def create_env(self, parms: ParameterSet) -> SealBenchEnv:
        return SealBenchEnv(parms)

    def memory_pool_bytes(self) -> int:
        """Process RSS; `sealapi` does not bind SEAL's MemoryManager pool counter."""
        import psutil

        return int(psutil.Process(os.getpid()).memory_info().rss)
