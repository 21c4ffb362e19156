from __future__ import annotations
"""Case functions bound into benchmark cases.

Each function receives a shared environment, prepares its own inputs and
returns the zero-arg operation that gets timed. The runner calls the
function again before every iteration, so inputs consumed in place
(mod-switch, rescale, relinearize) are always fresh and never shared.
"""
from typing import Any, Callable

from .interfaces import BenchEnv

TimedOp = Callable[[], Any]


def _fresh_plain(env: BenchEnv) -> Any:
    return env.encode(env.sample_values())


def _fresh_cipher(env: BenchEnv) -> Any:
    return env.encrypt_secret(_fresh_plain(env))


# KeyGen

def keygen_secret(env: BenchEnv) -> TimedOp:
    return env.keygen_secret


def keygen_public(env: BenchEnv) -> TimedOp:
    return env.keygen_public


def keygen_relin(env: BenchEnv) -> TimedOp:
    return env.keygen_relin


def keygen_galois(env: BenchEnv) -> TimedOp:
    return env.keygen_galois


# Encryption and encoding

def encrypt_secret(env: BenchEnv) -> TimedOp:
    plain = _fresh_plain(env)
    return lambda: env.encrypt_secret(plain)


def encrypt_public(env: BenchEnv) -> TimedOp:
    plain = _fresh_plain(env)
    return lambda: env.encrypt_public(plain)


def decrypt(env: BenchEnv) -> TimedOp:
    cipher = _fresh_cipher(env)
    return lambda: env.decrypt(cipher)


def encode(env: BenchEnv) -> TimedOp:
    values = env.sample_values()
    return lambda: env.encode(values)


def decode(env: BenchEnv) -> TimedOp:
    plain = _fresh_plain(env)
    return lambda: env.decode(plain)


# Evaluation

def add_ct(env: BenchEnv) -> TimedOp:
    a, b = _fresh_cipher(env), _fresh_cipher(env)
    return lambda: env.add(a, b)


def add_pt(env: BenchEnv) -> TimedOp:
    a, plain = _fresh_cipher(env), _fresh_plain(env)
    return lambda: env.add_plain(a, plain)


def mul_ct(env: BenchEnv) -> TimedOp:
    a, b = _fresh_cipher(env), _fresh_cipher(env)
    return lambda: env.multiply(a, b)


def mul_pt(env: BenchEnv) -> TimedOp:
    a, plain = _fresh_cipher(env), _fresh_plain(env)
    return lambda: env.multiply_plain(a, plain)


def square(env: BenchEnv) -> TimedOp:
    a = _fresh_cipher(env)
    return lambda: env.square(a)


def modswitch_inplace(env: BenchEnv) -> TimedOp:
    cipher = _fresh_cipher(env)
    return lambda: env.mod_switch_to_next_inplace(cipher)


def rescale_inplace(env: BenchEnv) -> TimedOp:
    # rescaling needs the doubled scale left by a multiplication
    cipher = env.multiply(_fresh_cipher(env), _fresh_cipher(env))
    return lambda: env.rescale_to_next_inplace(cipher)


def relin_inplace(env: BenchEnv) -> TimedOp:
    # size-3 ciphertext
    cipher = env.multiply(_fresh_cipher(env), _fresh_cipher(env))
    return lambda: env.relinearize_inplace(cipher)


def rotate_rows(env: BenchEnv) -> TimedOp:
    cipher = _fresh_cipher(env)
    return lambda: env.rotate_rows(cipher, 1)


def rotate_cols(env: BenchEnv) -> TimedOp:
    cipher = _fresh_cipher(env)
    return lambda: env.rotate_columns(cipher)


def rotate_vector(env: BenchEnv) -> TimedOp:
    cipher = _fresh_cipher(env)
    return lambda: env.rotate_vector(cipher, 1)
