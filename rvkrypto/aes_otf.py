"""AES encryption with the key schedule computed on the fly.

Only the raw key is needed; round keys are derived as the rounds proceed
and never stored as a whole.
"""

import struct

from .scalar_crypto import aes64es, aes64esm, aes64ks1i, aes64ks2

__all__ = [
    "aes128_enc_otf",
    "aes192_enc_otf",
    "aes256_enc_otf",
    "encrypt_otf",
]

_BLOCK = struct.Struct("<2Q")
_ROUNDS_BY_KEY_BYTES = {16: 10, 24: 12, 32: 14}


def _load(value, size: int, what: str) -> bytes:
    data = bytes(value)
    if len(data) != size:
        raise ValueError(f"{what} must be {size} bytes, got {len(data)}")
    return data


def _round_key_words(key: bytes):
    """Yield 64-bit round key words lazily, one key-schedule step at a time."""
    state = list(struct.unpack(f"<{len(key) // 8}Q", key))
    rnum = 0
    while True:
        yield from state
        if len(state) == 4:
            k0, k1, k2, k3 = state
            k0 = aes64ks2(aes64ks1i(k3, rnum), k0)
            k1 = aes64ks2(k0, k1)
            k2 = aes64ks2(aes64ks1i(k1, 10), k2)
            k3 = aes64ks2(k2, k3)
            state = [k0, k1, k2, k3]
        else:
            prev = aes64ks1i(state[-1], rnum)
            updated = []
            for k in state:
                prev = aes64ks2(prev, k)
                updated.append(prev)
            state = updated
        rnum += 1


def _encrypt(pt, key: bytes) -> bytes:
    nr = _ROUNDS_BY_KEY_BYTES[len(key)]
    keys = _round_key_words(key)
    t0, t1 = _BLOCK.unpack(_load(pt, 16, "AES block"))
    t0 ^= next(keys)
    t1 ^= next(keys)
    for _ in range(nr - 1):
        t0, t1 = aes64esm(t0, t1) ^ next(keys), aes64esm(t1, t0) ^ next(keys)
    t0, t1 = aes64es(t0, t1) ^ next(keys), aes64es(t1, t0) ^ next(keys)
    return _BLOCK.pack(t0, t1)


def aes128_enc_otf(pt, key) -> bytes:
    """Encrypt a block with a 16-byte key."""
    return _encrypt(pt, _load(key, 16, "AES-128 key"))


def aes192_enc_otf(pt, key) -> bytes:
    """Encrypt a block with a 24-byte key."""
    return _encrypt(pt, _load(key, 24, "AES-192 key"))


def aes256_enc_otf(pt, key) -> bytes:
    """Encrypt a block with a 32-byte key."""
    return _encrypt(pt, _load(key, 32, "AES-256 key"))


def encrypt_otf(pt, key) -> bytes:
    """Encrypt a block; the variant follows from the key length."""
    key = bytes(key)
    if len(key) not in _ROUNDS_BY_KEY_BYTES:
        raise ValueError(f"AES key must be 16, 24 or 32 bytes, got {len(key)}")
    return _encrypt(pt, key)