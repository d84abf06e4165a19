"""AES-128/192/256 block encryption built from 64-bit scalar AES steps.

Round keys are sequences of 64-bit words (22, 26 or 30 of them); each
word holds two little-endian 32-bit state columns. Blocks are 16 bytes.
"""

import struct

from .scalar_crypto import (
    aes64ds,
    aes64dsm,
    aes64es,
    aes64esm,
    aes64im,
    aes64ks1i,
    aes64ks2,
)

__all__ = [
    "AES128_ROUNDS",
    "AES192_ROUNDS",
    "AES256_ROUNDS",
    "enc_key",
    "dec_key",
    "enc_rounds",
    "dec_rounds",
    "encrypt_block",
    "decrypt_block",
]

AES128_ROUNDS = 10
AES192_ROUNDS = 12
AES256_ROUNDS = 14

_ROUNDS_BY_KEY_BYTES = {16: AES128_ROUNDS, 24: AES192_ROUNDS, 32: AES256_ROUNDS}
_ROUNDS_BY_RK_WORDS = {2 * (nr + 1): nr for nr in _ROUNDS_BY_KEY_BYTES.values()}
_BLOCK = struct.Struct("<2Q")


def _load_block(block) -> tuple:
    data = bytes(block)
    if len(data) != 16:
        raise ValueError(f"AES block must be 16 bytes, got {len(data)}")
    return _BLOCK.unpack(data)


def _next_state(state: list, rnum: int) -> list:
    """Advance the key-schedule state (2, 3 or 4 words) by one step."""
    if len(state) == 4:
        k0, k1, k2, k3 = state
        k0 = aes64ks2(aes64ks1i(k3, rnum), k0)
        k1 = aes64ks2(k0, k1)
        k2 = aes64ks2(aes64ks1i(k1, 10), k2)
        k3 = aes64ks2(k2, k3)
        return [k0, k1, k2, k3]
    prev = aes64ks1i(state[-1], rnum)
    result = []
    for k in state:
        prev = aes64ks2(prev, k)
        result.append(prev)
    return result


def enc_key(key) -> tuple:
    """Expand a 16-, 24- or 32-byte key into the encryption round keys."""
    key = bytes(key)
    try:
        nr = _ROUNDS_BY_KEY_BYTES[len(key)]
    except KeyError:
        raise ValueError(
            f"AES key must be 16, 24 or 32 bytes, got {len(key)}"
        ) from None
    total = 2 * (nr + 1)
    state = list(struct.unpack(f"<{len(key) // 8}Q", key))
    words = []
    rnum = 0
    while True:
        words.extend(state)
        if len(words) >= total:
            break
        state = _next_state(state, rnum)
        rnum += 1
    return tuple(words[:total])


def dec_key(key) -> tuple:
    """Expand a key into the round keys for the equivalent inverse cipher."""
    rk = enc_key(key)
    return rk[:2] + tuple(aes64im(k) for k in rk[2:-2]) + rk[-2:]


def _check_rounds(rk, nr: int) -> tuple:
    if nr not in _ROUNDS_BY_RK_WORDS.values():
        raise ValueError(f"number of rounds must be 10, 12 or 14, got {nr}")
    words = tuple(rk)
    if len(words) < 2 * (nr + 1):
        raise ValueError(
            f"{nr} rounds need {2 * (nr + 1)} round key words, got {len(words)}"
        )
    return words


def enc_rounds(pt, rk, nr: int) -> bytes:
    """Encrypt one block with ``nr`` rounds of the given round keys."""
    kp = _check_rounds(rk, nr)
    t0, t1 = _load_block(pt)
    t0 ^= kp[0]
    t1 ^= kp[1]
    for r in range(1, nr):
        t0, t1 = aes64esm(t0, t1) ^ kp[2 * r], aes64esm(t1, t0) ^ kp[2 * r + 1]
    t0, t1 = aes64es(t0, t1) ^ kp[2 * nr], aes64es(t1, t0) ^ kp[2 * nr + 1]
    return _BLOCK.pack(t0, t1)


def dec_rounds(ct, rk, nr: int) -> bytes:
    """Decrypt one block with ``nr`` rounds of inverse-cipher round keys."""
    kp = _check_rounds(rk, nr)
    t0, t1 = _load_block(ct)
    for i in range(nr - 1, 0, -1):
        t0 ^= kp[2 * i + 2]
        t1 ^= kp[2 * i + 3]
        t0, t1 = aes64dsm(t0, t1), aes64dsm(t1, t0)
    t0 ^= kp[2]
    t1 ^= kp[3]
    t0, t1 = aes64ds(t0, t1) ^ kp[0], aes64ds(t1, t0) ^ kp[1]
    return _BLOCK.pack(t0, t1)


def _rounds_for(rk) -> tuple:
    words = tuple(rk)
    try:
        return words, _ROUNDS_BY_RK_WORDS[len(words)]
    except KeyError:
        raise ValueError(
            f"round keys must have 22, 26 or 30 words, got {len(words)}"
        ) from None


def encrypt_block(pt, rk) -> bytes:
    """Encrypt a block; the key size follows from the number of round keys."""
    words, nr = _rounds_for(rk)
    return enc_rounds(pt, words, nr)


def decrypt_block(ct, rk) -> bytes:
    """Decrypt a block with round keys made by :func:`dec_key`."""
    words, nr = _rounds_for(rk)
    return dec_rounds(ct, words, nr)