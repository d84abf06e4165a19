"""AES-128/192/256 block encryption built from 32-bit scalar AES steps.

Round keys are sequences of 32-bit words (44, 52 or 60 of them) holding
the state columns as little-endian words. Blocks are 16-byte values.
"""

import struct
from functools import reduce

from .bitmanip import ror32
from .scalar_crypto import aes32dsi, aes32dsmi, aes32esi, aes32esmi

__all__ = [
    "AES128_ROUNDS",
    "AES192_ROUNDS",
    "AES256_ROUNDS",
    "enc_key",
    "dec_key",
    "dec_invmc",
    "enc_rounds",
    "dec_rounds",
    "encrypt_block",
    "decrypt_block",
]

AES128_ROUNDS = 10
AES192_ROUNDS = 12
AES256_ROUNDS = 14

_ROUNDS_BY_KEY_BYTES = {16: AES128_ROUNDS, 24: AES192_ROUNDS, 32: AES256_ROUNDS}
_ROUNDS_BY_RK_WORDS = {4 * (nr + 1): nr for nr in _ROUNDS_BY_KEY_BYTES.values()}
_AES_RCON = (0x01, 0x02, 0x04, 0x08, 0x10, 0x20, 0x40, 0x80, 0x1B, 0x36)
_BLOCK = struct.Struct("<4I")


def _sub_word(acc: int, x: int) -> int:
    """XOR the S-box image of every byte of ``x`` into ``acc``."""
    return reduce(lambda a, bs: aes32esi(a, x, bs), range(4), acc)


def _load_block(block) -> tuple:
    data = bytes(block)
    if len(data) != 16:
        raise ValueError(f"AES block must be 16 bytes, got {len(data)}")
    return _BLOCK.unpack(data)


def enc_key(key) -> tuple:
    """Expand a 16-, 24- or 32-byte key into the encryption round keys."""
    key = bytes(key)
    try:
        nr = _ROUNDS_BY_KEY_BYTES[len(key)]
    except KeyError:
        raise ValueError(f"AES key must be 16, 24 or 32 bytes, got {len(key)}") from None
    nk = len(key) // 4
    total = 4 * (nr + 1)
    words = list(struct.unpack(f"<{nk}I", key))
    rcon = iter(_AES_RCON)
    while len(words) < total:
        i = len(words)
        prev = words[-1]
        base = words[i - nk]
        if i % nk == 0:
            # rotation by 8 bits is a right rotation with little-endian words
            words.append(_sub_word(base ^ next(rcon), ror32(prev, 8)))
        elif nk > 6 and i % nk == 4:
            words.append(_sub_word(base, prev))
        else:
            words.append(base ^ prev)
    return tuple(words)


def dec_invmc(words) -> tuple:
    """Apply inverse MixColumns to every 32-bit word."""
    result = []
    for x in words:
        y = _sub_word(0, x)
        result.append(reduce(lambda a, bs: aes32dsmi(a, y, bs), range(4), 0))
    return tuple(result)


def dec_key(key) -> tuple:
    """Expand a key into the round keys for the equivalent inverse cipher."""
    rk = enc_key(key)
    return rk[:4] + dec_invmc(rk[4:-4]) + rk[-4:]


def _check_rounds(rk, nr: int) -> tuple:
    if nr not in _ROUNDS_BY_RK_WORDS.values():
        raise ValueError(f"number of rounds must be 10, 12 or 14, got {nr}")
    words = tuple(rk)
    if len(words) < 4 * (nr + 1):
        raise ValueError(
            f"{nr} rounds need {4 * (nr + 1)} round key words, got {len(words)}"
        )
    return words


def _enc_round(keys, state, op) -> tuple:
    return tuple(
        reduce(lambda acc, bs: op(acc, state[(j + bs) % 4], bs), range(4), key)
        for j, key in enumerate(keys)
    )


def _dec_round(keys, state, op) -> tuple:
    return tuple(
        reduce(lambda acc, bs: op(acc, state[(j - bs) % 4], bs), range(4), key)
        for j, key in enumerate(keys)
    )


def enc_rounds(pt, rk, nr: int) -> bytes:
    """Encrypt one block with ``nr`` rounds of the given round keys."""
    words = _check_rounds(rk, nr)
    state = tuple(p ^ k for p, k in zip(_load_block(pt), words[0:4]))
    for r in range(1, nr):
        state = _enc_round(words[4 * r:4 * r + 4], state, aes32esmi)
    state = _enc_round(words[4 * nr:4 * nr + 4], state, aes32esi)
    return _BLOCK.pack(*state)


def dec_rounds(ct, rk, nr: int) -> bytes:
    """Decrypt one block with ``nr`` rounds of inverse-cipher round keys."""
    words = _check_rounds(rk, nr)
    state = tuple(c ^ k for c, k in zip(_load_block(ct), words[4 * nr:4 * nr + 4]))
    for r in range(nr - 1, 0, -1):
        state = _dec_round(words[4 * r:4 * r + 4], state, aes32dsmi)
    state = _dec_round(words[0:4], state, aes32dsi)
    return _BLOCK.pack(*state)


def _rounds_for(rk) -> tuple:
    words = tuple(rk)
    try:
        return words, _ROUNDS_BY_RK_WORDS[len(words)]
    except KeyError:
        raise ValueError(
            f"round keys must have 44, 52 or 60 words, got {len(words)}"
        ) from None


def encrypt_block(pt, rk) -> bytes:
    """Encrypt a block; the key size follows from the number of round keys."""
    words, nr = _rounds_for(rk)
    return enc_rounds(pt, words, nr)


def decrypt_block(ct, rk) -> bytes:
    """Decrypt a block with round keys made by :func:`dec_key`."""
    words, nr = _rounds_for(rk)
    return dec_rounds(ct, words, nr)