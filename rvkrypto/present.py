"""PRESENT-80/128 lightweight block cipher: key schedules and block calls.

Keys and blocks are bytes in big-endian order; round keys are 32 integers.
"""

from .bitmanip import MASK64
from .present_rounds import present_dec_rv64, present_enc_rv64

__all__ = [
    "present80_key",
    "present128_key",
    "present80_enc",
    "present80_dec",
    "present128_enc",
    "present128_dec",
]

SBOX64_ENC = 0x21748FE3DA09B65C
ROUND_KEYS = 32


def _as_bytes(value, size: int, what: str) -> bytes:
    data = bytes(value)
    if len(data) != size:
        raise ValueError(f"{what} must be {size} bytes, got {len(data)}")
    return data


def _sbox_nibble(x: int) -> int:
    return (SBOX64_ENC >> (4 * x)) & 0xF


def present80_key(key) -> list:
    """Expand an 80-bit key into 32 round keys."""
    key = _as_bytes(key, 10, "PRESENT-80 key")
    k1 = int.from_bytes(key[:8], "big")
    k0 = int.from_bytes(key[8:], "big")
    rk = [k1]
    for i in range(1, ROUND_KEYS):
        # rotate the 80-bit register left by 61
        t = ((k1 << 61) | (k0 << 45) | (k1 >> 19)) & MASK64
        k0 = k1 >> 3
        # top nibble through the S-box
        k1 = (t & ~(0xF << 60) & MASK64) | (_sbox_nibble(t >> 60) << 60)
        # round counter into bits 19..15
        k1 ^= i >> 1
        k0 = (k0 ^ (i << 15)) & 0xFFFF
        rk.append(k1)
    return rk


def present128_key(key) -> list:
    """Expand a 128-bit key into 32 round keys."""
    key = _as_bytes(key, 16, "PRESENT-128 key")
    k1 = int.from_bytes(key[:8], "big")
    k0 = int.from_bytes(key[8:], "big")
    rk = [k1]
    for i in range(1, ROUND_KEYS):
        t = ((k1 << 61) | (k0 >> 3)) & MASK64
        k0 = ((k0 << 61) | (k1 >> 3)) & MASK64
        k1 = (
            (t & ~(0xFF << 56) & MASK64)
            | (_sbox_nibble(t >> 60) << 60)
            | (_sbox_nibble((t >> 56) & 0xF) << 56)
        )
        k1 ^= i >> 2
        k0 ^= (i << 62) & MASK64
        rk.append(k1)
    return rk


def _encrypt(block, rk) -> bytes:
    x = int.from_bytes(_as_bytes(block, 8, "PRESENT block"), "big")
    return present_enc_rv64(x, rk).to_bytes(8, "big")


def _decrypt(block, rk) -> bytes:
    x = int.from_bytes(_as_bytes(block, 8, "PRESENT block"), "big")
    return present_dec_rv64(x, rk).to_bytes(8, "big")


def present80_enc(pt, key) -> bytes:
    """Encrypt an 8-byte block with a 10-byte key."""
    return _encrypt(pt, present80_key(key))


def present80_dec(ct, key) -> bytes:
    """Decrypt an 8-byte block with a 10-byte key."""
    return _decrypt(ct, present80_key(key))


def present128_enc(pt, key) -> bytes:
    """Encrypt an 8-byte block with a 16-byte key."""
    return _encrypt(pt, present128_key(key))


def present128_dec(ct, key) -> bytes:
    """Decrypt an 8-byte block with a 16-byte key."""
    return _decrypt(ct, present128_key(key))