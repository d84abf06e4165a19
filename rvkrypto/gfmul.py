"""GHASH finite-field operations in GF(2^128) for GCM.

Field elements are 16-byte blocks laid out as little-endian words.
``rev`` reverses the bits within each byte; ``mul`` computes
``(z ^ rev(x)) * h`` and returns the new accumulator.
"""

import enum
import struct

from .bitmanip import (
    MASK64,
    brev8_32,
    brev8_64,
    clmul32,
    clmul64,
    clmulh32,
    clmulh64,
)

__all__ = [
    "GhashVariant",
    "ghash_rev_rv32",
    "ghash_mul_rv32",
    "ghash_mul_rv32_kar",
    "ghash_rev_rv64",
    "ghash_mul_rv64",
]

_W32 = struct.Struct("<4I")
_W64 = struct.Struct("<2Q")
_POLY = 0x87


def _block(value) -> bytes:
    data = bytes(value)
    if len(data) != 16:
        raise ValueError(f"GF(2^128) element must be 16 bytes, got {len(data)}")
    return data


def _words32(value):
    return _W32.unpack(_block(value))


def _words64(value):
    return _W64.unpack(_block(value))


def ghash_rev_rv32(z) -> bytes:
    """Reverse bits in each byte, working on 32-bit words."""
    return _W32.pack(*(brev8_32(w) for w in _words32(z)))


def ghash_rev_rv64(z) -> bytes:
    """Reverse bits in each byte, working on 64-bit words."""
    return _W64.pack(*(brev8_64(d) for d in _words64(z)))


def _load32(z, x):
    return [brev8_32(xw) ^ zw for xw, zw in zip(_words32(x), _words32(z))]


def ghash_mul_rv32(z, x, h) -> bytes:
    """Return ``(z ^ rev(x)) * h``; compact 32-bit schoolbook loop."""
    x0, x1, x2, x3 = _load32(z, x)
    hw = _words32(h)

    y = hw[3]
    z4 = clmulh32(x3, y)
    z3 = clmul32(x3, y)
    z2 = clmul32(x2, y)
    z3 ^= clmulh32(x2, y)
    z1 = clmul32(x1, y)
    z2 ^= clmulh32(x1, y)
    z0 = clmul32(x0, y)
    z1 ^= clmulh32(x0, y)

    z1 ^= clmulh32(z4, _POLY)
    z0 ^= clmul32(z4, _POLY)

    for y in reversed(hw[:3]):
        t1 = clmulh32(x3, y)
        t0 = clmul32(x3, y)
        z4 = z3 ^ t1
        t1 = clmulh32(x2, y)
        t2 = clmul32(x2, y)
        z3 = z2 ^ t0 ^ t1
        t1 = clmulh32(x1, y)
        t0 = clmul32(x1, y)
        z2 = z1 ^ t1 ^ t2
        t1 = clmulh32(x0, y)
        t2 = clmul32(x0, y)
        z1 = z0 ^ t0 ^ t1

        z1 ^= clmulh32(z4, _POLY)
        z0 = t2 ^ clmul32(z4, _POLY)

    return _W32.pack(z0, z1, z2, z3)


def _kara32(a0, a1, b0, b1):
    """Two-word Karatsuba carry-less product, returned as four words."""
    r3 = clmulh32(a1, b1)
    r2 = clmul32(a1, b1)
    r1 = clmulh32(a0, b0)
    r0 = clmul32(a0, b0)
    t0 = a0 ^ a1
    t2 = b0 ^ b1
    t1 = clmulh32(t0, t2) ^ r1 ^ r3
    t0 = clmul32(t0, t2) ^ r0 ^ r2
    return r0, r1 ^ t0, r2 ^ t1, r3


def ghash_mul_rv32_kar(z, x, h) -> bytes:
    """Return ``(z ^ rev(x)) * h``; two-level 32-bit Karatsuba."""
    x0, x1, x2, x3 = _load32(z, x)
    y0, y1, y2, y3 = _words32(h)

    z4, z5, z6, z7 = _kara32(x2, x3, y2, y3)
    z0, z1, z2, z3 = _kara32(x0, x1, y0, y1)
    m0, m1, m2, m3 = _kara32(x0 ^ x2, x1 ^ x3, y0 ^ y2, y1 ^ y3)

    m3 ^= z3 ^ z7
    m2 ^= z2 ^ z6
    m1 ^= z1 ^ z5
    m0 ^= z0 ^ z4
    z5 ^= m3
    z4 ^= m2
    z3 ^= m1
    z2 ^= m0

    z4 ^= clmulh32(z7, _POLY)
    z3 ^= clmul32(z7, _POLY)
    z3 ^= clmulh32(z6, _POLY)
    z2 ^= clmul32(z6, _POLY)
    z2 ^= clmulh32(z5, _POLY)
    z1 ^= clmul32(z5, _POLY)
    z1 ^= clmulh32(z4, _POLY)
    z0 ^= clmul32(z4, _POLY)

    return _W32.pack(z0, z1, z2, z3)


def ghash_mul_rv64(z, x, h) -> bytes:
    """Return ``(z ^ rev(x)) * h``; 64-bit Karatsuba with shift reduction."""
    x0, x1 = (brev8_64(xd) ^ zd for xd, zd in zip(_words64(x), _words64(z)))
    y0, y1 = _words64(h)

    z3 = clmulh64(x1, y1)
    z2 = clmul64(x1, y1)
    z1 = clmulh64(x0, y0)
    z0 = clmul64(x0, y0)
    t0 = x0 ^ x1
    t2 = y0 ^ y1
    t1 = clmulh64(t0, t2) ^ z1 ^ z3
    t0 = clmul64(t0, t2) ^ z0 ^ z2
    z2 ^= t1
    z1 ^= t0

    z2 ^= (z3 >> 63) ^ (z3 >> 62) ^ (z3 >> 57)
    z1 ^= (
        z3 ^ (z3 << 1) ^ (z3 << 2) ^ (z3 << 7)
        ^ (z2 >> 63) ^ (z2 >> 62) ^ (z2 >> 57)
    ) & MASK64
    z0 ^= (z2 ^ (z2 << 1) ^ (z2 << 2) ^ (z2 << 7)) & MASK64

    return _W64.pack(z0, z1)


class GhashVariant(enum.Enum):
    """Selectable GHASH implementation."""

    RV32 = "rv32"
    RV32_KARATSUBA = "rv32_karatsuba"
    RV64 = "rv64"

    def rev(self, z) -> bytes:
        """Reverse bits in each byte of a block."""
        if self is GhashVariant.RV64:
            return ghash_rev_rv64(z)
        return ghash_rev_rv32(z)

    def mul(self, z, x, h) -> bytes:
        """Return ``(z ^ rev(x)) * h``."""
        if self is GhashVariant.RV32:
            return ghash_mul_rv32(z, x, h)
        if self is GhashVariant.RV32_KARATSUBA:
            return ghash_mul_rv32_kar(z, x, h)
        return ghash_mul_rv64(z, x, h)