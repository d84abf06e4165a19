"""PRESENT block cipher rounds over an expanded key of 32 64-bit round keys.

Two equivalent formulations are provided: one working on two 32-bit halves
and one on the whole 64-bit state, both built from nibble-permutation lookups.
"""

from .bitmanip import MASK32, MASK64, xperm4_32, xperm4_64

__all__ = [
    "present_enc_rv32",
    "present_dec_rv32",
    "present_enc_rv64",
    "present_dec_rv64",
]

SBOX64_ENC = 0x21748FE3DA09B65C
SBOX64_DEC = 0xA970364BD21C8FE5
P64_NYBBLE = 0xFB73EA62D951C840

ROUND_KEYS = 32


def _round_keys(rk):
    keys = [k & MASK64 for k in rk]
    if len(keys) != ROUND_KEYS:
        raise ValueError(f"expected {ROUND_KEYS} round keys, got {len(keys)}")
    return keys


def _p_layer(x: int, full: int) -> int:
    """Gather each bit position of the nibbles into its own nibble lane."""
    rep = full // MASK32
    y = x & (0x11111111 * rep)
    y |= y >> 6
    y |= y >> 3
    z = y & (0x000F000F * rep)

    y = x & (0x22222222 * rep)
    y |= y >> 6
    y |= (y << 3) & full
    z |= y & (0x00F000F0 * rep)

    y = x & (0x44444444 * rep)
    y |= (y << 6) & full
    y |= y >> 3
    z |= y & (0x0F000F00 * rep)

    y = x & (0x88888888 * rep)
    y |= (y << 6) & full
    y |= (y << 3) & full
    z |= y & (0xF000F000 * rep)
    return z


def _p_layer_inv(z: int, full: int) -> int:
    """Scatter nibble lanes back to bit positions within nibbles."""
    rep = full // MASK32
    y = z & (0x000F000F * rep)
    y |= (y << 3) & full
    y |= (y << 6) & full
    x = y & (0x11111111 * rep)

    y = z & (0x00F000F0 * rep)
    y |= y >> 3
    y |= (y << 6) & full
    x |= y & (0x22222222 * rep)

    y = z & (0x0F000F00 * rep)
    y |= (y << 3) & full
    y |= y >> 6
    x |= y & (0x44444444 * rep)

    y = z & (0xF000F000 * rep)
    y |= y >> 3
    y |= y >> 6
    x |= y & (0x88888888 * rep)
    return x


def _sbox_32(table: int, x: int) -> int:
    return xperm4_32(table & MASK32, x) | xperm4_32(table >> 32, x ^ 0x88888888)


def _nibble_perm_32(x0: int, x1: int, p: int) -> int:
    return xperm4_32(x0, p) | xperm4_32(x1, p ^ 0x88888888)


def present_enc_rv32(x: int, rk) -> int:
    """Encrypt a 64-bit block using two 32-bit halves."""
    keys = _round_keys(rk)
    x &= MASK64
    x0, x1 = x & MASK32, x >> 32
    for key in keys[:-1]:
        x0 ^= key & MASK32
        x1 ^= key >> 32
        x0 = _sbox_32(SBOX64_ENC, x0)
        x1 = _sbox_32(SBOX64_ENC, x1)
        z0 = _p_layer(x0, MASK32)
        z1 = _p_layer(x1, MASK32)
        x0 = _nibble_perm_32(z0, z1, P64_NYBBLE & MASK32)
        x1 = _nibble_perm_32(z0, z1, P64_NYBBLE >> 32)
    x0 ^= keys[-1] & MASK32
    x1 ^= keys[-1] >> 32
    return x0 | (x1 << 32)


def present_dec_rv32(x: int, rk) -> int:
    """Decrypt a 64-bit block using two 32-bit halves."""
    keys = _round_keys(rk)
    x &= MASK64
    x0, x1 = x & MASK32, x >> 32
    for key in reversed(keys[1:]):
        x0 ^= key & MASK32
        x1 ^= key >> 32
        z0 = _nibble_perm_32(x0, x1, P64_NYBBLE & MASK32)
        z1 = _nibble_perm_32(x0, x1, P64_NYBBLE >> 32)
        x0 = _p_layer_inv(z0, MASK32)
        x1 = _p_layer_inv(z1, MASK32)
        x0 = _sbox_32(SBOX64_DEC, x0)
        x1 = _sbox_32(SBOX64_DEC, x1)
    x0 ^= keys[0] & MASK32
    x1 ^= keys[0] >> 32
    return x0 | (x1 << 32)


def present_enc_rv64(x: int, rk) -> int:
    """Encrypt a 64-bit block on the whole 64-bit state."""
    keys = _round_keys(rk)
    x &= MASK64
    for key in keys[:-1]:
        x ^= key
        x = xperm4_64(SBOX64_ENC, x)
        x = xperm4_64(_p_layer(x, MASK64), P64_NYBBLE)
    return x ^ keys[-1]


def present_dec_rv64(x: int, rk) -> int:
    """Decrypt a 64-bit block on the whole 64-bit state."""
    keys = _round_keys(rk)
    x &= MASK64
    for key in reversed(keys[1:]):
        x ^= key
        x = _p_layer_inv(xperm4_64(x, P64_NYBBLE), MASK64)
        x = xperm4_64(SBOX64_DEC, x)
    return x ^ keys[0]