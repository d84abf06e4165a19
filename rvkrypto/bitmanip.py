"""Scalar bit-manipulation primitives on 32- and 64-bit register values.

All functions take Python integers, truncate them to the register width
(so negative values behave as two's complement) and return unsigned results.
"""

MASK32 = 0xFFFFFFFF
MASK64 = 0xFFFFFFFFFFFFFFFF

__all__ = [
    "MASK32",
    "MASK64",
    "sll32",
    "srl32",
    "sll64",
    "srl64",
    "rol32",
    "ror32",
    "rol64",
    "ror64",
    "grev32",
    "grev64",
    "brev8_32",
    "brev8_64",
    "shfl32",
    "unshfl32",
    "zip32",
    "unzip32",
    "clmul32",
    "clmulh32",
    "clmul64",
    "clmulh64",
    "xperm4_32",
    "xperm8_32",
    "xperm4_64",
    "xperm8_64",
]


# --- shifts and rotations --------------------------------------------------


def sll32(rs1: int, rs2: int) -> int:
    """Logical left shift of a 32-bit value; the amount is taken mod 32."""
    return ((rs1 & MASK32) << (rs2 & 31)) & MASK32


def srl32(rs1: int, rs2: int) -> int:
    """Logical right shift of a 32-bit value; the amount is taken mod 32."""
    return (rs1 & MASK32) >> (rs2 & 31)


def sll64(rs1: int, rs2: int) -> int:
    """Logical left shift of a 64-bit value; the amount is taken mod 64."""
    return ((rs1 & MASK64) << (rs2 & 63)) & MASK64


def srl64(rs1: int, rs2: int) -> int:
    """Logical right shift of a 64-bit value; the amount is taken mod 64."""
    return (rs1 & MASK64) >> (rs2 & 63)


def rol32(rs1: int, rs2: int) -> int:
    """Rotate a 32-bit value left."""
    return sll32(rs1, rs2) | srl32(rs1, -rs2)


def ror32(rs1: int, rs2: int) -> int:
    """Rotate a 32-bit value right."""
    return srl32(rs1, rs2) | sll32(rs1, -rs2)


def rol64(rs1: int, rs2: int) -> int:
    """Rotate a 64-bit value left."""
    return sll64(rs1, rs2) | srl64(rs1, -rs2)


def ror64(rs1: int, rs2: int) -> int:
    """Rotate a 64-bit value right."""
    return srl64(rs1, rs2) | sll64(rs1, -rs2)


# --- generalized reverse ---------------------------------------------------

_GREV32_STAGES = (
    (1, 0x55555555, 0xAAAAAAAA),
    (2, 0x33333333, 0xCCCCCCCC),
    (4, 0x0F0F0F0F, 0xF0F0F0F0),
    (8, 0x00FF00FF, 0xFF00FF00),
    (16, 0x0000FFFF, 0xFFFF0000),
)

_GREV64_STAGES = (
    (1, 0x5555555555555555, 0xAAAAAAAAAAAAAAAA),
    (2, 0x3333333333333333, 0xCCCCCCCCCCCCCCCC),
    (4, 0x0F0F0F0F0F0F0F0F, 0xF0F0F0F0F0F0F0F0),
    (8, 0x00FF00FF00FF00FF, 0xFF00FF00FF00FF00),
    (16, 0x0000FFFF0000FFFF, 0xFFFF0000FFFF0000),
    (32, 0x00000000FFFFFFFF, 0xFFFFFFFF00000000),
)


def _grev(x: int, shamt: int, stages, mask: int) -> int:
    for bit, low, high in stages:
        if shamt & bit:
            x = (((x & low) << bit) | ((x & high) >> bit)) & mask
    return x


def grev32(rs1: int, rs2: int) -> int:
    """Generalized bit reverse of a 32-bit value, control taken mod 32."""
    return _grev(rs1 & MASK32, rs2 & 31, _GREV32_STAGES, MASK32)


def grev64(rs1: int, rs2: int) -> int:
    """Generalized bit reverse of a 64-bit value, control taken mod 64."""
    return _grev(rs1 & MASK64, rs2 & 63, _GREV64_STAGES, MASK64)


def brev8_32(rs1: int) -> int:
    """Reverse the bits within each byte of a 32-bit value."""
    return grev32(rs1, 7)


def brev8_64(rs1: int) -> int:
    """Reverse the bits within each byte of a 64-bit value."""
    return grev64(rs1, 7)


# --- shuffle (zip / unzip) --------------------------------------------------

_SHUFFLE_STAGES = (
    (8, 0x00FF0000, 0x0000FF00),
    (4, 0x0F000F00, 0x00F000F0),
    (2, 0x30303030, 0x0C0C0C0C),
    (1, 0x44444444, 0x22222222),
)


def _shuffle_stage(src: int, mask_l: int, mask_r: int, n: int) -> int:
    x = src & ~(mask_l | mask_r) & MASK32
    return x | ((src << n) & mask_l) | ((src >> n) & mask_r)


def shfl32(rs1: int, rs2: int) -> int:
    """Generalized shuffle of a 32-bit value, control taken mod 16."""
    x = rs1 & MASK32
    shamt = rs2 & 15
    for bit, mask_l, mask_r in _SHUFFLE_STAGES:
        if shamt & bit:
            x = _shuffle_stage(x, mask_l, mask_r, bit)
    return x


def unshfl32(rs1: int, rs2: int) -> int:
    """Inverse of shfl32 for the same control value."""
    x = rs1 & MASK32
    shamt = rs2 & 15
    for bit, mask_l, mask_r in reversed(_SHUFFLE_STAGES):
        if shamt & bit:
            x = _shuffle_stage(x, mask_l, mask_r, bit)
    return x


def zip32(rs1: int) -> int:
    """Interleave the low and high halves of a 32-bit value."""
    return shfl32(rs1, 15)


def unzip32(rs1: int) -> int:
    """Separate even and odd bits of a 32-bit value into halves."""
    return unshfl32(rs1, 15)


# --- carry-less multiply ----------------------------------------------------


def _clmul_full(a: int, b: int) -> int:
    product = 0
    for i in range(b.bit_length()):
        if (b >> i) & 1:
            product ^= a << i
    return product


def clmul32(rs1: int, rs2: int) -> int:
    """Low 32 bits of the carry-less product."""
    return _clmul_full(rs1 & MASK32, rs2 & MASK32) & MASK32


def clmulh32(rs1: int, rs2: int) -> int:
    """High 32 bits of the carry-less product."""
    return _clmul_full(rs1 & MASK32, rs2 & MASK32) >> 32


def clmul64(rs1: int, rs2: int) -> int:
    """Low 64 bits of the carry-less product."""
    return _clmul_full(rs1 & MASK64, rs2 & MASK64) & MASK64


def clmulh64(rs1: int, rs2: int) -> int:
    """High 64 bits of the carry-less product."""
    return _clmul_full(rs1 & MASK64, rs2 & MASK64) >> 64


# --- crossbar permutation ---------------------------------------------------


def _xperm(rs1: int, rs2: int, sz_log2: int, width: int) -> int:
    sz = 1 << sz_log2
    mask = (1 << sz) - 1
    result = 0
    for i in range(0, width, sz):
        pos = ((rs2 >> i) & mask) << sz_log2
        if pos < width:
            result |= ((rs1 >> pos) & mask) << i
    return result


def xperm4_32(rs1: int, rs2: int) -> int:
    """Nibble lookup: each nibble of rs2 selects a nibble of rs1."""
    return _xperm(rs1 & MASK32, rs2 & MASK32, 2, 32)


def xperm8_32(rs1: int, rs2: int) -> int:
    """Byte lookup: each byte of rs2 selects a byte of rs1."""
    return _xperm(rs1 & MASK32, rs2 & MASK32, 3, 32)


def xperm4_64(rs1: int, rs2: int) -> int:
    """Nibble lookup on 64-bit values."""
    return _xperm(rs1 & MASK64, rs2 & MASK64, 2, 64)


def xperm8_64(rs1: int, rs2: int) -> int:
    """Byte lookup on 64-bit values."""
    return _xperm(rs1 & MASK64, rs2 & MASK64, 3, 64)