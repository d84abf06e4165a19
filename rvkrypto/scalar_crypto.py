"""Scalar cryptography primitives: AES, SHA-2, SM4 and SM3 helper operations.

Each function models one scalar instruction. Inputs are Python integers
truncated to the register width; results are unsigned 32- or 64-bit values.
"""

import operator
from functools import reduce

from .bitmanip import MASK32, MASK64, rol32, ror32, ror64, sll32, srl32, srl64

__all__ = [
    "aes_xtime",
    "aes_fwd_mc_8",
    "aes_fwd_mc_32",
    "aes_inv_mc_8",
    "aes_inv_mc_32",
    "aes32dsi",
    "aes32dsmi",
    "aes32esi",
    "aes32esmi",
    "aes64ds",
    "aes64dsm",
    "aes64im",
    "aes64es",
    "aes64esm",
    "aes64ks1i",
    "aes64ks2",
    "sha256sig0",
    "sha256sig1",
    "sha256sum0",
    "sha256sum1",
    "sha512sig0h",
    "sha512sig0l",
    "sha512sig1h",
    "sha512sig1l",
    "sha512sum0r",
    "sha512sum1r",
    "sha512sig0",
    "sha512sig1",
    "sha512sum0",
    "sha512sum1",
    "sm4ed",
    "sm4ks",
    "sm3p0",
    "sm3p1",
]


# --- tables -----------------------------------------------------------------


def _gf_mul(a: int, b: int) -> int:
    product = 0
    while b:
        if b & 1:
            product ^= a
        a <<= 1
        if a & 0x100:
            a ^= 0x11B
        b >>= 1
    return product


def _gf_inv(x: int) -> int:
    result, base, exponent = 1, x, 254
    while exponent:
        if exponent & 1:
            result = _gf_mul(result, base)
        base = _gf_mul(base, base)
        exponent >>= 1
    return result


def _rotl8(x: int, n: int) -> int:
    return ((x << n) | (x >> (8 - n))) & 0xFF


def _build_aes_sboxes():
    forward = bytearray(256)
    inverse = bytearray(256)
    for x in range(256):
        y = _gf_inv(x)
        s = y ^ _rotl8(y, 1) ^ _rotl8(y, 2) ^ _rotl8(y, 3) ^ _rotl8(y, 4) ^ 0x63
        forward[x] = s
        inverse[s] = x
    return bytes(forward), bytes(inverse)


_AES_FWD_SBOX, _AES_INV_SBOX = _build_aes_sboxes()

_SM4_SBOX = bytes.fromhex(
    "D690E9FECCE13DB716B614C228FB2C05"
    "2B679A762ABE04C3AA44132649860699"
    "9C4250F491EF987A33540B43EDCFAC62"
    "E4B31CA9C908E89580DF94FA758F3FA6"
    "4707A7FCF37317BA83593C19E6854FA8"
    "686B81B27164DA8BF8EB0F4B70569D35"
    "1E240E5E6358D1A225227C3B01217887"
    "D40046579FD327524C3602E7A0C4C89E"
    "EABF8AD240C738B5A3F7F2CEF96115A1"
    "E0AE5DA49B341A55AD933230F58CB1E3"
    "1DF6E22E8266CA60C02923AB0D534E6F"
    "D5DB3745DEFD8E2F03FF6A726D6C5B51"
    "8D1BAF92BBDDBC7F11D95C411F105AD8"
    "0AC13188A5CD7BBD2D74D012B8E5B4B0"
    "8969974A0C96777E65B9F109C56EC684"
    "18F07DEC3ADC4D2079EE5F3ED7CB3948"
)

_AES_RCON = (0x01, 0x02, 0x04, 0x08, 0x10, 0x20, 0x40, 0x80, 0x1B, 0x36)


# --- AES helpers --------------------------------------------------------------


def aes_xtime(x: int) -> int:
    """Multiply a byte by 0x02 in the AES field."""
    return ((x << 1) ^ (0x11B if x & 0x80 else 0)) & 0xFF


def aes_fwd_mc_8(x: int) -> int:
    """Forward MixColumns contribution of one byte, as a 32-bit column."""
    x &= MASK32
    x2 = aes_xtime(x & 0xFF)
    return (((x ^ x2) << 24) | (x << 16) | (x << 8) | x2) & MASK32


def aes_fwd_mc_32(x: int) -> int:
    """Forward MixColumns of a whole 32-bit column."""
    return reduce(
        operator.xor,
        (rol32(aes_fwd_mc_8((x >> (8 * i)) & 0xFF), 8 * i) for i in range(4)),
    )


def aes_inv_mc_8(x: int) -> int:
    """Inverse MixColumns contribution of one byte, as a 32-bit column."""
    x &= MASK32
    x2 = aes_xtime(x & 0xFF)
    x4 = aes_xtime(x2)
    x8 = aes_xtime(x4)
    return (
        ((x ^ x2 ^ x8) << 24)
        | ((x ^ x4 ^ x8) << 16)
        | ((x ^ x8) << 8)
        | (x2 ^ x4 ^ x8)
    ) & MASK32


def aes_inv_mc_32(x: int) -> int:
    """Inverse MixColumns of a whole 32-bit column."""
    return reduce(
        operator.xor,
        (rol32(aes_inv_mc_8((x >> (8 * i)) & 0xFF), 8 * i) for i in range(4)),
    )


def _select_byte(rs2: int, bs: int):
    shift = (bs & 3) << 3
    return ((rs2 & MASK32) >> shift) & 0xFF, shift


# --- AES, 32-bit ---------------------------------------------------------------


def aes32dsi(rs1: int, rs2: int, bs: int) -> int:
    """Inverse S-box on the selected byte of rs2, rotated back and XORed into rs1."""
    x, shift = _select_byte(rs2, bs)
    return (rs1 & MASK32) ^ rol32(_AES_INV_SBOX[x], shift)


def aes32dsmi(rs1: int, rs2: int, bs: int) -> int:
    """Inverse S-box and inverse MixColumns on one byte, XORed into rs1."""
    x, shift = _select_byte(rs2, bs)
    return (rs1 & MASK32) ^ rol32(aes_inv_mc_8(_AES_INV_SBOX[x]), shift)


def aes32esi(rs1: int, rs2: int, bs: int) -> int:
    """Forward S-box on the selected byte of rs2, rotated back and XORed into rs1."""
    x, shift = _select_byte(rs2, bs)
    return (rs1 & MASK32) ^ rol32(_AES_FWD_SBOX[x], shift)


def aes32esmi(rs1: int, rs2: int, bs: int) -> int:
    """Forward S-box and MixColumns on one byte, XORed into rs1."""
    x, shift = _select_byte(rs2, bs)
    return (rs1 & MASK32) ^ rol32(aes_fwd_mc_8(_AES_FWD_SBOX[x]), shift)


# --- AES, 64-bit ---------------------------------------------------------------

# (register, bit offset) of the source byte for each output byte
_ES_PICKS = ((0, 0), (0, 40), (1, 16), (1, 56), (0, 32), (1, 8), (1, 48), (0, 24))
_DS_PICKS = ((0, 0), (1, 40), (1, 16), (0, 56), (0, 32), (0, 8), (1, 48), (1, 24))


def _shift_sub(rs1: int, rs2: int, picks, sbox: bytes) -> int:
    regs = (rs1 & MASK64, rs2 & MASK64)
    return int.from_bytes(
        bytes(sbox[(regs[r] >> s) & 0xFF] for r, s in picks), "little"
    )


def aes64ds(rs1: int, rs2: int) -> int:
    """Half of inverse ShiftRows and inverse SubBytes."""
    return _shift_sub(rs1, rs2, _DS_PICKS, _AES_INV_SBOX)


def aes64im(rs1: int) -> int:
    """Inverse MixColumns on both 32-bit columns of a 64-bit value."""
    rs1 &= MASK64
    return aes_inv_mc_32(rs1 & MASK32) | (aes_inv_mc_32(rs1 >> 32) << 32)


def aes64dsm(rs1: int, rs2: int) -> int:
    """Inverse ShiftRows, SubBytes and MixColumns on half of the state."""
    return aes64im(aes64ds(rs1, rs2))


def aes64es(rs1: int, rs2: int) -> int:
    """Half of forward ShiftRows and SubBytes."""
    return _shift_sub(rs1, rs2, _ES_PICKS, _AES_FWD_SBOX)


def aes64esm(rs1: int, rs2: int) -> int:
    """Forward ShiftRows, SubBytes and MixColumns on half of the state."""
    x = aes64es(rs1, rs2)
    return aes_fwd_mc_32(x & MASK32) | (aes_fwd_mc_32(x >> 32) << 32)


def aes64ks1i(rs1: int, rnum: int) -> int:
    """Key schedule step: SubWord (with RotWord and round constant if rnum < 10)."""
    if rnum < 0:
        raise ValueError(f"round number must be non-negative, got {rnum}")
    t = (rs1 & MASK64) >> 32
    rc = 0
    if rnum < 10:
        t = ror32(t, 8)
        rc = _AES_RCON[rnum]
    t = int.from_bytes(
        bytes(_AES_FWD_SBOX[b] for b in t.to_bytes(4, "little")), "little"
    )
    t ^= rc
    return t | (t << 32)


def aes64ks2(rs1: int, rs2: int) -> int:
    """Key schedule step combining two halves of the round key."""
    rs1 &= MASK64
    rs2 &= MASK64
    t = (rs1 >> 32) ^ (rs2 & MASK32)
    return t ^ (t << 32) ^ (rs2 & 0xFFFFFFFF00000000)


# --- SHA-256 -------------------------------------------------------------------


def sha256sig0(rs1: int) -> int:
    """SHA-256 small sigma 0."""
    return ror32(rs1, 7) ^ ror32(rs1, 18) ^ srl32(rs1, 3)


def sha256sig1(rs1: int) -> int:
    """SHA-256 small sigma 1."""
    return ror32(rs1, 17) ^ ror32(rs1, 19) ^ srl32(rs1, 10)


def sha256sum0(rs1: int) -> int:
    """SHA-256 big sigma 0."""
    return ror32(rs1, 2) ^ ror32(rs1, 13) ^ ror32(rs1, 22)


def sha256sum1(rs1: int) -> int:
    """SHA-256 big sigma 1."""
    return ror32(rs1, 6) ^ ror32(rs1, 11) ^ ror32(rs1, 25)


# --- SHA-512, 32-bit halves ------------------------------------------------------


def sha512sig0h(rs1: int, rs2: int) -> int:
    """High word of SHA-512 small sigma 0 (rs1 = high, rs2 = low)."""
    return (
        srl32(rs1, 1) ^ srl32(rs1, 7) ^ srl32(rs1, 8)
        ^ sll32(rs2, 31) ^ sll32(rs2, 24)
    )


def sha512sig0l(rs1: int, rs2: int) -> int:
    """Low word of SHA-512 small sigma 0 (rs1 = low, rs2 = high)."""
    return (
        srl32(rs1, 1) ^ srl32(rs1, 7) ^ srl32(rs1, 8)
        ^ sll32(rs2, 31) ^ sll32(rs2, 25) ^ sll32(rs2, 24)
    )


def sha512sig1h(rs1: int, rs2: int) -> int:
    """High word of SHA-512 small sigma 1 (rs1 = high, rs2 = low)."""
    return (
        sll32(rs1, 3) ^ srl32(rs1, 6) ^ srl32(rs1, 19)
        ^ srl32(rs2, 29) ^ sll32(rs2, 13)
    )


def sha512sig1l(rs1: int, rs2: int) -> int:
    """Low word of SHA-512 small sigma 1 (rs1 = low, rs2 = high)."""
    return (
        sll32(rs1, 3) ^ srl32(rs1, 6) ^ srl32(rs1, 19)
        ^ srl32(rs2, 29) ^ sll32(rs2, 26) ^ sll32(rs2, 13)
    )


def sha512sum0r(rs1: int, rs2: int) -> int:
    """One word of SHA-512 big sigma 0 from the same word and the other one."""
    return (
        sll32(rs1, 25) ^ sll32(rs1, 30) ^ srl32(rs1, 28)
        ^ srl32(rs2, 7) ^ srl32(rs2, 2) ^ sll32(rs2, 4)
    )


def sha512sum1r(rs1: int, rs2: int) -> int:
    """One word of SHA-512 big sigma 1 from the same word and the other one."""
    return (
        sll32(rs1, 23) ^ srl32(rs1, 14) ^ srl32(rs1, 18)
        ^ srl32(rs2, 9) ^ sll32(rs2, 18) ^ sll32(rs2, 14)
    )


# --- SHA-512, 64-bit -------------------------------------------------------------


def sha512sig0(rs1: int) -> int:
    """SHA-512 small sigma 0."""
    return ror64(rs1, 1) ^ ror64(rs1, 8) ^ srl64(rs1, 7)


def sha512sig1(rs1: int) -> int:
    """SHA-512 small sigma 1."""
    return ror64(rs1, 19) ^ ror64(rs1, 61) ^ srl64(rs1, 6)


def sha512sum0(rs1: int) -> int:
    """SHA-512 big sigma 0."""
    return ror64(rs1, 28) ^ ror64(rs1, 34) ^ ror64(rs1, 39)


def sha512sum1(rs1: int) -> int:
    """SHA-512 big sigma 1."""
    return ror64(rs1, 14) ^ ror64(rs1, 18) ^ ror64(rs1, 41)


# --- SM4 -------------------------------------------------------------------------


def sm4ed(rs1: int, rs2: int, bs: int) -> int:
    """SM4 round step: S-box and linear transform L on one byte, XORed into rs1."""
    x, shift = _select_byte(rs2, bs)
    x = _SM4_SBOX[x]
    x = (
        x ^ (x << 8) ^ (x << 2) ^ (x << 18)
        ^ ((x & 0x3F) << 26) ^ ((x & 0xC0) << 10)
    ) & MASK32
    return (rs1 & MASK32) ^ rol32(x, shift)


def sm4ks(rs1: int, rs2: int, bs: int) -> int:
    """SM4 key schedule step: S-box and transform L' on one byte, XORed into rs1."""
    x, shift = _select_byte(rs2, bs)
    x = _SM4_SBOX[x]
    x = (
        x ^ ((x & 0x07) << 29) ^ ((x & 0xFE) << 7)
        ^ ((x & 1) << 23) ^ ((x & 0xF8) << 13)
    ) & MASK32
    return (rs1 & MASK32) ^ rol32(x, shift)


# --- SM3 -------------------------------------------------------------------------


def sm3p0(rs1: int) -> int:
    """SM3 permutation P0."""
    return (rs1 & MASK32) ^ rol32(rs1, 9) ^ rol32(rs1, 17)


def sm3p1(rs1: int) -> int:
    """SM3 permutation P1."""
    return (rs1 & MASK32) ^ rol32(rs1, 15) ^ rol32(rs1, 23)