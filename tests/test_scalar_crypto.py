import hashlib
import random
import struct
from math import isqrt

import pytest

from rvkrypto.bitmanip import MASK32, MASK64
from rvkrypto.scalar_crypto import (
    aes32dsi,
    aes32dsmi,
    aes32esi,
    aes32esmi,
    aes64ds,
    aes64dsm,
    aes64es,
    aes64esm,
    aes64im,
    aes64ks1i,
    aes64ks2,
    aes_fwd_mc_8,
    aes_fwd_mc_32,
    aes_inv_mc_8,
    aes_inv_mc_32,
    aes_xtime,
    sha256sig0,
    sha256sig1,
    sha256sum0,
    sha256sum1,
    sha512sig0,
    sha512sig0h,
    sha512sig0l,
    sha512sig1,
    sha512sig1h,
    sha512sig1l,
    sha512sum0,
    sha512sum0r,
    sha512sum1,
    sha512sum1r,
    sm3p0,
    sm3p1,
    sm4ed,
    sm4ks,
)


def _rng():
    return random.Random(20210213)


# --- SHA helpers built from the primitives under test -------------------------


def _primes(count):
    found = []
    n = 2
    while len(found) < count:
        if all(n % p for p in found if p * p <= n):
            found.append(n)
        n += 1
    return found


def _icbrt(n):
    x = 1 << -(-n.bit_length() // 3)
    while True:
        y = (2 * x + n // (x * x)) // 3
        if y >= x:
            return x
        x = y


_K256 = [_icbrt(p << 96) & MASK32 for p in _primes(64)]
_H256 = [isqrt(p << 64) & MASK32 for p in _primes(8)]
_K512 = [_icbrt(p << 192) & MASK64 for p in _primes(80)]
_H512 = [isqrt(p << 128) & MASK64 for p in _primes(8)]


def _sha2(msg, block, length_bytes, fmt, rounds, kk, hh0, mask, sig0, sig1, sum0, sum1):
    pad_to = block - length_bytes
    padded = (
        msg
        + b"\x80"
        + b"\0" * ((pad_to - 1 - len(msg)) % block)
        + (len(msg) * 8).to_bytes(length_bytes, "big")
    )
    state = list(hh0)
    for off in range(0, len(padded), block):
        w = list(struct.unpack(fmt, padded[off:off + block]))
        for t in range(16, rounds):
            w.append((sig1(w[t - 2]) + w[t - 7] + sig0(w[t - 15]) + w[t - 16]) & mask)
        a, b, c, d, e, f, g, h = state
        for k, wt in zip(kk, w):
            t1 = (h + sum1(e) + ((e & f) ^ (~e & g)) + k + wt) & mask
            t2 = (sum0(a) + ((a & b) ^ (a & c) ^ (b & c))) & mask
            h, g, f, e, d, c, b, a = g, f, e, (d + t1) & mask, c, b, a, (t1 + t2) & mask
        state = [(s + v) & mask for s, v in zip(state, (a, b, c, d, e, f, g, h))]
    return state


MESSAGES = [b"", b"abc", bytes(range(200))]


@pytest.mark.parametrize("msg", MESSAGES)
def test_sha256_functions_match_hashlib(msg):
    state = _sha2(msg, 64, 8, ">16I", 64, _K256, _H256, MASK32,
                  sha256sig0, sha256sig1, sha256sum0, sha256sum1)
    assert struct.pack(">8I", *state) == hashlib.sha256(msg).digest()
    a, b = _H256[0], _H256[1]
    assert sha256sig0(a ^ b) == sha256sig0(a) ^ sha256sig0(b)
    assert sha256sum1(a ^ b) == sha256sum1(a) ^ sha256sum1(b)


@pytest.mark.parametrize("msg", MESSAGES)
def test_sha512_functions_match_hashlib(msg):
    state = _sha2(msg, 128, 16, ">16Q", 80, _K512, _H512, MASK64,
                  sha512sig0, sha512sig1, sha512sum0, sha512sum1)
    assert struct.pack(">8Q", *state) == hashlib.sha512(msg).digest()
    a, b = _H512[0], _H512[1]
    assert sha512sig1(a ^ b) == sha512sig1(a) ^ sha512sig1(b)
    assert sha512sum0(a ^ b) == sha512sum0(a) ^ sha512sum0(b)


def test_sha512_split_words_match_64bit():
    rng = _rng()
    for _ in range(200):
        x = rng.getrandbits(64)
        lo, hi = x & MASK32, x >> 32
        assert sha512sig0l(lo, hi) | (sha512sig0h(hi, lo) << 32) == sha512sig0(x)
        assert sha512sig1l(lo, hi) | (sha512sig1h(hi, lo) << 32) == sha512sig1(x)
        assert sha512sum0r(lo, hi) | (sha512sum0r(hi, lo) << 32) == sha512sum0(x)
        assert sha512sum1r(lo, hi) | (sha512sum1r(hi, lo) << 32) == sha512sum1(x)


def test_sha256_ignores_bits_above_32():
    assert sha256sig0(0x1_2345_6789) == sha256sig0(0x2345_6789)
    assert sha256sum1(-1) == sha256sum1(MASK32)


# --- AES 32-bit -------------------------------------------------------------------


def test_sbox_first_entries():
    assert aes32esi(0, 0, 0) == 0x63
    assert aes32dsi(0, 0, 0) == 0x52


def test_sbox_is_inverted_by_inverse_sbox():
    outputs = set()
    for x in range(256):
        s = aes32esi(0, x, 0)
        outputs.add(s)
        assert aes32dsi(0, s, 0) == x
    assert outputs == set(range(256))


def test_byte_select_rotates_result():
    for v in (0x00, 0x01, 0x53, 0xFF):
        base = aes32esi(0, v, 0)
        for bs in range(4):
            assert aes32esi(0, v << (8 * bs), bs) == base << (8 * bs)


def test_byte_select_uses_low_two_bits():
    rng = _rng()
    for _ in range(20):
        rs1, rs2 = rng.getrandbits(32), rng.getrandbits(32)
        assert aes32esmi(rs1, rs2, 5) == aes32esmi(rs1, rs2, 1)
        assert aes32dsmi(rs1, rs2, 7) == aes32dsmi(rs1, rs2, 3)


@pytest.mark.parametrize("x, doubled", [(0x57, 0xAE), (0xAE, 0x47), (0x47, 0x8E), (0x8E, 0x07)])
def test_xtime_fips197_example(x, doubled):
    assert aes_xtime(x) == doubled


def test_mixcolumns_fips_example():
    column = int.from_bytes(bytes.fromhex("db135345"), "little")
    expected = int.from_bytes(bytes.fromhex("8e4da1bc"), "little")
    assert aes_fwd_mc_32(column) == expected
    assert aes_inv_mc_32(expected) == column


def test_mixcolumns_round_trip():
    rng = _rng()
    for _ in range(200):
        x = rng.getrandbits(32)
        assert aes_inv_mc_32(aes_fwd_mc_32(x)) == x
        assert aes_fwd_mc_32(aes_inv_mc_32(x)) == x


def test_single_byte_mixcolumn_is_column_of_byte():
    for x in range(256):
        assert aes_fwd_mc_8(x) == aes_fwd_mc_32(x)
        assert aes_inv_mc_8(x) == aes_inv_mc_32(x)


def _chain(func, rs1, words):
    for bs, w in enumerate(words):
        rs1 = func(rs1, w, bs)
    return rs1


def test_esmi_chain_is_mixcolumns_of_subword():
    rng = _rng()
    for _ in range(50):
        x = rng.getrandbits(32)
        sub = _chain(aes32esi, 0, [x] * 4)
        assert _chain(aes32esmi, 0, [x] * 4) == aes_fwd_mc_32(sub)
        inv_sub = _chain(aes32dsi, 0, [x] * 4)
        assert _chain(aes32dsmi, 0, [x] * 4) == aes_inv_mc_32(inv_sub)


# --- AES 64-bit -------------------------------------------------------------------


def test_aes64_es_ds_round_trip():
    rng = _rng()
    for _ in range(100):
        t0, t1 = rng.getrandbits(64), rng.getrandbits(64)
        u0, u1 = aes64es(t0, t1), aes64es(t1, t0)
        assert (aes64ds(u0, u1), aes64ds(u1, u0)) == (t0, t1)


def test_aes64_esm_inverted_by_im_then_ds():
    rng = _rng()
    for _ in range(100):
        t0, t1 = rng.getrandbits(64), rng.getrandbits(64)
        u0, u1 = aes64im(aes64esm(t0, t1)), aes64im(aes64esm(t1, t0))
        assert (aes64ds(u0, u1), aes64ds(u1, u0)) == (t0, t1)


def test_aes64dsm_is_im_of_ds():
    rng = _rng()
    for _ in range(50):
        a, b = rng.getrandbits(64), rng.getrandbits(64)
        assert aes64dsm(a, b) == aes64im(aes64ds(a, b))


def test_aes64esm_matches_32bit_round():
    rng = _rng()
    for _ in range(50):
        t = [rng.getrandbits(32) for _ in range(4)]
        u0 = _chain(aes32esmi, 0, [t[0], t[1], t[2], t[3]])
        u1 = _chain(aes32esmi, 0, [t[1], t[2], t[3], t[0]])
        assert aes64esm(t[0] | t[1] << 32, t[2] | t[3] << 32) == u0 | u1 << 32


def test_aes64_key_schedule_fips197_first_round_key():
    key = bytes.fromhex("2b7e151628aed2a6abf7158809cf4f3c")
    k0 = int.from_bytes(key[:8], "little")
    k1 = int.from_bytes(key[8:], "little")
    n0 = aes64ks2(aes64ks1i(k1, 0), k0)
    n1 = aes64ks2(n0, k1)
    round_key = n0.to_bytes(8, "little") + n1.to_bytes(8, "little")
    assert round_key == bytes.fromhex("a0fafe1788542cb123a339392a6c7605")


def test_aes64ks1i_halves_equal_and_no_rotation_from_ten():
    rng = _rng()
    for _ in range(20):
        x = rng.getrandbits(64)
        r = aes64ks1i(x, 3)
        assert r >> 32 == r & MASK32
        assert aes64ks1i(x, 10) == aes64ks1i(x, 11)


def test_aes64ks1i_rejects_negative_round():
    with pytest.raises(ValueError):
        aes64ks1i(0, -1)


# --- SM4 ----------------------------------------------------------------------------


_FK = [int.from_bytes(bytes.fromhex(h), "little")
       for h in ("a3b1bac6", "56aa3350", "677d9197", "b27022dc")]
_CK = [int.from_bytes(bytes(((4 * i + j) * 7) & 0xFF for j in range(4)), "little")
       for i in range(32)]


def _t(func, rs1, rs2):
    for bs in range(4):
        rs1 = func(rs1, rs2, bs)
    return rs1


def _sm4_encrypt(key, block):
    k = [w ^ f for w, f in zip(struct.unpack("<4I", key), _FK)]
    round_keys = []
    for ck in _CK:
        new = _t(sm4ks, k[-4], k[-3] ^ k[-2] ^ k[-1] ^ ck)
        k.append(new)
        round_keys.append(new)
    x = list(struct.unpack("<4I", block))
    for rk in round_keys:
        x.append(_t(sm4ed, x[-4], x[-3] ^ x[-2] ^ x[-1] ^ rk))
    return struct.pack("<4I", x[-1], x[-2], x[-3], x[-4])


def test_sm4_standard_example():
    data = bytes.fromhex("0123456789abcdeffedcba9876543210")
    assert _sm4_encrypt(data, data) == bytes.fromhex("681edf34d206965e86b3e94f536e4246")
    rs1 = 0x01234567
    assert sm4ed(rs1, 0x89ABCDEF, 1) == rs1 ^ sm4ed(0, 0x89ABCDEF, 1)
    assert sm4ks(rs1, 0x89ABCDEF, 2) == rs1 ^ sm4ks(0, 0x89ABCDEF, 2)


def test_sm4_byte_select_uses_low_two_bits():
    assert sm4ed(1, 0x12345678, 6) == sm4ed(1, 0x12345678, 2)
    assert sm4ks(1, 0x12345678, 4) == sm4ks(1, 0x12345678, 0)


# --- SM3 ----------------------------------------------------------------------------


@pytest.mark.parametrize("func", [sm3p0, sm3p1])
def test_sm3_permutations_are_linear(func):
    rng = _rng()
    assert func(0) == 0
    for _ in range(100):
        a, b = rng.getrandbits(32), rng.getrandbits(32)
        assert func(a ^ b) == func(a) ^ func(b)


@pytest.mark.parametrize("func", [sm3p0, sm3p1])
def test_sm3_permutations_are_bijective_on_single_bits(func):
    images = [func(1 << i) for i in range(32)]
    # linear images of a basis: rank 32 means a bijection
    rows = []
    for v in images:
        for r in rows:
            v = min(v, v ^ r)
        assert v != 0
        rows.append(v)
    assert func(1 << 32) == 0