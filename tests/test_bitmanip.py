import random

import pytest

from rvkrypto import bitmanip as bm

_rng = random.Random(20210214)
WORDS32 = [0, 1, 0x80000000, bm.MASK32] + [_rng.getrandbits(32) for _ in range(12)]
WORDS64 = [0, 1, 1 << 63, bm.MASK64] + [_rng.getrandbits(64) for _ in range(12)]
PAIRS32 = list(zip(WORDS32, reversed(WORDS32)))
PAIRS64 = list(zip(WORDS64, reversed(WORDS64)))


def test_ror32_pinned_value():
    assert bm.ror32(0x12345678, 8) == 0x78123456


def test_brev8_32_single_bit():
    assert bm.brev8_32(0x01) == 0x80


def test_sll32_negative_input_is_twos_complement():
    assert bm.sll32(-1, 4) == 0xFFFFFFF0


@pytest.mark.parametrize("x", WORDS32)
@pytest.mark.parametrize("n", [0, 1, 7, 13, 31, 32, 45, -3])
def test_rotate32_round_trip(x, n):
    assert bm.ror32(bm.rol32(x, n), n) == x
    assert bm.rol32(x, n) == bm.ror32(x, -n)


@pytest.mark.parametrize("x", WORDS64)
@pytest.mark.parametrize("n", [0, 1, 19, 41, 63, 64, 100, -5])
def test_rotate64_round_trip(x, n):
    assert bm.ror64(bm.rol64(x, n), n) == x
    assert bm.rol64(x, n) == bm.ror64(x, -n)


@pytest.mark.parametrize("x", WORDS32)
def test_shift_amount_is_masked(x):
    assert bm.srl32(x, 33) == bm.srl32(x, 1)
    assert bm.sll32(x, 32) == x
    assert bm.sll64(x, 65) == bm.sll64(x, 1)
    assert bm.srl64(x << 20, 64 + 20) == x


@pytest.mark.parametrize("x", WORDS32)
def test_rol32_matches_shift_composition(x):
    assert bm.rol32(x, 5) == (bm.sll32(x, 5) | bm.srl32(x, 27))


@pytest.mark.parametrize("x", WORDS32)
@pytest.mark.parametrize("ctrl", range(32))
def test_grev32_is_involution(x, ctrl):
    assert bm.grev32(bm.grev32(x, ctrl), ctrl) == x


@pytest.mark.parametrize("x", WORDS64)
@pytest.mark.parametrize("ctrl", [1, 7, 8, 24, 56, 63])
def test_grev64_is_involution(x, ctrl):
    assert bm.grev64(bm.grev64(x, ctrl), ctrl) == x


@pytest.mark.parametrize("x", WORDS32)
def test_grev32_full_reverse_reverses_bit_string(x):
    assert bm.grev32(x, 31) == int(format(x, "032b")[::-1], 2)


@pytest.mark.parametrize("x", WORDS64)
def test_brev8_64_acts_bytewise(x):
    data = x.to_bytes(8, "little")
    expected = bytes(int(format(b, "08b")[::-1], 2) for b in data)
    assert bm.brev8_64(x).to_bytes(8, "little") == expected
    assert bm.brev8_64(x) & bm.MASK32 == bm.brev8_32(x)


@pytest.mark.parametrize("x", WORDS32)
@pytest.mark.parametrize("ctrl", range(16))
def test_shfl_unshfl_round_trip(x, ctrl):
    assert bm.unshfl32(bm.shfl32(x, ctrl), ctrl) == x
    assert bm.shfl32(bm.unshfl32(x, ctrl), ctrl) == x


@pytest.mark.parametrize("x", WORDS32)
def test_zip_unzip_round_trip(x):
    assert bm.unzip32(bm.zip32(x)) == x
    assert bm.zip32(bm.unzip32(x)) == x


def test_zip_interleaves_halves():
    # low half all ones goes to even positions
    assert bm.zip32(0x0000FFFF) == 0x55555555
    assert bm.unzip32(0xAAAAAAAA) == 0xFFFF0000


@pytest.mark.parametrize("a,b", PAIRS32)
def test_clmul32_commutes_and_composes(a, b):
    assert bm.clmul32(a, b) == bm.clmul32(b, a)
    assert bm.clmulh32(a, b) == bm.clmulh32(b, a)
    assert (bm.clmulh32(a, b) << 32) | bm.clmul32(a, b) == bm.clmul64(a, b)


@pytest.mark.parametrize("a", WORDS32)
def test_clmul32_by_one_and_power_of_two(a):
    assert bm.clmul32(a, 1) == a
    assert bm.clmulh32(a, 1) == 0
    assert bm.clmul32(a, 1 << 5) == bm.sll32(a, 5)
    assert bm.clmulh32(a, 1 << 5) == bm.srl32(a, 27)


@pytest.mark.parametrize("a,b", PAIRS64)
def test_clmul64_distributes_over_xor(a, b):
    c = 0x0123456789ABCDEF
    assert bm.clmul64(a, b ^ c) == bm.clmul64(a, b) ^ bm.clmul64(a, c)
    assert bm.clmulh64(a, b ^ c) == bm.clmulh64(a, b) ^ bm.clmulh64(a, c)


@pytest.mark.parametrize("a", WORDS64)
def test_clmul64_by_power_of_two(a):
    assert bm.clmul64(a, 1 << 9) == bm.sll64(a, 9)
    assert bm.clmulh64(a, 1 << 9) == bm.srl64(a, 55)


@pytest.mark.parametrize("x", WORDS32)
def test_xperm32_identity(x):
    assert bm.xperm4_32(x, 0x76543210) == x
    assert bm.xperm8_32(x, 0x03020100) == x


@pytest.mark.parametrize("x", WORDS32)
def test_xperm8_32_out_of_range_is_zero(x):
    assert bm.xperm8_32(x, 0x04040404) == 0
    assert bm.xperm8_32(x, 0x00000000) == (x & 0xFF) * 0x01010101


@pytest.mark.parametrize("x", WORDS64)
def test_xperm64_identity_and_reverse(x):
    assert bm.xperm4_64(x, 0xFEDCBA9876543210) == x
    assert bm.xperm8_64(x, 0x0706050403020100) == x
    swapped = int.from_bytes(x.to_bytes(8, "little"), "big")
    assert bm.xperm8_64(x, 0x0001020304050607) == swapped
    assert bm.xperm8_64(x, 0x0808080808080808) == 0