# rvkrypto

A pure-Python model of the RISC-V scalar cryptography instructions
(bit manipulation, carry-less multiply, crossbar permutation, AES, SHA-2,
SM4 and SM3 steps). On top of it sit block ciphers and an AEAD mode,
written the way RV32 and RV64 code would use those instructions:

- AES-128/192/256 encryption and decryption, in a 32-bit style
  (`rvkrypto.aes_rv32`) and a 64-bit style (`rvkrypto.aes_rv64`), plus
  encryption with on-the-fly key expansion (`rvkrypto.aes_otf`).
- AES-GCM with a 96-bit IV, no associated data and a 16-byte tag appended
  to the ciphertext (`rvkrypto.gcm`).
- GHASH multiplication in GF(2^128) in three variants: 32-bit compact,
  32-bit Karatsuba and 64-bit (`rvkrypto.gfmul`).
- The PRESENT-80 and PRESENT-128 lightweight block ciphers
  (`rvkrypto.present`, with the round functions in `rvkrypto.present_rounds`).

This code is for studying and testing the instruction set. It is not meant
to protect real data: it is not constant-time and it has not been hardened.

The package has no dependencies outside the standard library.

## Installation

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```

## Instruction models

Every instruction is a plain function on Python integers. Inputs are masked
to the register width (so negative values act as two's complement), and
results come back as unsigned integers.

```python
from rvkrypto import bitmanip, scalar_crypto

bitmanip.ror32(0x12345678, 8)          # 0x78123456
bitmanip.brev8_64(0x0102030405060708)
bitmanip.clmul64(0x87, 0x3)
bitmanip.xperm4_32(0x76543210, 0x01234567)
scalar_crypto.aes32esmi(0, 0x00000053, 0)
scalar_crypto.aes64ks1i(0, 0)
scalar_crypto.sha256sig0(0xDEADBEEF)
scalar_crypto.sha512sum1r(0x12345678, 0x9ABCDEF0)
scalar_crypto.sm4ed(0, 0x01, 0)
scalar_crypto.sm3p0(0x12345678)
```

`rvkrypto.bitmanip` covers shifts and rotations, `grev32`/`grev64`,
`brev8_32`/`brev8_64`, `shfl32`/`unshfl32`, `zip32`/`unzip32`, the
`clmul`/`clmulh` pairs and the `xperm4`/`xperm8` lookups.
`rvkrypto.scalar_crypto` covers the AES 32- and 64-bit steps (including the
MixColumns helpers and key-schedule steps), the SHA-256 and SHA-512 sigma
functions (whole 64-bit and split into 32-bit halves), SM4 `sm4ed`/`sm4ks`
and SM3 `sm3p0`/`sm3p1`.

## AES block cipher

```python
from rvkrypto.aes_api import AesImplementation, BlockCipher

key = bytes(range(16))
cipher = BlockCipher(key, AesImplementation.RV64)
ct = cipher.encrypt_block(bytes(16))
assert cipher.decrypt_block(ct) == bytes(16)
```

The key length, 16, 24 or 32 bytes, selects AES-128, AES-192 or AES-256.
`AesImplementation.RV32` and `AesImplementation.RV64` give the same results
through different round formulations; RV64 is the default.

The lower-level modules expose the pieces directly:

- `aes_rv32.enc_key(key)` / `aes_rv32.dec_key(key)` return 44, 52 or 60
  32-bit round key words; `aes_rv64.enc_key` / `aes_rv64.dec_key` return 22,
  26 or 30 64-bit words. Decryption keys are for the equivalent inverse
  cipher.
- `encrypt_block(pt, rk)` / `decrypt_block(ct, rk)` in each module infer the
  round count from the number of round keys; `enc_rounds` / `dec_rounds`
  take it explicitly.
- `aes_otf.encrypt_otf(pt, key)` (or `aes128_enc_otf`, `aes192_enc_otf`,
  `aes256_enc_otf`) encrypts from the raw key without storing a schedule.

Wrong key, block or round-key sizes raise `ValueError`.

## AES-GCM

```python
from rvkrypto.aes_api import AesImplementation
from rvkrypto.gcm import AuthenticationError, aes_gcm_decrypt, aes_gcm_encrypt
from rvkrypto.gfmul import GhashVariant

key = bytes(16)
iv = bytes(12)
sealed = aes_gcm_encrypt(key, iv, b"attack at dawn",
                         AesImplementation.RV32, GhashVariant.RV32_KARATSUBA)
message = aes_gcm_decrypt(key, iv, sealed,
                          AesImplementation.RV32, GhashVariant.RV32_KARATSUBA)
```

The sealed output is always 16 bytes longer than the plaintext. A tag that
does not match raises `AuthenticationError`; input shorter than 16 bytes or
an IV that is not 12 bytes raises `ValueError`. The AES implementation and
the GHASH variant both default to their RV64 forms.

`GhashVariant` (`RV32`, `RV32_KARATSUBA`, `RV64`) has `rev(z)` and
`mul(z, x, h)`, which returns `(z ^ rev(x)) * h`; the same operations are
available as `ghash_rev_rv32`, `ghash_rev_rv64`, `ghash_mul_rv32`,
`ghash_mul_rv32_kar` and `ghash_mul_rv64` on 16-byte blocks.

## PRESENT

```python
from rvkrypto.present import present80_enc, present80_dec

key = bytes(10)
ct = present80_enc(bytes(8), key)
assert present80_dec(ct, key) == bytes(8)
```

`present128_enc` and `present128_dec` take a 16-byte key. `present80_key`
and `present128_key` return the 32 round keys as integers, which
`present_rounds.present_enc_rv32`, `present_dec_rv32`, `present_enc_rv64`
and `present_dec_rv64` take together with a 64-bit block integer.

## What it does not do

- There is no command-line tool; everything is used from Python.
- GCM takes no associated data and only 12-byte IVs.
- SHA-2, SM3 and SM4 are provided only as their instruction-level steps,
  not as complete hash functions or a complete SM4 cipher.