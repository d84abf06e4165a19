"""Basic AES-GCM: 96-bit IV, no associated data, 128-bit tag appended.

The ciphertext is always 16 bytes longer than the plaintext.
"""

import hmac

from .aes_api import AesImplementation, BlockCipher
from .gfmul import GhashVariant

__all__ = [
    "AuthenticationError",
    "aes_gcm_encrypt",
    "aes_gcm_decrypt",
]

_IV_BYTES = 12
_TAG_BYTES = 16
_BLOCK = 16
_MASK32 = 0xFFFFFFFF
_MASK64 = 0xFFFFFFFFFFFFFFFF


class AuthenticationError(Exception):
    """The authentication tag does not match the ciphertext."""


def _xor(a: bytes, b: bytes) -> bytes:
    return bytes(x ^ y for x, y in zip(a, b))


def _check_iv(iv) -> bytes:
    data = bytes(iv)
    if len(data) != _IV_BYTES:
        raise ValueError(f"GCM IV must be {_IV_BYTES} bytes, got {len(data)}")
    return data


def _gcm_body(cipher: BlockCipher, ghash: GhashVariant, iv: bytes,
              data: bytes, encrypting: bool):
    """Run CTR mode over ``data`` and return the output and the tag."""
    ghash = GhashVariant(ghash)
    h = ghash.rev(cipher.encrypt_block(bytes(_BLOCK)))
    tag_mask = cipher.encrypt_block(iv + (1).to_bytes(4, "big"))

    z = bytes(_BLOCK)
    out = bytearray()
    for ctr, start in enumerate(range(0, len(data), _BLOCK), start=2):
        chunk = data[start:start + _BLOCK]
        keystream = cipher.encrypt_block(iv + (ctr & _MASK32).to_bytes(4, "big"))
        result = _xor(chunk, keystream)
        out += result
        ciphertext = result if encrypting else chunk
        z = ghash.mul(z, ciphertext.ljust(_BLOCK, b"\0"), h)

    lengths = bytes(8) + ((len(data) * 8) & _MASK64).to_bytes(8, "big")
    z = ghash.mul(z, lengths, h)
    z = ghash.rev(z)
    return bytes(out), _xor(tag_mask, z)


def aes_gcm_encrypt(key, iv, plaintext, implementation=AesImplementation.RV64,
                    ghash=GhashVariant.RV64) -> bytes:
    """Encrypt and return the ciphertext followed by the 16-byte tag."""
    cipher = BlockCipher(key, implementation)
    body, tag = _gcm_body(cipher, ghash, _check_iv(iv), bytes(plaintext), True)
    return body + tag


def aes_gcm_decrypt(key, iv, ciphertext, implementation=AesImplementation.RV64,
                    ghash=GhashVariant.RV64) -> bytes:
    """Verify the tag and return the plaintext.

    Raises ValueError if the input is shorter than a tag and
    AuthenticationError if the tag does not match.
    """
    data = bytes(ciphertext)
    if len(data) < _TAG_BYTES:
        raise ValueError(
            f"GCM ciphertext must be at least {_TAG_BYTES} bytes, got {len(data)}"
        )
    cipher = BlockCipher(key, implementation)
    body, received = data[:-_TAG_BYTES], data[-_TAG_BYTES:]
    plaintext, tag = _gcm_body(cipher, ghash, _check_iv(iv), body, False)
    if not hmac.compare_digest(tag, received):
        raise AuthenticationError("GCM tag verification failed")
    return plaintext