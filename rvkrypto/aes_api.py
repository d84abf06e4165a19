"""AES-128/192/256 block cipher with a selectable round implementation."""

import enum

from . import aes_rv32, aes_rv64

__all__ = [
    "AES_BLOCK_BYTES",
    "AesImplementation",
    "BlockCipher",
]

AES_BLOCK_BYTES = 16


class AesImplementation(enum.Enum):
    """Which scalar formulation of AES does the work."""

    RV32 = "rv32"
    RV64 = "rv64"


_BACKENDS = {
    AesImplementation.RV32: aes_rv32,
    AesImplementation.RV64: aes_rv64,
}


class BlockCipher:
    """AES keyed for both directions; the variant follows from the key length."""

    def __init__(self, key, implementation=AesImplementation.RV64):
        key = bytes(key)
        self.implementation = AesImplementation(implementation)
        self._backend = _BACKENDS[self.implementation]
        self._enc_rk = self._backend.enc_key(key)
        self._dec_rk = self._backend.dec_key(key)
        self.key_size = len(key)

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(key_size={self.key_size}, "
            f"implementation={self.implementation.name})"
        )

    def encrypt_block(self, block) -> bytes:
        """Encrypt one 16-byte block."""
        return self._backend.encrypt_block(block, self._enc_rk)

    def decrypt_block(self, block) -> bytes:
        """Decrypt one 16-byte block."""
        return self._backend.decrypt_block(block, self._dec_rk)