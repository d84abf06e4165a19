"""Scalar cryptography instruction models with AES, AES-GCM, GHASH and PRESENT built on them."""

__version__ = "0.1.0"