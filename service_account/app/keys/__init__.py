"""
Key provider package.

Token encoding never generates or stores long-lived key material itself. It
asks a ``KeyProvider`` for keys by service name:

- FileKeyProvider reads the per-service key directory and caches it.
- StaticKeyProvider serves keys held in memory.

Provider errors (``KeyProviderError``, ``KeyNotFoundError``) are meant to
reach the caller untouched; codecs must not retry or fall back.
"""

from .provider import KeyProvider, FileKeyProvider, StaticKeyProvider, ServiceKeys

__all__ = ["KeyProvider", "FileKeyProvider", "StaticKeyProvider", "ServiceKeys"]
