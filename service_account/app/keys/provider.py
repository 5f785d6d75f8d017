"""
Key providers for the token codec.
"""

import asyncio
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Mapping, Optional, Union

from shared.logging import get_logger
from shared.errors import KeyNotFoundError, KeyProviderError


class KeyProvider(ABC):
    """Supplies per-service key material by service name."""

    @abstractmethod
    async def get_symmetric_key(self, service: str) -> bytes:
        """Raw AES-128 key for the service."""

    @abstractmethod
    async def get_public_key(self, service: str) -> bytes:
        """RSA public key, PEM encoded."""

    @abstractmethod
    async def get_private_key(self, service: str) -> bytes:
        """RSA private key, PEM encoded."""

    @abstractmethod
    async def get_hmac_secret(self, service: str) -> bytes:
        """Secret used to sign long tokens."""


@dataclass(frozen=True)
class ServiceKeys:
    """Key material for one service. Missing entries raise KeyNotFoundError."""
    aes_key: Optional[bytes] = None
    public_key: Optional[bytes] = None
    private_key: Optional[bytes] = None
    hmac_secret: Optional[bytes] = None


class StaticKeyProvider(KeyProvider):
    """Provider backed by an in-memory mapping of service name to keys."""

    def __init__(self, keys: Mapping[str, ServiceKeys]):
        self._keys = dict(keys)

    def _lookup(self, service: str, attribute: str) -> bytes:
        service_keys = self._keys.get(service)
        value = getattr(service_keys, attribute) if service_keys else None
        if value is None:
            raise KeyNotFoundError(service, attribute)
        return value

    async def get_symmetric_key(self, service: str) -> bytes:
        return self._lookup(service, "aes_key")

    async def get_public_key(self, service: str) -> bytes:
        return self._lookup(service, "public_key")

    async def get_private_key(self, service: str) -> bytes:
        return self._lookup(service, "private_key")

    async def get_hmac_secret(self, service: str) -> bytes:
        return self._lookup(service, "hmac_secret")


class FileKeyProvider(KeyProvider):
    """
    Reads keys from ``<root>/<service>/`` and caches them per file.

    Layout of a service directory::

        aes.key      AES-128 key, hex text
        secret.key   HMAC secret, hex text
        public.pem   RSA public key
        private.pem  RSA private key
    """

    AES_KEY_FILE = "aes.key"
    SECRET_KEY_FILE = "secret.key"
    PUBLIC_KEY_FILE = "public.pem"
    PRIVATE_KEY_FILE = "private.pem"

    def __init__(self, root: Union[str, Path]):
        self.root = Path(root)
        self.logger = get_logger("account.keys")

        # Cache keyed by (service, file name)
        self._cache: Dict[tuple, bytes] = {}

    async def _read(self, service: str, file_name: str) -> bytes:
        cache_key = (service, file_name)
        if cache_key in self._cache:
            return self._cache[cache_key]

        path = self.root / service / file_name
        if not path.is_file():
            self.logger.warning("Key file missing", service=service, file=file_name)
            raise KeyNotFoundError(service, file_name, details={"path": str(path)})

        try:
            data = await asyncio.to_thread(path.read_bytes)
        except OSError as e:
            self.logger.error("Failed to read key file", service=service, file=file_name, error=str(e))
            raise KeyProviderError(service, f"cannot read {file_name}: {e}")

        self._cache[cache_key] = data
        self.logger.info("Key loaded", service=service, file=file_name)
        return data

    async def _read_hex(self, service: str, file_name: str) -> bytes:
        text = await self._read(service, file_name)
        try:
            return bytes.fromhex(text.decode("ascii").strip())
        except ValueError as e:
            raise KeyProviderError(service, f"{file_name} is not valid hex: {e}")

    async def get_symmetric_key(self, service: str) -> bytes:
        return await self._read_hex(service, self.AES_KEY_FILE)

    async def get_public_key(self, service: str) -> bytes:
        return await self._read(service, self.PUBLIC_KEY_FILE)

    async def get_private_key(self, service: str) -> bytes:
        return await self._read(service, self.PRIVATE_KEY_FILE)

    async def get_hmac_secret(self, service: str) -> bytes:
        return await self._read_hex(service, self.SECRET_KEY_FILE)

    def clear_cache(self):
        """Drop all cached key files."""
        self._cache.clear()
        self.logger.info("Key cache cleared")
