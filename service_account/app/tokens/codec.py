"""
Account token codec.

Two wire formats exist. Access and refresh tokens must be small, so they are
the 14-byte payload encrypted under the service AES key with a zero IV.
Every other token is the long format::

    0x00  128  RSA-OAEP(SHA-256) wrapped random AES-128 key
    0x80    1  point1
    0x81    1  point2
    0x82   20  HMAC-SHA1 of the plaintext payload
    0x96    *  AES-128-CBC payload

The 3DS only accepts NEX strings up to 255 characters, so the long format
carries no IV. Instead the IV is rebuilt from two 8-byte windows of the
wrapped key, starting at point1 and point2.

Neither format is self-describing: anything of 32 bytes or fewer is read as
a short token.
"""

import base64
import os
import random
import struct
from typing import Optional

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import hashes, hmac, padding, serialization
from cryptography.hazmat.primitives.asymmetric import padding as asym_padding
from cryptography.hazmat.primitives.asymmetric.rsa import RSAPrivateKey, RSAPublicKey
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

from shared.logging import get_logger
from shared.errors import KeyProviderError, TokenFormatError, TokenIntegrityError, TokenValidationError
from ..crypto.nintendo_base64 import nintendo_base64_decode
from ..keys.provider import KeyProvider
from .models import CryptoMaterial, DecodeFailure, TokenDecodeResult, TokenFields

SHORT_PAYLOAD = struct.Struct("<BBIQ")
LONG_PAYLOAD = struct.Struct("<BBIBQQ")
SHORT_TOKEN_MAX_LENGTH = 32

AES_KEY_SIZE = 16
AES_BLOCK_SIZE = 16
ZERO_IV = bytes(AES_BLOCK_SIZE)

RSA_KEY_BITS = 1024
RSA_CIPHERTEXT_SIZE = RSA_KEY_BITS // 8
IV_WINDOW = 8
POINT_RANGE = RSA_CIPHERTEXT_SIZE - IV_WINDOW

POINT1_OFFSET = 0x80
POINT2_OFFSET = 0x81
SIGNATURE_OFFSET = 0x82
BODY_OFFSET = 0x96
SIGNATURE_SIZE = BODY_OFFSET - SIGNATURE_OFFSET

LONG_TOKEN_MIN_LENGTH = BODY_OFFSET + AES_BLOCK_SIZE

OAEP = asym_padding.OAEP(
    mgf=asym_padding.MGF1(algorithm=hashes.SHA256()),
    algorithm=hashes.SHA256(),
    label=None
)


def aes_cbc_encrypt(plaintext: bytes, key: bytes, iv: bytes) -> bytes:
    """AES-128-CBC with PKCS#7 padding."""
    if len(key) != AES_KEY_SIZE:
        raise ValueError(f"Invalid key length {len(key) * 8} for AES-128")

    padder = padding.PKCS7(AES_BLOCK_SIZE * 8).padder()
    padded = padder.update(plaintext) + padder.finalize()

    encryptor = Cipher(algorithms.AES(key), modes.CBC(iv)).encryptor()
    return encryptor.update(padded) + encryptor.finalize()


def aes_cbc_decrypt(ciphertext: bytes, key: bytes, iv: bytes) -> bytes:
    """Inverse of aes_cbc_encrypt. Raises ValueError on bad length or padding."""
    if len(key) != AES_KEY_SIZE:
        raise ValueError(f"Invalid key length {len(key) * 8} for AES-128")

    decryptor = Cipher(algorithms.AES(key), modes.CBC(iv)).decryptor()
    padded = decryptor.update(ciphertext) + decryptor.finalize()

    unpadder = padding.PKCS7(AES_BLOCK_SIZE * 8).unpadder()
    return unpadder.update(padded) + unpadder.finalize()


def derive_iv(encrypted_key: bytes, point1: int, point2: int) -> bytes:
    return encrypted_key[point1:point1 + IV_WINDOW] + encrypted_key[point2:point2 + IV_WINDOW]


def sign(payload: bytes, secret: bytes) -> bytes:
    """HMAC-SHA1 over the plaintext payload."""
    h = hmac.HMAC(secret, hashes.SHA1())
    h.update(payload)
    return h.finalize()


class TokenCodec:
    """Encodes and decodes account tokens."""

    def __init__(self, key_provider: KeyProvider, service: str = "account", rng: Optional[random.Random] = None):
        self.key_provider = key_provider
        self.service = service
        self.logger = get_logger("account.tokens")

        # IV points only; the AES key always comes from os.urandom
        self._rng = rng or random.Random()

    # Payload

    @staticmethod
    def pack(fields: TokenFields) -> bytes:
        """Serialize fields; long layout when access_level and title_id are set."""
        if fields.is_long:
            return LONG_PAYLOAD.pack(
                fields.system_type,
                fields.token_type,
                fields.pid,
                fields.access_level,
                fields.title_id,
                fields.expire_time
            )

        return SHORT_PAYLOAD.pack(fields.system_type, fields.token_type, fields.pid, fields.expire_time)

    @staticmethod
    def unpack(payload: bytes) -> TokenFields:
        """Parse a decrypted payload, choosing the layout by its length."""
        if len(payload) == SHORT_PAYLOAD.size:
            system_type, token_type, pid, expire_time = SHORT_PAYLOAD.unpack(payload)
            return TokenFields(
                system_type=system_type,
                token_type=token_type,
                pid=pid,
                expire_time=expire_time
            )

        if len(payload) == LONG_PAYLOAD.size:
            system_type, token_type, pid, access_level, title_id, expire_time = LONG_PAYLOAD.unpack(payload)
            return TokenFields(
                system_type=system_type,
                token_type=token_type,
                pid=pid,
                access_level=access_level,
                title_id=title_id,
                expire_time=expire_time
            )

        raise TokenFormatError(
            f"Unexpected payload length {len(payload)}",
            details={"length": len(payload)}
        )

    # Keys

    async def material(self) -> CryptoMaterial:
        """Material for issuing long tokens under this codec's service."""
        return CryptoMaterial(
            public_key=await self.key_provider.get_public_key(self.service),
            hmac_secret=await self.key_provider.get_hmac_secret(self.service)
        )

    async def _aes_key(self) -> bytes:
        key = await self.key_provider.get_symmetric_key(self.service)
        if len(key) != AES_KEY_SIZE:
            raise KeyProviderError(self.service, f"AES key must be {AES_KEY_SIZE} bytes, got {len(key)}")
        return key

    async def _private_key(self) -> RSAPrivateKey:
        pem = await self.key_provider.get_private_key(self.service)
        try:
            key = serialization.load_pem_private_key(pem, password=None)
        except (ValueError, TypeError) as e:
            raise KeyProviderError(self.service, f"unusable private key: {e}")

        if not isinstance(key, RSAPrivateKey) or key.key_size != RSA_KEY_BITS:
            raise KeyProviderError(self.service, f"private key must be {RSA_KEY_BITS}-bit RSA")
        return key

    @staticmethod
    def _public_key(pem: bytes) -> RSAPublicKey:
        try:
            key = serialization.load_pem_public_key(pem)
        except (ValueError, TypeError) as e:
            raise TokenValidationError(f"Unusable public key: {e}")

        if not isinstance(key, RSAPublicKey) or key.key_size != RSA_KEY_BITS:
            raise TokenValidationError(
                f"Public key must be {RSA_KEY_BITS}-bit RSA",
                details={"key_size": getattr(key, "key_size", None)}
            )
        return key

    # Encoding

    async def encode(self, fields: TokenFields, material: Optional[CryptoMaterial] = None) -> str:
        """
        Encode ``fields`` into a base64 wire token.

        Without ``material`` the short format is produced from the first four
        fields. With ``material`` the long format is produced, and
        ``access_level`` and ``title_id`` are required.
        """
        if material is None:
            return await self._encode_short(fields)

        missing = [name for name in ("access_level", "title_id") if getattr(fields, name) is None]
        if missing:
            raise TokenValidationError(
                "Long tokens require access_level and title_id",
                details={"missing": missing}
            )

        return self._encode_long(fields, material)

    async def _encode_short(self, fields: TokenFields) -> str:
        key = await self._aes_key()
        payload = SHORT_PAYLOAD.pack(fields.system_type, fields.token_type, fields.pid, fields.expire_time)
        token = aes_cbc_encrypt(payload, key, ZERO_IV)

        self.logger.debug("Short token encoded", pid=fields.pid, token_type=fields.token_type)
        return base64.b64encode(token).decode("ascii")

    def _encode_long(self, fields: TokenFields, material: CryptoMaterial) -> str:
        public_key = self._public_key(material.public_key)

        payload = self.pack(fields)
        signature = sign(payload, material.hmac_secret)

        key = os.urandom(AES_KEY_SIZE)
        encrypted_key = public_key.encrypt(key, OAEP)

        point1 = int(POINT_RANGE * self._rng.random())
        point2 = int(POINT_RANGE * self._rng.random())
        iv = derive_iv(encrypted_key, point1, point2)

        body = aes_cbc_encrypt(payload, key, iv)
        token = encrypted_key + bytes([point1, point2]) + signature + body

        self.logger.debug("Long token encoded", pid=fields.pid, token_type=fields.token_type, length=len(token))
        return base64.b64encode(token).decode("ascii")

    # Decoding

    async def decode(self, token: bytes) -> TokenDecodeResult:
        """
        Decode wire bytes back into fields.

        Malformed input and signature mismatches are returned as rejected
        results. Key provider errors propagate.
        """
        try:
            if len(token) <= SHORT_TOKEN_MAX_LENGTH:
                fields = await self._decode_short(token)
            else:
                fields = await self._decode_long(token)

        except TokenFormatError as e:
            self.logger.info("Malformed token rejected", error=e.message, length=len(token))
            return TokenDecodeResult.rejected(DecodeFailure.FORMAT, e.message)

        except TokenIntegrityError as e:
            self.logger.warning("Token signature did not match", error=e.message, length=len(token))
            return TokenDecodeResult.rejected(DecodeFailure.INTEGRITY, e.message)

        return TokenDecodeResult.ok(fields)

    async def decode_token(self, token: str, nintendo: bool = False) -> TokenDecodeResult:
        """Decode base64 text, or NintendoBase64 text when ``nintendo`` is set."""
        try:
            raw = nintendo_base64_decode(token) if nintendo else base64.b64decode(token)
        except ValueError as e:
            self.logger.info("Token is not valid base64", error=str(e))
            return TokenDecodeResult.rejected(DecodeFailure.FORMAT, f"Invalid base64: {e}")

        return await self.decode(raw)

    async def _decode_short(self, token: bytes) -> TokenFields:
        key = await self._aes_key()

        try:
            payload = aes_cbc_decrypt(token, key, ZERO_IV)
        except ValueError as e:
            raise TokenFormatError(f"Cannot decrypt short token: {e}")

        if len(payload) != SHORT_PAYLOAD.size:
            raise TokenFormatError(f"Short token payload is {len(payload)} bytes")

        return self.unpack(payload)

    async def _decode_long(self, token: bytes) -> TokenFields:
        if len(token) < LONG_TOKEN_MIN_LENGTH:
            raise TokenFormatError(f"Token of {len(token)} bytes is too short")

        body = token[BODY_OFFSET:]
        if len(body) % AES_BLOCK_SIZE:
            raise TokenFormatError("Token body is not block aligned")

        encrypted_key = token[:RSA_CIPHERTEXT_SIZE]
        signature = token[SIGNATURE_OFFSET:BODY_OFFSET]

        # Points are signed bytes on the wire
        point1, point2 = struct.unpack_from("<bb", token, POINT1_OFFSET)
        if not (0 <= point1 < POINT_RANGE and 0 <= point2 < POINT_RANGE):
            raise TokenFormatError("IV points out of range", details={"point1": point1, "point2": point2})

        private_key = await self._private_key()
        secret = await self.key_provider.get_hmac_secret(self.service)

        try:
            key = private_key.decrypt(encrypted_key, OAEP)
        except ValueError:
            raise TokenFormatError("Cannot unwrap token key")

        if len(key) != AES_KEY_SIZE:
            raise TokenFormatError(f"Unwrapped key is {len(key)} bytes")

        # The body is covered by the signature, so a body that will not unpad
        # is treated the same as a signature mismatch.
        try:
            payload = aes_cbc_decrypt(body, key, derive_iv(encrypted_key, point1, point2))
        except ValueError:
            raise TokenIntegrityError("Token body failed to decrypt")

        h = hmac.HMAC(secret, hashes.SHA1())
        h.update(payload)
        try:
            h.verify(signature)
        except InvalidSignature:
            raise TokenIntegrityError()

        if len(payload) != LONG_PAYLOAD.size:
            raise TokenFormatError(f"Long token payload is {len(payload)} bytes")

        return self.unpack(payload)
