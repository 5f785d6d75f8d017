"""
Token package.

- models: payload fields, crypto material, decode results.
- codec: the short and long wire formats.
- issuer: field sets for each token kind the account service hands out.
"""

from .models import (
    CryptoMaterial,
    DecodeFailure,
    SystemType,
    TokenDecodeResult,
    TokenFields,
    TokenType,
)
from .codec import TokenCodec
from .issuer import IssuedToken, TokenIssuer

__all__ = [
    "CryptoMaterial",
    "DecodeFailure",
    "IssuedToken",
    "SystemType",
    "TokenCodec",
    "TokenDecodeResult",
    "TokenFields",
    "TokenIssuer",
    "TokenType",
]
