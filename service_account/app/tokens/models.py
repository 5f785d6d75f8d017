"""
Token payload and result models.
"""

from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

MAX_U8 = 0xFF
MAX_U32 = 0xFFFFFFFF
MAX_U64 = 0xFFFFFFFFFFFFFFFF


class SystemType(IntEnum):
    """Platform a token was issued for."""
    WIIU = 0x1
    CTR = 0x2
    API = 0xF


class TokenType(IntEnum):
    """Purpose of a token."""
    OAUTH_ACCESS = 0x1
    OAUTH_REFRESH = 0x2
    NEX = 0x3
    SERVICE = 0x4
    PASSWORD_RESET = 0x5


class TokenFields(BaseModel):
    """
    Structured token payload.

    Short tokens carry only the first four fields. Long tokens also carry
    ``access_level`` and ``title_id``; both must be set for a long token.
    """

    model_config = ConfigDict(frozen=True)

    system_type: int = Field(ge=0, le=MAX_U8)
    token_type: int = Field(ge=0, le=MAX_U8)
    pid: int = Field(ge=0, le=MAX_U32)
    expire_time: int = Field(ge=0, le=MAX_U64)
    access_level: Optional[int] = Field(default=None, ge=0, le=MAX_U8)
    title_id: Optional[int] = Field(default=None, ge=0, le=MAX_U64)

    @property
    def is_long(self) -> bool:
        return self.access_level is not None and self.title_id is not None


@dataclass(frozen=True)
class CryptoMaterial:
    """Asymmetric material for issuing a long token."""
    public_key: bytes
    hmac_secret: bytes


class DecodeFailure(str, Enum):
    """Why a wire token could not be turned back into fields."""
    FORMAT = "format"
    INTEGRITY = "integrity"


class TokenDecodeResult(BaseModel):
    """Outcome of decoding a wire token."""
    valid: bool
    token_fields: Optional[TokenFields] = None
    failure: Optional[DecodeFailure] = None
    error: Optional[str] = None

    @classmethod
    def ok(cls, token_fields: TokenFields) -> "TokenDecodeResult":
        return cls(valid=True, token_fields=token_fields)

    @classmethod
    def rejected(cls, failure: DecodeFailure, error: str) -> "TokenDecodeResult":
        return cls(valid=False, failure=failure, error=error)
