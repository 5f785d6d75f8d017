"""
Token issuance for the account service.
"""

import time
from dataclasses import dataclass
from typing import Callable, Optional

from shared.config import AccountConfig
from shared.logging import get_logger
from .codec import TokenCodec
from .models import SystemType, TokenFields, TokenType


@dataclass(frozen=True)
class IssuedToken:
    """An encoded token and the fields it was built from."""
    token: str
    fields: TokenFields


def _now_ms() -> int:
    return int(time.time() * 1000)


class TokenIssuer:
    """Builds field sets for each token kind and encodes them."""

    def __init__(self, codec: TokenCodec, config: AccountConfig, clock: Optional[Callable[[], int]] = None):
        self.codec = codec
        self.config = config
        self.clock = clock or _now_ms
        self.logger = get_logger("account.issuer")

    def _expiry(self, lifetime_seconds: int) -> int:
        return self.clock() + lifetime_seconds * 1000

    async def _issue_short(self, fields: TokenFields) -> IssuedToken:
        token = await self.codec.encode(fields)
        self.logger.info("Token issued", pid=fields.pid, token_type=fields.token_type, format="short")
        return IssuedToken(token=token, fields=fields)

    async def _issue_long(self, fields: TokenFields) -> IssuedToken:
        material = await self.codec.material()
        token = await self.codec.encode(fields, material)
        self.logger.info("Token issued", pid=fields.pid, token_type=fields.token_type, format="long")
        return IssuedToken(token=token, fields=fields)

    async def issue_access_token(self, pid: int, system_type: int) -> IssuedToken:
        """OAuth access token."""
        return await self._issue_short(TokenFields(
            system_type=system_type,
            token_type=TokenType.OAUTH_ACCESS,
            pid=pid,
            expire_time=self._expiry(self.config.access_token_lifetime)
        ))

    async def issue_refresh_token(self, pid: int, system_type: int) -> IssuedToken:
        """OAuth refresh token."""
        return await self._issue_short(TokenFields(
            system_type=system_type,
            token_type=TokenType.OAUTH_REFRESH,
            pid=pid,
            expire_time=self._expiry(self.config.refresh_token_lifetime)
        ))

    async def issue_password_reset_token(self, pid: int, access_level: int) -> IssuedToken:
        """Token embedded in password reset links, valid for one day by default."""
        return await self._issue_long(TokenFields(
            system_type=SystemType.API,
            token_type=TokenType.PASSWORD_RESET,
            pid=pid,
            access_level=access_level,
            title_id=0,
            expire_time=self._expiry(self.config.password_reset_lifetime)
        ))

    async def issue_service_token(self, pid: int, access_level: int, title_id: int, system_type: int) -> IssuedToken:
        """Token scoped to a title's service."""
        return await self._issue_long(TokenFields(
            system_type=system_type,
            token_type=TokenType.SERVICE,
            pid=pid,
            access_level=access_level,
            title_id=title_id,
            expire_time=self._expiry(self.config.service_token_lifetime)
        ))

    async def issue_nex_token(self, pid: int, access_level: int, title_id: int, system_type: int) -> IssuedToken:
        """Token handed to NEX game servers."""
        return await self._issue_long(TokenFields(
            system_type=system_type,
            token_type=TokenType.NEX,
            pid=pid,
            access_level=access_level,
            title_id=title_id,
            expire_time=self._expiry(self.config.service_token_lifetime)
        ))
