"""
Tests for TokenIssuer.
"""

import pytest

from service_account.app.tokens.issuer import TokenIssuer
from service_account.app.tokens.models import SystemType, TokenType
from shared.config import AccountConfig

NOW_MS = 1700000000000


@pytest.fixture
def issuer(codec):
    """Issuer with a frozen clock."""
    return TokenIssuer(codec, AccountConfig(), clock=lambda: NOW_MS)


class TestTokenIssuer:
    """Token kinds."""

    @pytest.mark.asyncio
    async def test_access_token(self, issuer, codec):
        issued = await issuer.issue_access_token(1750087940, SystemType.WIIU)
        result = await codec.decode_token(issued.token)

        assert result.token_fields == issued.fields
        assert result.token_fields.token_type == TokenType.OAUTH_ACCESS
        assert result.token_fields.expire_time == NOW_MS + 3600 * 1000
        assert result.token_fields.is_long is False

    @pytest.mark.asyncio
    async def test_refresh_token(self, issuer, codec):
        issued = await issuer.issue_refresh_token(1750087940, SystemType.CTR)
        result = await codec.decode_token(issued.token)

        assert result.token_fields.token_type == TokenType.OAUTH_REFRESH
        assert result.token_fields.system_type == SystemType.CTR

    @pytest.mark.asyncio
    async def test_password_reset_token(self, issuer, codec):
        issued = await issuer.issue_password_reset_token(1750087940, access_level=0)
        result = await codec.decode_token(issued.token)

        assert result.valid is True
        assert result.token_fields.system_type == SystemType.API
        assert result.token_fields.token_type == TokenType.PASSWORD_RESET
        assert result.token_fields.access_level == 0
        assert result.token_fields.title_id == 0
        assert result.token_fields.expire_time == NOW_MS + 24 * 60 * 60 * 1000

    @pytest.mark.asyncio
    async def test_service_and_nex_tokens(self, issuer, codec):
        title_id = 0x000500001018DC00

        service = await issuer.issue_service_token(1750087940, 3, title_id, SystemType.WIIU)
        nex = await issuer.issue_nex_token(1750087940, 3, title_id, SystemType.WIIU)

        service_fields = (await codec.decode_token(service.token)).token_fields
        nex_fields = (await codec.decode_token(nex.token)).token_fields

        assert service_fields.token_type == TokenType.SERVICE
        assert nex_fields.token_type == TokenType.NEX
        assert service_fields.title_id == title_id
        assert nex_fields.access_level == 3

    @pytest.mark.asyncio
    async def test_configured_lifetime(self, codec):
        issuer = TokenIssuer(codec, AccountConfig(access_token_lifetime=60), clock=lambda: NOW_MS)

        issued = await issuer.issue_access_token(1, SystemType.WIIU)

        assert issued.fields.expire_time == NOW_MS + 60 * 1000
