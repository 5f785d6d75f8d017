"""
Tests for shared configuration and errors.
"""

import json
import logging
from datetime import datetime

from shared.config import AccountConfig, get_config
from shared.errors import KeyNotFoundError, TokenValidationError, ValidationError
from shared.logging import (
    add_correlation_context,
    clear_context,
    configure_logging,
    get_logger,
    set_request_id,
    set_user_context,
)


def test_config_defaults():
    config = AccountConfig()

    assert config.token_service == "account"
    assert config.password_reset_lifetime == 24 * 60 * 60


def test_config_from_environment(monkeypatch):
    monkeypatch.setenv("ACCOUNT_ACCESS_TOKEN_LIFETIME", "120")
    monkeypatch.setenv("ACCOUNT_KEYS_PATH", "/etc/account/keys")

    config = get_config()

    assert config.access_token_lifetime == 120
    assert config.keys_path == "/etc/account/keys"


def test_error_response_carries_request_id():
    set_request_id("req-1")
    try:
        response = TokenValidationError("Long tokens require access_level and title_id", details={"missing": ["title_id"]}).to_response()
    finally:
        clear_context()

    assert response.request_id == "req-1"
    assert response.code == "VALIDATION_ERROR"
    assert response.details == {"missing": ["title_id"]}


def test_error_hierarchy():
    error = KeyNotFoundError("account", "aes.key")

    assert isinstance(TokenValidationError(), ValidationError)
    assert error.code == "KEY_NOT_FOUND"
    assert "aes.key" in error.message


def test_log_records_carry_iso_timestamp(caplog):
    configure_logging("account", "info")
    caplog.set_level(logging.INFO, logger="account")

    get_logger("account.timestamps").info("hello", pid=7)

    event = json.loads(caplog.records[-1].getMessage())
    assert event["event"] == "hello"
    assert event["service"] == "account"
    assert isinstance(event["timestamp"], str)
    assert datetime.fromisoformat(event["timestamp"].replace("Z", "+00:00")).year >= 2024


def test_correlation_context_includes_user_id():
    set_request_id("req-2")
    set_user_context("1750087940")
    try:
        event = add_correlation_context(None, "info", {"event": "login"})
    finally:
        clear_context()

    assert event["request_id"] == "req-2"
    assert event["user_id"] == "1750087940"
    assert "user_id" not in add_correlation_context(None, "info", {})
