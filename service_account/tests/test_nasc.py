"""
Tests for request value helpers and NASC errors.
"""

from urllib.parse import parse_qs

from service_account.app.crypto.nintendo_base64 import nintendo_base64_decode
from service_account.app.nasc import (
    get_value_from_headers,
    get_value_from_query_string,
    make_safe_qs,
    nasc_error,
)


def test_make_safe_qs_drops_non_strings():
    assert make_safe_qs({"a": "1", "b": ["2"], "c": {"d": "3"}}) == {"a": "1"}


def test_query_value_single():
    assert get_value_from_query_string({"token": "abc"}, "token") == "abc"


def test_query_value_multiple_takes_first():
    assert get_value_from_query_string({"token": ["abc", "def"]}, "token") == "abc"


def test_query_value_nested():
    qs = {"token": {"token": "abc", "other": ["x"]}}

    assert get_value_from_query_string(qs, "token") == "abc"
    assert get_value_from_query_string({"token": {"other": "x"}}, "token") is None


def test_query_value_missing():
    assert get_value_from_query_string({}, "token") is None
    assert get_value_from_query_string({"token": ""}, "token") is None


def test_header_value():
    assert get_value_from_headers({"x-nintendo-client-id": "a2efa818"}, "x-nintendo-client-id") == "a2efa818"
    assert get_value_from_headers({"x-nintendo-client-id": ["a", "b"]}, "x-nintendo-client-id") == "a"
    assert get_value_from_headers({}, "x-nintendo-client-id") is None


def test_nasc_error_body():
    body = nasc_error("102", now_ms=1700000000000)
    params = parse_qs(body)

    assert "retry=MQ**" in body
    assert params["returncd"] == ["MTAy"]
    assert nintendo_base64_decode(params["datetime"][0]) == b"1700000000000"


def test_nasc_error_null_code():
    params = parse_qs(nasc_error("null", now_ms=0))

    assert params["returncd"] == ["null"]
