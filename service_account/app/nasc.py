"""
Request value helpers and NASC error bodies.

Query and header values arrive as a single string, a list of strings, or a
nested mapping. Handlers only ever want one string.
"""

import time
from typing import Any, Mapping, Optional, Dict
from urllib.parse import urlencode

from .crypto.nintendo_base64 import nintendo_base64_encode


def make_safe_qs(query: Mapping[str, Any]) -> Dict[str, str]:
    """Keep only the string values of a parsed query."""
    return {key: value for key, value in query.items() if isinstance(value, str)}


def get_value_from_query_string(qs: Mapping[str, Any], key: str) -> Optional[str]:
    """First string value for ``key``; nested mappings are searched for ``key``."""
    value = qs.get(key)
    if not value:
        return None

    if isinstance(value, (list, tuple)):
        value = value[0]

    if isinstance(value, str):
        return value

    if isinstance(value, Mapping):
        return make_safe_qs(value).get(key)

    return None


def get_value_from_headers(headers: Mapping[str, Any], key: str) -> Optional[str]:
    """First value of a header that may have been sent more than once."""
    value = headers.get(key)
    if not value:
        return None

    if isinstance(value, (list, tuple)):
        value = value[0]

    return value


def nasc_error(error_code: str, now_ms: Optional[int] = None) -> str:
    """Form-encoded NASC error body."""
    if now_ms is None:
        now_ms = int(time.time() * 1000)

    params = {
        "retry": nintendo_base64_encode("1"),
        "returncd": error_code if error_code == "null" else nintendo_base64_encode(error_code),
        "datetime": nintendo_base64_encode(str(now_ms)),
    }

    # Padding characters stay literal
    return urlencode(params, safe="*")
