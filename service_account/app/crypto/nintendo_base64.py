"""
Base64 variant used by Nintendo clients in query strings and NASC bodies.
"""

import base64
from typing import Union

_ENCODE_TABLE = str.maketrans({"+": ".", "/": "-", "=": "*"})
_DECODE_TABLE = str.maketrans({".": "+", "-": "/", "*": "="})


def nintendo_base64_encode(decoded: Union[bytes, str]) -> str:
    """Encode bytes (or UTF-8 text) with the substituted alphabet."""
    if isinstance(decoded, str):
        decoded = decoded.encode("utf-8")

    return base64.b64encode(decoded).decode("ascii").translate(_ENCODE_TABLE)


def nintendo_base64_decode(encoded: str) -> bytes:
    """Undo the alphabet substitution and decode standard base64."""
    return base64.b64decode(encoded.translate(_DECODE_TABLE))
