"""
Encoding and hashing primitives used around the token codec.

- nintendo_base64: base64 with a URL query safe alphabet, as consoles expect.
- password: normalizes account passwords before they go upstream.
"""

from .nintendo_base64 import nintendo_base64_decode, nintendo_base64_encode
from .password import nintendo_password_hash, password_digest

__all__ = [
    "nintendo_base64_decode",
    "nintendo_base64_encode",
    "nintendo_password_hash",
    "password_digest",
]
