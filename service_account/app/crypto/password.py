"""
Password normalization for account creation and login.

Consoles never send a plaintext password upstream; they send a SHA-256 digest
of the account PID, a fixed marker and the password. The server reproduces
the same digest so both paths compare equal.
"""

import hashlib
import struct

from shared.errors import ValidationError

PASSWORD_MARKER = b"\x02\x65\x43\x46"


def password_digest(password: str, pid: int) -> bytes:
    """Return the raw 32-byte digest for ``password`` owned by ``pid``."""
    if not 0 <= pid <= 0xFFFFFFFF:
        raise ValidationError("pid must fit in 32 bits", details={"pid": pid})
    unpacked = struct.pack("<I", pid) + PASSWORD_MARKER + password.encode("utf-8")
    return hashlib.sha256(unpacked).digest()


def nintendo_password_hash(password: str, pid: int) -> str:
    """Return the digest as lowercase hex, the form stored and compared."""
    return password_digest(password, pid).hex()
