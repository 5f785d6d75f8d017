#!/usr/bin/env python3
"""
Developer command line for account tokens.

Hashes passwords, converts NintendoBase64 values and inspects wire tokens
against the key directory configured for the service.
"""

import argparse
import asyncio
import json
import sys
from typing import List, Optional

from shared.config import get_config
from shared.errors import AccountLayerException
from shared.logging import configure_logging
from .crypto.nintendo_base64 import nintendo_base64_decode, nintendo_base64_encode
from .crypto.password import nintendo_password_hash
from .keys.provider import FileKeyProvider
from .tokens.codec import TokenCodec


async def inspect(token: str, keys_path: str, service: str, nintendo: bool) -> dict:
    """Decode a token and return a JSON-ready summary."""
    codec = TokenCodec(FileKeyProvider(keys_path), service=service)
    result = await codec.decode_token(token, nintendo=nintendo)
    return result.model_dump(mode="json")


def _parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    config = get_config()

    parser = argparse.ArgumentParser(prog="account-tokens", description="Account token utilities.")
    parser.add_argument("--log-level", default=config.log_level, help="Log level")
    subparsers = parser.add_subparsers(dest="command", required=True)

    hash_parser = subparsers.add_parser("hash-password", help="Hash a password for a PID")
    hash_parser.add_argument("password")
    hash_parser.add_argument("pid", type=int)

    inspect_parser = subparsers.add_parser(
        "inspect",
        help="Decode and verify a wire token",
        epilog="NintendoBase64 tokens may start with '-'; pass them as --token=VALUE, after '--', or on stdin.",
    )
    token_group = inspect_parser.add_mutually_exclusive_group()
    token_group.add_argument("token", nargs="?", help="Wire token; read from stdin when omitted or '-'")
    token_group.add_argument("--token", dest="token_option", metavar="TOKEN", help="Wire token given as an option")
    inspect_parser.add_argument("--keys-path", default=config.keys_path, help="Key directory root")
    inspect_parser.add_argument("--service", default=config.token_service, help="Service whose keys to use")
    inspect_parser.add_argument("--nintendo", action="store_true", help="Token uses the NintendoBase64 alphabet")

    b64_parser = subparsers.add_parser("b64", help="NintendoBase64 conversion")
    b64_parser.add_argument("direction", choices=["encode", "decode"])
    b64_parser.add_argument("value")

    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = _parse_args(argv)
    configure_logging("account", args.log_level)

    if args.command == "hash-password":
        try:
            print(nintendo_password_hash(args.password, args.pid))
        except AccountLayerException as exc:
            print(f"[account-tokens] {exc.code}: {exc.message}", file=sys.stderr)
            return 1
        return 0

    if args.command == "b64":
        if args.direction == "encode":
            print(nintendo_base64_encode(args.value))
            return 0

        try:
            decoded = nintendo_base64_decode(args.value)
        except ValueError as exc:
            print(f"[account-tokens] invalid NintendoBase64: {exc}", file=sys.stderr)
            return 1

        sys.stdout.buffer.write(decoded + b"\n")
        return 0

    token = args.token_option or args.token
    if token is None or token == "-":
        token = sys.stdin.read()
    token = token.strip()

    try:
        summary = asyncio.run(inspect(token, args.keys_path, args.service, args.nintendo))
    except AccountLayerException as exc:
        print(f"[account-tokens] {exc.code}: {exc.message}", file=sys.stderr)
        return 1

    print(json.dumps(summary, indent=2))
    return 0 if summary["valid"] else 2


if __name__ == "__main__":
    raise SystemExit(main())
