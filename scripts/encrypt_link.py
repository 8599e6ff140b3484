#!/usr/bin/env python3
"""Encrypt or decrypt a product download link with the link encryption key.

Operators use this to seed ``products.download_link``:

    LINK_ENCRYPTION_KEY=... python scripts/encrypt_link.py encrypt https://files.example/x.zip
    python scripts/encrypt_link.py --key ... decrypt <iv_hex:cipher_hex>
"""
from __future__ import annotations

import argparse
import os
import sys

from domain.common.exceptions import BusinessException
from infrastructure.security.link_cipher import AesCbcLinkCipher


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument(
        "--key",
        default=os.environ.get("LINK_ENCRYPTION_KEY") or os.environ.get("ENCRYPT_KEY"),
        help="encryption key (defaults to $LINK_ENCRYPTION_KEY)",
    )
    sub = parser.add_subparsers(dest="command", required=True)
    enc = sub.add_parser("encrypt", help="encrypt a plaintext link")
    enc.add_argument("value")
    dec = sub.add_parser("decrypt", help="decrypt an iv:ciphertext envelope")
    dec.add_argument("value")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        cipher = AesCbcLinkCipher(args.key or "")
        if args.command == "encrypt":
            print(cipher.encrypt(args.value))
        else:
            print(cipher.decrypt(args.value))
    except BusinessException as exc:
        print(f"error: {exc.message}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
