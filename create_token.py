#!/usr/bin/env python3
"""
Issue a bearer token for the Pet Registry API.

The token's subject becomes the caller identity: pets created with it
are owned by that identity, and only that identity may delete them.
The token is signed with ``SECRET_KEY`` from the environment (or the
value passed with ``--secret``).

Usage:
    python create_token.py --owner alice --days 365
"""

import argparse
import sys

from pet_registry_api.app.core.security import create_access_token


def main(argv=None) -> int:
    ap = argparse.ArgumentParser(description="Issue a Pet Registry bearer token.")
    ap.add_argument("--owner", required=True, help="Caller identity to embed as the token subject")
    ap.add_argument("--days", type=int, default=1, help="Token lifetime in days (default: 1)")
    ap.add_argument("--secret", help="Signing key. Defaults to SECRET_KEY from the environment.")
    args = ap.parse_args(argv)

    if not args.owner.strip():
        print("[!] Empty owner identity is not allowed.", file=sys.stderr)
        return 1
    if args.days <= 0:
        print("[!] Token lifetime must be positive.", file=sys.stderr)
        return 1

    token = create_access_token(
        {"sub": args.owner},
        expires_delta=args.days * 24 * 60 * 60,
        secret_key=args.secret,
    )
    print(token)
    return 0


if __name__ == "__main__":
    sys.exit(main())
