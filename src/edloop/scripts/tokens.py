# src/edloop/scripts/tokens.py
"""
Mint a bearer token for an existing user.

Useful for local development against the API without running the
authentication service:

    python -m edloop.scripts.tokens alice
"""

from __future__ import annotations

import argparse
import sys

from sqlalchemy import select
from sqlalchemy.orm import Session

from edloop.core.security import create_access_token
from edloop.db.session import SessionLocal
from edloop.models import User


def find_user(db: Session, username: str) -> User | None:
    """Return the user with ``username``, if any."""
    return db.execute(select(User).where(User.username == username)).scalars().first()


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Mint an EdLoop bearer token.")
    parser.add_argument("username", help="Username of an existing user")
    args = parser.parse_args(argv)

    db = SessionLocal()
    try:
        user = find_user(db, args.username)
    finally:
        db.close()

    if user is None:
        print(f"No user named {args.username!r}", file=sys.stderr)
        return 1

    print(create_access_token(user.id))
    return 0


if __name__ == "__main__":
    sys.exit(main())
