#!/usr/bin/env python3
"""
QuoraLite -- administrative command line.

Admin accounts cannot be created over HTTP: /user/signup always creates
non-admin users. This tool is the bootstrap path for the first admin.

Usage:
  python main.py create-admin --username admin --email admin@example.com
  python main.py create-admin --username admin --email admin@example.com --password 's3cret'
  python main.py create-admin ... --database-url sqlite:///./quoralite.db

Environment variables:
  DATABASE_URL  Database to write to (same variable the API server reads).
  SECRET_KEY    Required unless DEBUG=true (see core/config.py).
"""

import argparse
import getpass
import sys
from typing import Optional

from auth.accounts import AccountService
from auth.models import ROLE_ADMIN, User
from auth.sessions import SessionService
from auth.store import SessionStore, UserStore
from auth.tokens import MAX_PASSWORD_BYTES, password_fits
from core.errors import SignupRestricted


def create_admin(
    username: str,
    email: str,
    password: str,
    first_name: str = "",
    last_name: str = "",
    database_url: Optional[str] = None,
) -> User:
    """Create an admin account and return it. Raises SignupRestricted on a duplicate."""
    users = UserStore(database_url)
    sessions = SessionStore(database_url)
    try:
        accounts = AccountService(users, SessionService(sessions, users))
        new_user = User(
            uuid="",
            username=username,
            email=email,
            role=ROLE_ADMIN,
            first_name=first_name,
            last_name=last_name,
        )
        return accounts.signup(new_user, password, role=ROLE_ADMIN)
    finally:
        sessions.close()
        users.close()


def _read_password() -> str:
    first = getpass.getpass("  Password: ")
    second = getpass.getpass("  Repeat password: ")
    if first != second:
        print("  [!] Passwords do not match.")
        sys.exit(1)
    return first


def main(argv: Optional[list[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        description="QuoraLite administrative tasks.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    sub = parser.add_subparsers(dest="command")

    admin = sub.add_parser("create-admin", help="Create an admin account")
    admin.add_argument("--username", required=True)
    admin.add_argument("--email", required=True)
    admin.add_argument("--password", help="Omit to be prompted (keeps it out of shell history)")
    admin.add_argument("--first-name", default="")
    admin.add_argument("--last-name", default="")
    admin.add_argument("--database-url", default=None, help="Overrides DATABASE_URL")

    args = parser.parse_args(argv)

    if args.command != "create-admin":
        parser.print_help()
        return 1

    password = args.password or _read_password()
    if not password:
        print("  [!] Password must not be empty.")
        return 1
    if not password_fits(password):
        print(f"  [!] Password must be at most {MAX_PASSWORD_BYTES} bytes.")
        return 1

    try:
        user = create_admin(
            args.username,
            args.email,
            password,
            first_name=args.first_name,
            last_name=args.last_name,
            database_url=args.database_url,
        )
    except SignupRestricted as exc:
        print(f"  [!] {exc.code}: {exc.message}")
        return 1

    print(f"  Admin '{user.username}' created (uuid {user.uuid}).")
    return 0


if __name__ == "__main__":
    sys.exit(main())
