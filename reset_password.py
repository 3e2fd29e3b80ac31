#!/usr/bin/env python3
"""
Reset a user's password in the Sales Tracker database.

This script does not read or reveal existing passwords.  It stores a
new bcrypt hash for the given email, using the same database settings
as the API (``DATABASE_URL``) unless ``--db`` points elsewhere.

Usage:
    python reset_password.py --email rep@example.com --password "NewStrongPass!234"
    python reset_password.py --db ./sales_tracker.db --email rep@example.com

If --password is omitted, you will be prompted to enter it securely.
"""

import argparse
import asyncio
import getpass
import sys

from sales_tracker_api.app.core.config import settings
from sales_tracker_api.app.core.db import init_db
from sales_tracker_api.app.services.user_service import UserService


def main(argv=None) -> int:
    ap = argparse.ArgumentParser(description="Reset a Sales Tracker user password.")
    ap.add_argument("--db", help="SQLite file or PostgreSQL URL (defaults to DATABASE_URL)")
    ap.add_argument("--email", required=True, help="User email to update")
    ap.add_argument("--password", help="New password. If omitted, you'll be prompted securely.")
    args = ap.parse_args(argv)

    if args.db:
        settings.database_url = args.db

    new_password = args.password or getpass.getpass("Enter NEW password: ")
    if not new_password:
        print("[!] Empty password is not allowed.", file=sys.stderr)
        return 1

    init_db()
    if not asyncio.run(UserService.reset_password(args.email, new_password)):
        print(f"[!] No user found with email: {args.email}", file=sys.stderr)
        return 2
    print(f"[+] Password updated for user: {args.email}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
