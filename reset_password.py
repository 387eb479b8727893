#!/usr/bin/env python3
"""
Reset a user's password in the Blog Catalog SQLite database.

This script does not read or reveal any existing password.  It stores a
new hash (PBKDF2-HMAC-SHA256, format "salthex$hashhex") for the given
username, using the same hashing code as the server.

Usage:
    python reset_password.py --db ./blog_catalog_api/blog_catalog.db --username mluukkai --password "NewPass!234"

If --password is omitted, you will be prompted to enter it securely.
"""

import argparse
import getpass
import os
import sqlite3
import sys

from blog_catalog_api.app.core.errors import PolicyError
from blog_catalog_api.app.core.security import CredentialManager


def main() -> None:
    ap = argparse.ArgumentParser(description="Reset a Blog Catalog user's password (SQLite).")
    ap.add_argument("--db", required=True, help="Path to SQLite DB file (e.g., ./blog_catalog_api/blog_catalog.db)")
    ap.add_argument("--username", required=True, help="Username to update")
    ap.add_argument("--password", help="New password. If omitted, you'll be prompted securely.")
    args = ap.parse_args()

    if not os.path.exists(args.db):
        print(f"[!] DB not found: {args.db}", file=sys.stderr)
        sys.exit(1)

    new_password = args.password or getpass.getpass("Enter NEW password: ")
    # Hashing needs no secret; only token signing does.
    try:
        hashed = CredentialManager(secret_key="").hash_password(new_password)
    except PolicyError as exc:
        print(f"[!] {exc.reason}", file=sys.stderr)
        sys.exit(1)

    conn = sqlite3.connect(args.db)
    try:
        cur = conn.cursor()
        cur.execute("SELECT id FROM users WHERE username = ?", (args.username,))
        if not cur.fetchone():
            print(f"[!] No user found with username: {args.username}", file=sys.stderr)
            sys.exit(2)

        cur.execute("UPDATE users SET password_hash = ? WHERE username = ?", (hashed, args.username))
        conn.commit()
        print(f"[+] Password updated for user: {args.username}")
    finally:
        conn.close()


if __name__ == "__main__":
    main()
