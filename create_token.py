"""Print a bearer token for an existing user.

Usage:
    python create_token.py --username mluukkai [--hours 24]

The token is signed with the ``SECRET_KEY`` the server uses, so both
must see the same environment.
"""
import argparse
import sys

from blog_catalog_api.app.core import store
from blog_catalog_api.app.core.config import settings
from blog_catalog_api.app.core.db import get_cursor, init_db
from blog_catalog_api.app.core.security import CredentialManager


def main() -> int:
    ap = argparse.ArgumentParser(description="Issue a bearer token for a Blog Catalog user.")
    ap.add_argument("--username", required=True, help="Username to issue the token for")
    ap.add_argument("--hours", type=float, default=1.0, help="Token lifetime in hours (default 1)")
    args = ap.parse_args()

    init_db()
    with get_cursor() as cursor:
        user = store.users.find_by_field(cursor, "username", args.username)
    if user is None:
        print(f"[!] No user found with username: {args.username}", file=sys.stderr)
        return 2

    credentials = CredentialManager.from_settings(settings)
    print(credentials.issue_token(user["id"], user["username"], expires_delta=int(args.hours * 3600)))
    return 0


if __name__ == "__main__":
    sys.exit(main())
