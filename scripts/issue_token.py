"""
Issue a bearer token for the Prosecution Tracker API.

Usage:
    python scripts/issue_token.py                       # viewer token, default expiry
    python scripts/issue_token.py --role admin --subject ops@example.com
    python scripts/issue_token.py --minutes 60

Tokens are signed with SECRET_KEY from the environment (or .env), so run
this with the same configuration as the API.
"""

import argparse
import os
import sys

# Ensure the project root is on the path when run directly
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from prosecution_tracker.routers.auth import ROLE_ADMIN, ROLE_VIEWER, create_access_token


def main() -> None:
    parser = argparse.ArgumentParser(description="Mint a JWT for the API.")
    parser.add_argument("--role", choices=[ROLE_VIEWER, ROLE_ADMIN], default=ROLE_VIEWER)
    parser.add_argument("--subject", default="cli", help="Value for the `sub` claim")
    parser.add_argument("--minutes", type=int, default=None, help="Expiry in minutes")
    args = parser.parse_args()

    token = create_access_token({"sub": args.subject, "role": args.role}, args.minutes)
    print(token)


if __name__ == "__main__":
    main()
