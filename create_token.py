"""Print an access token for an existing user id (development aid).

Usage:
    JWT_SECRET=change-me python create_token.py --user-id 1 --minutes 1440
"""
import argparse

from bookshelf_api.app.core.config import Settings
from bookshelf_api.app.core.security import create_access_token


def main() -> None:
    ap = argparse.ArgumentParser(description="Issue a bearer token for a Bookshelf API user.")
    ap.add_argument("--user-id", type=int, required=True, help="Id of the user the token is issued for")
    ap.add_argument("--minutes", type=int, help="Token lifetime; defaults to ACCESS_TOKEN_EXPIRE_MINUTES")
    args = ap.parse_args()

    settings = Settings()
    settings.validate()
    minutes = args.minutes or settings.access_token_expire_minutes
    print(create_access_token({"sub": str(args.user_id)}, settings.jwt_secret, expires_delta=minutes * 60))


if __name__ == "__main__":
    main()
