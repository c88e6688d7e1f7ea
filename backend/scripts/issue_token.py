"""Mint a development bearer token, signed like the identity provider's."""
import argparse
import sys
from datetime import timedelta
from pathlib import Path

# Add the parent directory to sys.path to allow importing from app
backend_dir = Path(__file__).parent.parent
sys.path.append(str(backend_dir))

from app.core.auth import create_access_token


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("account_id", help="value of the token's sub claim")
    parser.add_argument("email")
    parser.add_argument("--minutes", type=int, default=60, help="token lifetime")
    args = parser.parse_args()

    token = create_access_token(
        {"sub": args.account_id, "email": args.email},
        timedelta(minutes=args.minutes),
    )
    print(token)

if __name__ == "__main__":
    main()
