"""Issue a bearer token for local development.

Usage:
    python -m scripts.issue_dev_token <actor_id> [minutes]
Tokens are normally issued by the identity provider; this mints one signed
with SECRET_KEY so the API can be exercised locally.
All imports use app.*.
"""

import sys
from datetime import timedelta

from app.core.config import get_settings
from app.infrastructure.security.jwt import create_access_token


def main() -> None:
    """Print a signed token whose subject is the given actor id."""
    if len(sys.argv) < 2 or not sys.argv[1].strip():
        print(
            "Usage: python -m scripts.issue_dev_token <actor_id> [minutes]",
            file=sys.stderr,
        )
        sys.exit(1)
    actor_id = sys.argv[1].strip()
    settings = get_settings()
    minutes = (
        int(sys.argv[2]) if len(sys.argv) > 2 else settings.access_token_expire_minutes
    )
    if not settings.secret_key.get_secret_value():
        print("SECRET_KEY is not set; tokens would be unverifiable", file=sys.stderr)
        sys.exit(1)
    print(create_access_token(actor_id, expires_delta=timedelta(minutes=minutes)))


if __name__ == "__main__":
    main()
