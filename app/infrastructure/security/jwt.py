"""Bearer token handling for actor identity.

Tokens are issued by the upstream identity provider; this service only
verifies them. The ``sub`` claim is the actor id passed to the workflow
engine. create_access_token exists for development tokens and tests.
"""

from datetime import UTC, datetime, timedelta
from typing import Any, cast

from jose import JWTError, jwt

from app.core.config import get_settings


def create_access_token(
    actor_id: str,
    expires_delta: timedelta | None = None,
    extra_claims: dict[str, Any] | None = None,
) -> str:
    """Create a signed JWT whose subject is actor_id.

    Args:
        actor_id: Identity of the actor (becomes ``sub``).
        expires_delta: Optional TTL; else settings.access_token_expire_minutes.
        extra_claims: Additional claims to embed (e.g. display name).

    Returns:
        Encoded JWT string.
    """
    settings = get_settings()
    lifetime = (
        expires_delta
        if expires_delta is not None
        else timedelta(minutes=settings.access_token_expire_minutes)
    )
    claims: dict[str, Any] = dict(extra_claims or {})
    claims["sub"] = actor_id
    claims["exp"] = datetime.now(UTC) + lifetime
    encoded = jwt.encode(
        claims,
        settings.secret_key.get_secret_value(),
        algorithm=settings.algorithm,
    )
    return cast(str, encoded)


def verify_token(token: str) -> dict[str, Any]:
    """Verify and decode a JWT.

    Enforces presence of exp and a non-empty sub.

    Raises:
        ValueError: If the token is invalid, expired or missing required claims.
    """
    settings = get_settings()
    try:
        payload = jwt.decode(
            token,
            settings.secret_key.get_secret_value(),
            algorithms=[settings.algorithm],
            options={"require_exp": True, "require_sub": True},
        )
    except JWTError as e:
        raise ValueError(f"Invalid token: {e!s}") from e
    sub = payload.get("sub")
    if not isinstance(sub, str) or not sub.strip():
        raise ValueError("Token missing required claim: sub")
    return payload
