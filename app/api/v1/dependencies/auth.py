"""Actor identity dependencies (composition root).

The bearer token's ``sub`` claim is the actor id. Routes receive it as a
plain string and pass it explicitly to WorkflowService.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.domain.exceptions import AuthenticationException
from app.infrastructure.security.jwt import verify_token

_http_bearer = HTTPBearer(auto_error=False)


async def get_current_actor_id_optional(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(_http_bearer)],
) -> str | None:
    """Return the actor id from a valid bearer token; None if absent or invalid."""
    if not credentials:
        return None
    try:
        payload = verify_token(credentials.credentials)
    except ValueError:
        return None
    return str(payload["sub"]).strip()


async def get_current_actor_id(
    actor_id: Annotated[str | None, Depends(get_current_actor_id_optional)],
) -> str:
    """Return the actor id; raise AuthenticationException (401) if not authenticated."""
    if not actor_id:
        raise AuthenticationException("Not authenticated")
    return actor_id
