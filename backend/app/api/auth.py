"""Bearer auth dependency.

The bearer token is the caller's user id. Identity verification is delegated
to the fronting gateway; this layer only parses the header.
"""

import uuid
from typing import Annotated

from fastapi import Header, HTTPException, status

from backend.app.db.context import RequestContext


def _unauthorized() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Not authenticated",
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_context(
    authorization: Annotated[str | None, Header()] = None,
) -> RequestContext:
    """Extract request context from authorization header.

    Args:
        authorization: Authorization header ("Bearer <user-uuid>")

    Returns:
        RequestContext with the caller's user_id

    Raises:
        HTTPException: 401 if the header is missing or malformed
    """
    if not authorization or not authorization.startswith("Bearer "):
        raise _unauthorized()

    token = authorization[7:].strip()  # Strip "Bearer "

    try:
        return RequestContext(user_id=uuid.UUID(token))
    except ValueError as e:
        raise _unauthorized() from e
