"""Request context for ownership enforcement."""

from dataclasses import dataclass
from uuid import UUID


@dataclass(frozen=True)
class RequestContext:
    """Request context containing the caller's identity.

    Used to enforce ownership boundaries in all database operations.
    """

    user_id: UUID
