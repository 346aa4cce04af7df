"""Profile endpoints - GET/PUT /profile."""

from typing import Annotated

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from backend.app.api.auth import get_current_context
from backend.app.api.deps import AppServices, get_services
from backend.app.db.context import RequestContext
from backend.app.models.common import Category
from backend.app.models.profile import Preferences, UserProfile

router = APIRouter(prefix="/profile", tags=["profile"])


class SaveProfileRequest(BaseModel):
    """Request body for PUT /profile."""

    category: Category
    preferences: Preferences = Field(default_factory=Preferences)


@router.get("", response_model=UserProfile | None)
async def get_profile(
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    services: Annotated[AppServices, Depends(get_services)],
) -> UserProfile | None:
    """Get the caller's profile, or null if none was saved."""
    return await services.profiles.get_profile(ctx)


@router.put("", response_model=UserProfile)
async def save_profile(
    request: SaveProfileRequest,
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    services: Annotated[AppServices, Depends(get_services)],
) -> UserProfile:
    """Create or replace the caller's profile."""
    return await services.profiles.upsert_profile(
        ctx, category=request.category, preferences=request.preferences
    )
