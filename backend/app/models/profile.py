"""User profile models."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel

from backend.app.models.common import Category, Theme


class Preferences(BaseModel):
    """UI preferences stored with the profile."""

    theme: Theme = Theme.light
    notifications: bool = True


class UserProfile(BaseModel):
    """Per-user profile; one row per user, upserted."""

    user_id: UUID
    category: Category
    preferences: Preferences
    updated_at: datetime
